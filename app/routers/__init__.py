from fastapi import APIRouter

from . import bookings
from . import bays
from . import logs
from . import dashboard
from . import telegram_settings

api_router = APIRouter()

# Include routers with their prefixes
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(bays.router, prefix="/bays", tags=["bays"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(telegram_settings.router, prefix="/settings", tags=["settings"])
