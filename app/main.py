import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
import socketio

from app.core.config import settings
from app.core.exceptions import (
    BookingConflictError, BookingError, InvalidInputError, InvalidStateError, NotFoundError,
)
from app.db.session import AsyncSessionLocal
from app.routers import api_router
from app.services.realtime import RealtimeBroadcaster
from app.services.settings_service import load_telegram_service
from app.crud import crud_bay
from app.socket_handlers import register_socketio_handlers
from app.socket_instance import sio

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with AsyncSessionLocal() as db:
        if settings.SEED_BAYS:
            await crud_bay.seed_if_empty(db, waiting_list_key=settings.WAITING_LIST_BAY_KEY)
        app.state.telegram = await load_telegram_service(db)

    app.state.broadcaster = RealtimeBroadcaster(sio, maxsize=settings.REALTIME_QUEUE_SIZE)
    app.state.broadcaster.start()
    logger.info(f"{settings.PROJECT_NAME} started (timezone {settings.TIMEZONE})")
    try:
        yield
    finally:
        await app.state.broadcaster.stop()


# Initialize FastAPI app, but name it 'fastapi_app' to avoid conflict
fastapi_app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

fastapi_app.state.sio = sio

# Set all CORS enabled origins
if settings.ALLOWED_ORIGINS:
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).strip() for origin in settings.ALLOWED_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@fastapi_app.middleware("http")
async def enforce_deadline(request: Request, call_next):
    try:
        return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"{request.method} {request.url.path} exceeded {settings.REQUEST_TIMEOUT_SECONDS}s")
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content={"detail": "Request timed out."},
        )


_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    BookingConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


@fastapi_app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


fastapi_app.include_router(api_router, prefix=settings.API_V1_STR)


@fastapi_app.get("/health", tags=["health"])
def read_root():
    return {"status": "ok"}

# Create the final ASGI app that wraps FastAPI and Socket.IO.
# This 'app' is what uvicorn will run.
app = socketio.asgi.ASGIApp(sio, other_asgi_app=fastapi_app)
register_socketio_handlers(sio)
