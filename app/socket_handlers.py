import socketio
import logging
from jose import JWTError
from pydantic import ValidationError

from app.dependencies import current_user_from_token
from app.services.realtime import BOOKINGS_ROOM

logger = logging.getLogger(__name__)


def register_socketio_handlers(sio: socketio.AsyncServer):
    @sio.event
    async def connect(sid, environ, auth):
        """Authenticate with the access token and subscribe to booking events."""
        token = auth.get('token') if isinstance(auth, dict) else None
        if not token:
            logger.warning(f"Connection refused for {sid}: No token provided.")
            return False
        try:
            user = current_user_from_token(token)
        except (JWTError, ValidationError) as e:
            logger.warning(f"Connection refused for {sid}: {e}")
            return False

        await sio.save_session(sid, {'user_id': user.id, 'role': user.role.value})
        await sio.enter_room(sid, BOOKINGS_ROOM)
        logger.info(f"User {user.id} ({user.role.value}) connected with sid {sid}")
        return True

    @sio.event
    async def disconnect(sid):
        logger.info(f"Client disconnected: {sid}")
