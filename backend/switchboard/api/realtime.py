# switchboard/api/realtime.py
"""
Real-time channel.

The handshake is authenticated with the same signed token as HTTP
requests (auth cookie). A missing or invalid token does not reject the
connection: it is accepted anonymously and receives no personalized
events. Only identified connections are registered for presence.
"""

import logging

from fastapi import APIRouter, WebSocket, status

from switchboard.core.config import settings
from switchboard.core.presence import registry
from switchboard.core.security import extract_token, resolve_user_id

logger = logging.getLogger(__name__)

router = APIRouter()


def authenticate_connection(websocket: WebSocket):
    """User id for the handshake, or None for an anonymous connection."""
    return resolve_user_id(extract_token(websocket.cookies, websocket.headers))


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket):
    origin = websocket.headers.get("origin")
    if not settings.is_origin_allowed(origin):
        logger.warning("Rejected real-time handshake from origin %s", origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = authenticate_connection(websocket)

    # Register before accepting so the client never sees an accepted but unregistered socket
    if user_id is not None:
        registry.register(user_id, websocket)

    try:
        await websocket.accept()
        logger.info(
            "Real-time connection opened (%s)", f"user {user_id}" if user_id else "anonymous"
        )

        # No client events are defined; reading only observes the disconnect
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        if user_id is not None:
            registry.deregister(user_id, websocket)
        logger.info(
            "Real-time connection closed (%s)", f"user {user_id}" if user_id else "anonymous"
        )
