# teleka/routes/websocket/__init__.py
"""WebSocket route handlers initialization."""

import logging

from .base import NAMESPACE
from .notifications import AdminNotifier, build_payload

logger = logging.getLogger(__name__)


def register_websocket_handlers(socketio):
    """Register admin WebSocket event handlers with SocketIO.

    Args:
        socketio: Flask-SocketIO instance

    Returns:
        AdminNotifier that broadcasts notifications to the admin namespace
    """
    logger.info(f"Registering admin notification handlers for namespace: {NAMESPACE}")
    try:
        notifier = AdminNotifier(socketio, NAMESPACE)
        notifier.register_handlers()
    except Exception as e:
        logger.error(f"Failed to register WebSocket handlers: {e}")
        logger.exception("WebSocket registration error:")
        raise
    return notifier


__all__ = ["register_websocket_handlers", "AdminNotifier", "build_payload", "NAMESPACE"]
