# teleka/routes/websocket/base.py
"""Base WebSocket handler with common functionality."""

import logging
from flask import request
from flask_socketio import emit

logger = logging.getLogger(__name__)

# Admin dashboard namespace
NAMESPACE = "/teleka/admin"


class BaseWebSocketHandler:
    """Base class for WebSocket handlers with common functionality."""

    def __init__(self, socketio, namespace=NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def emit_to_client(self, event, data):
        """Emit event to the client that sent the current message."""
        try:
            emit(event, data, namespace=self.namespace)
        except Exception as e:
            logger.error(f"Failed to emit {event}: {e}")

    def broadcast(self, event, data):
        """Emit event to every client in the namespace."""
        self.socketio.emit(event, data, namespace=self.namespace)

    def log_event(self, event_name, data=None):
        """Log WebSocket events consistently."""
        sid = getattr(request, "sid", "unknown")
        if data:
            logger.info(f"[WS] {event_name} - Client: {sid}, Data: {data}")
        else:
            logger.info(f"[WS] {event_name} - Client: {sid}")
