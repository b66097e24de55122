# teleka/routes/websocket/notifications.py
"""Realtime admin notifications over Socket.IO."""

import logging
import time

from .base import BaseWebSocketHandler, NAMESPACE

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Teleka Notification"
DASHBOARD_URL = "/admin/alert.html"


def build_payload(notification):
    """Shape a Notification the way the admin service worker expects it."""
    return {
        "title": NOTIFICATION_TITLE,
        "body": notification.message,
        "data": {
            "url": DASHBOARD_URL,
            "booking": notification.booking,
            "timestamp": notification.timestamp,
        },
    }


class AdminNotifier(BaseWebSocketHandler):
    """Pushes admin notifications to connected dashboards."""

    def register_handlers(self):
        """Register connection-related event handlers."""

        @self.socketio.on("connect", namespace=NAMESPACE)
        def handle_connect(auth=None):
            self.log_event("connect")
            self.emit_to_client("connected", {"status": "connected"})

        @self.socketio.on("disconnect", namespace=NAMESPACE)
        def handle_disconnect(*args):
            self.log_event("disconnect")

        @self.socketio.on("ping", namespace=NAMESPACE)
        def handle_ping():
            """Handle ping for connection testing."""
            self.emit_to_client("pong", {"timestamp": time.time()})

    def __call__(self, notification):
        payload = build_payload(notification)
        logger.debug(f"Broadcasting notification: {payload['body']}")
        self.broadcast("notification", payload)
