"""
Teleka Taxi – main application entry point

* Flask app + Socket.IO serving the booking page API: Maps proxy, fare
  quotes, registration/login and the admin approval workflow.
* Admin dashboards receive notifications live on the `/teleka/admin`
  Socket.IO namespace.
* Everything runs in threading mode; no eventlet/gevent required.
"""

import os
import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from dotenv import load_dotenv

# --------------------------------------------------------------------------- #
# Environment & logging
# --------------------------------------------------------------------------- #
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

from teleka.api.config import get_port, get_websocket_config  # noqa: E402
from teleka.api.repositories import InMemoryAccountRepository  # noqa: E402
from teleka.api.services.account_service import AccountService  # noqa: E402
from teleka.routes import create_accounts_blueprint, create_places_blueprint  # noqa: E402
from teleka.routes.websocket import register_websocket_handlers  # noqa: E402


def create_app(repository=None, maps=None, price_service=None):
    """Build the Flask app and its Socket.IO server.

    Args:
        repository: AccountRepository (default: a fresh in-memory store)
        maps: MapsProxy for the places/pricing routes
        price_service: PriceService override for /api/calculate-price

    Returns:
        (app, socketio)
    """
    app = Flask(__name__)

    flask_secret_key = os.getenv("FLASK_SECRET_KEY") or os.urandom(32).hex()
    if "FLASK_SECRET_KEY" not in os.environ:
        logger.warning("No FLASK_SECRET_KEY found. Generated a temporary key.")
    app.secret_key = flask_secret_key

    # CORS for cross-origin booking pages
    CORS(app, origins="*", supports_credentials=True)

    ws_config = get_websocket_config()
    socketio = SocketIO(
        app,
        cors_allowed_origins=ws_config["cors_allowed_origins"],
        async_mode="threading",
        ping_interval=ws_config["ping_interval"],
        ping_timeout=ws_config["ping_timeout"],
        logger=False,
        engineio_logger=False,
    )
    logger.info("Socket.IO initialised (async_mode=threading)")

    notifier = register_websocket_handlers(socketio)
    service = AccountService(repository or InMemoryAccountRepository(), notifier=notifier)

    app.register_blueprint(create_places_blueprint(maps=maps, price_service=price_service))
    app.register_blueprint(create_accounts_blueprint(service))

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "teleka"}

    return app, socketio


app, socketio = create_app()

# --------------------------------------------------------------------------- #
# Local development runner ( `python main.py` )
# --------------------------------------------------------------------------- #
if __name__ == "__main__":
    port = get_port()
    logger.info("Starting Teleka on http://localhost:%d", port)
    socketio.run(app, host="0.0.0.0", port=port, debug=False, allow_unsafe_werkzeug=True)

__all__ = ["app", "socketio", "create_app"]
