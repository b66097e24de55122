# teleka/routes/accounts.py
"""Registration, login and admin routes."""

import logging

from flask import Blueprint, jsonify, request

from teleka.api.services.account_service import AccountError, AccountService

logger = logging.getLogger(__name__)


def create_accounts_blueprint(service: AccountService):
    """Create the accounts blueprint around an injected AccountService."""
    accounts_bp = Blueprint("accounts", __name__, url_prefix="/api")

    @accounts_bp.errorhandler(AccountError)
    def handle_account_error(error):
        return jsonify({"message": error.message}), error.status

    def body():
        return request.get_json(silent=True) or {}

    @accounts_bp.route("/register/customer", methods=["POST"])
    def register_customer():
        service.register_customer(body())
        return jsonify({"message": "Registration successful."})

    @accounts_bp.route("/register/driver", methods=["POST"])
    def register_driver():
        service.register_driver(body())
        return jsonify({"message": "Driver registration submitted."})

    @accounts_bp.route("/login", methods=["POST"])
    def login():
        data = body()
        message = service.login(data.get("role"), data.get("email"), data.get("password"))
        return jsonify({"message": message})

    @accounts_bp.route("/pending-drivers")
    def pending_drivers():
        return jsonify([d.to_dict() for d in service.pending_drivers()])

    @accounts_bp.route("/approve-driver", methods=["POST"])
    def approve_driver():
        service.approve_driver(body().get("index"))
        return jsonify({"message": "Driver approved."})

    @accounts_bp.route("/reject-driver", methods=["POST"])
    def reject_driver():
        service.reject_driver(body().get("index"))
        return jsonify({"message": "Driver rejected."})

    @accounts_bp.route("/notifications")
    def notifications():
        return jsonify([n.to_dict() for n in service.notifications()])

    @accounts_bp.route("/fare-settings", methods=["GET", "POST"])
    def fare_settings():
        if request.method == "POST":
            service.update_fare_settings(body())
            return jsonify({"message": "Settings updated."})
        return jsonify(service.fare_settings().to_dict())

    @accounts_bp.route("/bookings", methods=["POST"])
    def create_booking():
        booking = service.create_booking(body())
        return jsonify({"message": "Booking received.", "booking": booking.to_dict()}), 201

    return accounts_bp


__all__ = ["create_accounts_blueprint"]
