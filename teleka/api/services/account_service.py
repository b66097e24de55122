# teleka/api/services/account_service.py
"""Service layer for registration, login and the admin approval workflow."""

import logging
from typing import Any, Callable, Dict, List, Optional

from teleka.api.config import get_admin_credentials
from teleka.api.models import Booking, Customer, Driver, FareSettings, Notification
from teleka.api.repositories import AccountRepository

logger = logging.getLogger(__name__)

NOTIFICATION_FEED_SIZE = 5


class AccountError(Exception):
    """Workflow rejection carrying the HTTP status to answer with."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


class AccountService:
    """Customer/driver accounts, admin approvals, bookings and notifications."""

    def __init__(
        self,
        repository: AccountRepository,
        notifier: Optional[Callable[[Notification], None]] = None,
        admin_credentials: Optional[Dict[str, str]] = None,
    ):
        self.repository = repository
        self.notifier = notifier
        self.admin = admin_credentials or get_admin_credentials()

    def _notify(self, message: str, booking: Optional[dict] = None) -> Notification:
        notification = Notification(message=message, booking=booking)
        self.repository.add_notification(notification)
        logger.info(f"Admin notification: {message}")
        if self.notifier:
            try:
                self.notifier(notification)
            except Exception as e:
                # Realtime delivery is best effort; the feed already has it.
                logger.error(f"Failed to deliver notification: {e}")
        return notification

    @staticmethod
    def _require(data: Dict[str, Any], *fields: str) -> None:
        missing = [f for f in fields if not data.get(f)]
        if missing:
            raise AccountError(f"Missing required fields: {', '.join(missing)}")

    def register_customer(self, data: Dict[str, Any]) -> None:
        self._require(data, "name", "email", "password")
        if self.repository.find_customer(data["email"]):
            raise AccountError("User already exists.")
        self.repository.add_customer(Customer(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            phone=data.get("phone") or "",
        ))
        logger.info(f"Registered customer {data['email']}")

    def register_driver(self, data: Dict[str, Any]) -> None:
        self._require(data, "name", "email", "password")
        if any(d.email == data["email"] for d in self.repository.pending_drivers()):
            raise AccountError("Driver already pending.")
        self.repository.add_pending_driver(Driver(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            phone=data.get("phone") or "",
            license=data.get("license") or "",
            national_id=data.get("nationalId") or "",
        ))
        self._notify(f"New driver registration: {data['name']}")

    def login(self, role: str, email: str, password: str) -> str:
        """Check credentials for a role and return the welcome message."""
        if role == "admin":
            if email == self.admin["email"] and password == self.admin["password"]:
                return "Welcome Admin"
            raise AccountError("Invalid admin credentials.", 401)

        if role == "customer":
            customer = self.repository.find_customer(email)
            if customer and customer.password == password:
                return f"Welcome {customer.name}"
            raise AccountError("Invalid customer credentials.", 401)

        if role == "driver":
            driver = self.repository.find_driver(email)
            if driver and driver.password == password:
                if driver.approved:
                    return "Driver logged in"
                raise AccountError("Pending approval.", 403)
            raise AccountError("Invalid driver credentials.", 401)

        raise AccountError("Invalid role.", 400)

    def pending_drivers(self) -> List[Driver]:
        return self.repository.pending_drivers()

    def approve_driver(self, index: Any) -> Driver:
        driver = self.repository.pop_pending_driver(index)
        if driver is None:
            raise AccountError("Driver not found.", 404)
        driver.approved = True
        self.repository.add_driver(driver)
        self._notify(f"Driver {driver.name} approved")
        return driver

    def reject_driver(self, index: Any) -> Driver:
        driver = self.repository.pop_pending_driver(index)
        if driver is None:
            raise AccountError("Driver not found.", 404)
        self._notify(f"Driver {driver.name} rejected")
        return driver

    def notifications(self) -> List[Notification]:
        return self.repository.recent_notifications(NOTIFICATION_FEED_SIZE)

    def create_booking(self, data: Dict[str, Any]) -> Booking:
        self._require(data, "name", "pickup", "destination")
        booking = Booking(name=data["name"], pickup=data["pickup"], destination=data["destination"])
        self.repository.add_booking(booking)
        self._notify(
            f"New booking from {booking.name}: {booking.pickup} → {booking.destination}",
            booking=booking.to_dict(),
        )
        return booking

    def fare_settings(self) -> FareSettings:
        return self.repository.get_fare_settings()

    def update_fare_settings(self, data: Dict[str, Any]) -> FareSettings:
        try:
            settings = FareSettings(
                base_fare=float(data["baseFare"]),
                commission=float(data["commission"]),
            )
        except (KeyError, TypeError, ValueError):
            raise AccountError("baseFare and commission must be numbers.")
        self.repository.save_fare_settings(settings)
        return settings


__all__ = ["AccountService", "AccountError"]
