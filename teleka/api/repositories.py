# teleka/api/repositories.py
"""Data-access interface for accounts, bookings and admin notifications.

Request handlers receive a repository instance instead of touching module
state, so the in-memory store can be swapped for a persistent one.
"""

import abc
import threading
from typing import List, Optional

from teleka.api.models import Booking, Customer, Driver, FareSettings, Notification


class AccountRepository(abc.ABC):
    """Storage operations used by the account workflow."""

    @abc.abstractmethod
    def find_customer(self, email: str) -> Optional[Customer]: ...

    @abc.abstractmethod
    def add_customer(self, customer: Customer) -> None: ...

    @abc.abstractmethod
    def find_driver(self, email: str) -> Optional[Driver]: ...

    @abc.abstractmethod
    def add_driver(self, driver: Driver) -> None: ...

    @abc.abstractmethod
    def pending_drivers(self) -> List[Driver]: ...

    @abc.abstractmethod
    def add_pending_driver(self, driver: Driver) -> None: ...

    @abc.abstractmethod
    def pop_pending_driver(self, index: int) -> Optional[Driver]: ...

    @abc.abstractmethod
    def add_notification(self, notification: Notification) -> None: ...

    @abc.abstractmethod
    def recent_notifications(self, limit: int) -> List[Notification]: ...

    @abc.abstractmethod
    def add_booking(self, booking: Booking) -> None: ...

    @abc.abstractmethod
    def get_fare_settings(self) -> FareSettings: ...

    @abc.abstractmethod
    def save_fare_settings(self, settings: FareSettings) -> None: ...


class InMemoryAccountRepository(AccountRepository):
    """Process-local store; everything is lost on restart."""

    def __init__(self):
        self.customers: List[Customer] = []
        self.drivers: List[Driver] = []
        self.pending: List[Driver] = []
        self.notifications: List[Notification] = []
        self.bookings: List[Booking] = []
        self.fare_settings = FareSettings()
        self.lock = threading.Lock()

    def find_customer(self, email):
        with self.lock:
            return next((c for c in self.customers if c.email == email), None)

    def add_customer(self, customer):
        with self.lock:
            self.customers.append(customer)

    def find_driver(self, email):
        with self.lock:
            return next((d for d in self.drivers if d.email == email), None)

    def add_driver(self, driver):
        with self.lock:
            self.drivers.append(driver)

    def pending_drivers(self):
        with self.lock:
            return list(self.pending)

    def add_pending_driver(self, driver):
        with self.lock:
            self.pending.append(driver)

    def pop_pending_driver(self, index):
        with self.lock:
            if not isinstance(index, int) or index < 0 or index >= len(self.pending):
                return None
            return self.pending.pop(index)

    def add_notification(self, notification):
        with self.lock:
            self.notifications.append(notification)

    def recent_notifications(self, limit):
        with self.lock:
            return list(reversed(self.notifications[-limit:]))

    def add_booking(self, booking):
        with self.lock:
            self.bookings.append(booking)

    def get_fare_settings(self):
        return self.fare_settings

    def save_fare_settings(self, settings):
        with self.lock:
            self.fare_settings = settings


__all__ = ["AccountRepository", "InMemoryAccountRepository"]
