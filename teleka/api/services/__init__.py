"""Service layer."""

from .account_service import AccountError, AccountService
from .price_service import PriceService

__all__ = ["AccountError", "AccountService", "PriceService"]
