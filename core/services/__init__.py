# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .listing_service import ListingService
from .message_service import MessageService
from .order_service import OrderService
from .payment_service import PaymentService
from .seed_service import SeedService
from .storage_service import StorageService

__all__ = [
    "ListingService",
    "MessageService",
    "OrderService",
    "PaymentService",
    "SeedService",
    "StorageService",
]
