# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - category.py: The fixed listing category set
# - listing.py: Listing CRUD schemas and listing search filters
# - message.py: Message schemas and conversation scoping
# - order.py: Orders created from payment webhooks
# - payment.py: Checkout session and connected account schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .category import (
    ALLOWED_CATEGORY_VALUES,
    Category,
    CategoryInfo,
    get_category_by_label,
    get_category_by_value,
    is_valid_category,
    list_categories,
)
from .listing import (
    Listing,
    ListingCreate,
    ListingFilters,
    ListingUpdate,
    Predicate,
)
from .message import (
    MAX_MESSAGE_LENGTH,
    ConversationQuery,
    Message,
    MessageCreate,
)
from .order import OrderCreate, PaymentStatus
from .payment import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    ConnectAccountRequest,
    ConnectAccountResponse,
    ConnectAccountStatus,
)

__all__ = [
    # Category
    "ALLOWED_CATEGORY_VALUES",
    "Category",
    "CategoryInfo",
    "get_category_by_label",
    "get_category_by_value",
    "is_valid_category",
    "list_categories",
    # Listing
    "Listing",
    "ListingCreate",
    "ListingFilters",
    "ListingUpdate",
    "Predicate",
    # Message
    "MAX_MESSAGE_LENGTH",
    "ConversationQuery",
    "Message",
    "MessageCreate",
    # Order
    "OrderCreate",
    "PaymentStatus",
    # Payment
    "CheckoutSessionRequest",
    "CheckoutSessionResponse",
    "ConnectAccountRequest",
    "ConnectAccountResponse",
    "ConnectAccountStatus",
]
