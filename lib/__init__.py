# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - stripe_client.py: Stripe facade for checkout, connect and webhooks
# - api_client.py: Async HTTP client for the API plus the message-count poller
# - utils.py: Shared utilities (UUID checks)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.stripe_client import StripeClient, StripeClientError
from lib.utils import is_uuid, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Stripe
    "StripeClient",
    "StripeClientError",
    # Utils
    "is_uuid",
    "normalize_uuid",
]
