# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - listings.py: Listing search and CRUD endpoints
# - categories.py: Fixed category list
# - messages.py: Buyer/seller messaging endpoints
# - upload.py: Listing image upload endpoints
# - payment.py: Checkout session and connected account endpoints
# - webhooks.py: Payment provider webhook
# - seed.py: Sample data endpoint
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import listings
from . import categories
from . import messages
from . import upload
from . import payment
from . import webhooks
from . import seed

__all__ = [
    "health",
    "listings",
    "categories",
    "messages",
    "upload",
    "payment",
    "webhooks",
    "seed",
]
