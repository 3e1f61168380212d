# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Marketplace API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_listings_api.py: Listing and category endpoints
# - test_messages_api.py: Messaging endpoints
# - test_payments.py: Checkout, connected accounts and the payment webhook
# - test_upload.py: Image upload and delete
# - test_seed.py: Sample data and health endpoints
# - test_api_client.py: Async client and message-count poller
#
# Run tests with: pytest
# =============================================================================
