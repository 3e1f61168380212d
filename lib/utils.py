# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import re
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

# Versions 1-5, RFC 4122 variant
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        listing_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        listing_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def is_uuid(value: str | None) -> bool:
    """
    Check that a string looks like a UUID before it reaches the database.

    Example:
        is_uuid("550e8400-e29b-41d4-a716-446655440000")  # True
        is_uuid("42")  # False
    """
    return bool(value) and UUID_PATTERN.match(value) is not None
