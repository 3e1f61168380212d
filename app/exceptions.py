# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error answers with a message, a machine-readable code and, where it
# helps, a suggestion on how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class MarketplaceException(Exception):
    """
    Base exception for the Marketplace API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MARKETPLACE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class InvalidInputError(MarketplaceException):
    """Raised when a request field is missing or fails a business rule."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            status_code=400,
            details={"field": field} if field else None,
        )


# =============================================================================
# Listing Exceptions
# =============================================================================

class InvalidListingIdError(MarketplaceException):
    """Raised when a listing ID is not a UUID."""

    def __init__(self, listing_id: str):
        super().__init__(
            message="Invalid listing ID format",
            code="INVALID_LISTING_ID",
            status_code=400,
            suggestion="Listing IDs are UUIDs such as 550e8400-e29b-41d4-a716-446655440000",
            details={"listing_id": listing_id},
        )


class ListingNotFoundError(MarketplaceException):
    """Raised when a listing ID doesn't exist."""

    def __init__(self, listing_id: str):
        super().__init__(
            message="Listing not found",
            code="LISTING_NOT_FOUND",
            status_code=404,
            suggestion="Check that the listing_id is correct and the listing hasn't been deleted",
            details={"listing_id": listing_id},
        )


class ListingOwnershipError(MarketplaceException):
    """Raised when the caller's seller_email differs from the listing owner."""

    def __init__(self, listing_id: str, action: str):
        super().__init__(
            message=f"Unauthorized - You can only {action} your own listings",
            code="LISTING_FORBIDDEN",
            status_code=403,
            details={"listing_id": listing_id},
        )


# =============================================================================
# Message Exceptions
# =============================================================================

class SellerMismatchError(MarketplaceException):
    """Raised when a message names a seller other than the listing's seller."""

    def __init__(self, listing_id: str):
        super().__init__(
            message="Seller email does not match listing",
            code="SELLER_MISMATCH",
            status_code=400,
            suggestion="Use the seller_email recorded on the listing",
            details={"listing_id": listing_id},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(MarketplaceException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message="Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details={"content_type": content_type, "allowed_types": allowed},
        )


class FileTooLargeError(MarketplaceException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File size too large. Maximum size is {max_mb}MB.",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class InvalidFileNameError(MarketplaceException):
    """Raised when a file name could escape the upload directory."""

    def __init__(self, file_name: str):
        super().__init__(
            message="Invalid file name",
            code="INVALID_FILE_NAME",
            status_code=400,
            details={"file_name": file_name},
        )


class UploadNotFoundError(MarketplaceException):
    """Raised when deleting an upload that doesn't exist."""

    def __init__(self, file_name: str):
        super().__init__(
            message="File not found",
            code="FILE_NOT_FOUND",
            status_code=404,
            details={"file_name": file_name},
        )


class StorageError(MarketplaceException):
    """Raised when writing or removing an upload fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to store file",
            code="STORAGE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class PaymentProviderError(MarketplaceException):
    """Raised when a Stripe call fails. Provider details stay in the logs."""

    def __init__(self, operation: str):
        super().__init__(
            message=f"Payment provider request failed: {operation}",
            code="PAYMENT_PROVIDER_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


class WebhookSignatureError(MarketplaceException):
    """Raised when a webhook payload cannot be verified."""

    def __init__(self, reason: str):
        super().__init__(
            message="Webhook Error",
            code="WEBHOOK_SIGNATURE_INVALID",
            status_code=400,
            details={"reason": reason},
        )


# =============================================================================
# Seed Exceptions
# =============================================================================

class InvalidSeedActionError(MarketplaceException):
    """Raised when /seed receives an unknown action."""

    def __init__(self, action: str | None):
        super().__init__(
            message='Invalid action. Use "seed" or "clear"',
            code="INVALID_ACTION",
            status_code=400,
            details={"action": action},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def marketplace_exception_handler(
    request: Request,
    exc: MarketplaceException
) -> JSONResponse:
    """
    Convert MarketplaceException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def _describe_validation_errors(errors: list[dict[str, Any]]) -> str:
    """Build one readable sentence out of pydantic error entries."""
    missing = [
        str(err["loc"][-1])
        for err in errors
        if err.get("type") == "missing" and err.get("loc")
    ]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    messages = []
    for err in errors:
        msg = str(err.get("msg", "Invalid value"))
        # pydantic prefixes messages raised from validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(msg)
    return "; ".join(messages) or "Validation error"


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Client input errors answer 400 with a readable message.
    """
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "detail": _describe_validation_errors(errors),
            "code": "VALIDATION_ERROR",
            "errors": [
                {
                    "field": ".".join(str(part) for part in err.get("loc", ())),
                    "message": str(err.get("msg", "")),
                }
                for err in errors
            ],
        }
    )
