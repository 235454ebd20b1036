# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where possible, a suggestion
# telling the user how to recover.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ArtomateException(Exception):
    """
    Base exception for the Artomate API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ARTOMATE_ERROR",
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


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthProviderError(ArtomateException):
    """Raised when the identity provider rejects a sign-in/sign-up/reset."""

    def __init__(self, message: str, provider_code: str | None = None):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=400,
            details={"provider_code": provider_code} if provider_code else None,
        )


# =============================================================================
# Campaign Exceptions
# =============================================================================

class CampaignNotFoundError(ArtomateException):
    """Raised when a campaign ID doesn't exist or isn't owned by the caller."""

    def __init__(self, campaign_id: str):
        super().__init__(
            message=f"Campaign not found: {campaign_id}",
            code="CAMPAIGN_NOT_FOUND",
            status_code=404,
            suggestion="Check that the campaign_id is correct and the campaign hasn't been discarded",
            details={"campaign_id": campaign_id}
        )


class CampaignNotReadyError(ArtomateException):
    """Raised when a campaign has no generated content yet."""

    def __init__(self, campaign_id: str, status: str | None = None):
        super().__init__(
            message=f"Campaign has no generated content: {campaign_id}",
            code="CAMPAIGN_NOT_READY",
            status_code=409,
            suggestion="Run AI generation with POST /campaigns/{id}/generate and wait for it to complete",
            details={"campaign_id": campaign_id, "status": status}
        )


class CampaignPublishedError(ArtomateException):
    """Raised when a published campaign would be regenerated or reverted."""

    def __init__(self, campaign_id: str):
        super().__init__(
            message=f"Campaign is already published: {campaign_id}",
            code="CAMPAIGN_PUBLISHED",
            status_code=409,
            suggestion="Create a new campaign to make changes",
            details={"campaign_id": campaign_id}
        )


class GenerationInProgressError(ArtomateException):
    """Raised when generation is requested while a run is still going."""

    def __init__(self, campaign_id: str, task_id: str | None = None):
        super().__init__(
            message=f"Generation already in progress for campaign: {campaign_id}",
            code="GENERATION_IN_PROGRESS",
            status_code=409,
            suggestion="Wait for the current run to finish before starting another one",
            details={"campaign_id": campaign_id, "task_id": task_id}
        )


class TaskQueueError(ArtomateException):
    """Raised when the generation task can't be submitted to the broker."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to start generation: {error}",
            code="TASK_QUEUE_UNAVAILABLE",
            status_code=503,
            suggestion="Try again in a moment. If it keeps failing, check that Redis is running",
        )


class PaymentRequiredError(ArtomateException):
    """Raised when a free-tier user tries to publish without paying."""

    def __init__(self, campaign_id: str, plans: list[dict[str, Any]]):
        super().__init__(
            message="Choose a plan to publish this campaign",
            code="PAYMENT_REQUIRED",
            status_code=402,
            suggestion="Start a checkout with POST /payments/checkout",
            details={"campaign_id": campaign_id, "plans": plans}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class IncompleteUploadError(ArtomateException):
    """Raised when the upload step is missing content type, theme or file."""

    def __init__(self, missing: list[str]):
        super().__init__(
            message="Please fill in all required fields and upload a file.",
            code="INCOMPLETE_UPLOAD",
            status_code=400,
            suggestion=f"Provide: {', '.join(missing)}",
            details={"missing": missing}
        )


class InvalidFileTypeError(ArtomateException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message="Please select a valid file type for the selected content type.",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(ArtomateException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(ArtomateException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


class StorageDownloadError(ArtomateException):
    """Raised when file download from storage fails."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to download file from storage: {error}",
            code="STORAGE_DOWNLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"path": path, "error": error}
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class PaymentConfigurationError(ArtomateException):
    """Raised when Stripe is not configured."""

    def __init__(self, missing: str):
        super().__init__(
            message="Payments are not configured on this server",
            code="PAYMENTS_NOT_CONFIGURED",
            status_code=503,
            suggestion=f"Set {missing} in the environment",
            details={"missing": missing}
        )


class CheckoutError(ArtomateException):
    """Raised when a checkout session can't be created or confirmed."""

    def __init__(self, message: str, status_code: int = 400, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="CHECKOUT_ERROR",
            status_code=status_code,
            suggestion="Payment failed. Please try again.",
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def artomate_exception_handler(
    request: Request,
    exc: ArtomateException
) -> JSONResponse:
    """
    Convert ArtomateException to JSON response.

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
