# =============================================================================
# app/auth/errors.py - Auth Provider Error Messages
# =============================================================================
# Maps Supabase Auth error codes to the fixed text shown on the sign-in and
# sign-up forms. Unknown codes get a generic message so provider internals
# never reach the user.
#
# Usage:
#   from app.auth.errors import auth_error_message
#
#   message = auth_error_message("invalid_credentials")
#   # "Incorrect email or password."
# =============================================================================

from typing import Optional

GENERIC_AUTH_ERROR = "An error occurred. Please try again."

AUTH_ERROR_MESSAGES: dict[str, str] = {
    "user_not_found": "No account found with this email address.",
    "invalid_credentials": "Incorrect email or password.",
    "user_already_exists": "An account with this email already exists.",
    "email_exists": "An account with this email already exists.",
    "weak_password": "Password should be at least 6 characters.",
    "email_address_invalid": "Please enter a valid email address.",
    "validation_failed": "Please enter a valid email address.",
}


def auth_error_message(code: Optional[str]) -> str:
    """Human-readable message for a provider error code."""
    if not code:
        return GENERIC_AUTH_ERROR
    return AUTH_ERROR_MESSAGES.get(code, GENERIC_AUTH_ERROR)


def provider_error_code(error: Exception) -> Optional[str]:
    """
    Pull the error code off a Supabase Auth exception.

    AuthApiError carries a `code` attribute; anything else has none.
    """
    code = getattr(error, "code", None)
    return str(code) if code else None
