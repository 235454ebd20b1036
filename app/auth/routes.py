# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-up, sign-in, sign-out and password reset go through Supabase Auth
# with the anon key, so the provider applies its own rules (confirmation
# mail, password policy). Provider errors are reported with the fixed
# messages from app/auth/errors.py.
#
# /auth/me reads and edits the creator's profile, creating it on first use.
# =============================================================================

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_access_token, get_current_user
from app.auth.errors import auth_error_message, provider_error_code
from app.auth.models import (
    AuthSessionResponse,
    AuthUser,
    MessageResponse,
    PasswordResetRequest,
    SignInRequest,
    SignUpRequest,
    VerifyResponse,
)
from app.config import settings
from app.exceptions import AuthProviderError
from core.models.profile import ProfileUpdate, UserProfile
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

EMPTY_RESET_EMAIL = "Please enter your email address first."


def _provider_error(action: str, error: Exception) -> AuthProviderError:
    code = provider_error_code(error)
    logger.warning(f"{action} rejected by auth provider (code={code}): {error}")
    return AuthProviderError(auth_error_message(code), provider_code=code)


def _session_response(response: Any) -> AuthSessionResponse:
    """Build the API response from a Supabase AuthResponse."""
    user = response.user
    session = response.session
    return AuthSessionResponse(
        user_id=str(user.id),
        email=user.email,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_in=session.expires_in if session else None,
        email_confirmation_required=session is None,
    )


# -----------------------------------------------------------------------------
# Sign-in flows
# -----------------------------------------------------------------------------

@router.post("/sign-up", response_model=AuthSessionResponse, status_code=201)
async def sign_up(request: SignUpRequest) -> AuthSessionResponse:
    """
    Create an account.

    The profile row is created right away so the dashboard has a display
    name and avatar on first load.
    """
    credentials: dict[str, Any] = {
        "email": request.email.strip(),
        "password": request.password,
    }
    if request.full_name:
        credentials["options"] = {"data": {"full_name": request.full_name.strip()}}

    try:
        response = SupabaseClient.create_anon_client().auth.sign_up(credentials)
    except Exception as e:
        raise _provider_error("Sign-up", e)

    if response.user is None:
        raise AuthProviderError(auth_error_message(None))

    ProfileService.get_or_create_profile(
        str(response.user.id), response.user.email, request.full_name
    )
    logger.info(f"Signed up user: {response.user.id}")
    return _session_response(response)


@router.post("/sign-in", response_model=AuthSessionResponse)
async def sign_in(request: SignInRequest) -> AuthSessionResponse:
    """Email and password sign-in."""
    try:
        response = SupabaseClient.create_anon_client().auth.sign_in_with_password({
            "email": request.email.strip(),
            "password": request.password,
        })
    except Exception as e:
        raise _provider_error("Sign-in", e)

    if response.user is None or response.session is None:
        raise AuthProviderError(auth_error_message("invalid_credentials"), "invalid_credentials")

    logger.info(f"Signed in user: {response.user.id}")
    return _session_response(response)


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(token: str = Depends(get_access_token)) -> MessageResponse:
    """Revoke the caller's session."""
    try:
        SupabaseClient.get_client().auth.admin.sign_out(token)
    except Exception as e:
        raise _provider_error("Sign-out", e)
    return MessageResponse(message="Signed out")


@router.post("/password-reset", response_model=MessageResponse)
async def password_reset(request: PasswordResetRequest) -> MessageResponse:
    """Send a password reset email."""
    email = request.email.strip()
    if not email:
        raise AuthProviderError(EMPTY_RESET_EMAIL)

    options = {}
    if settings.PASSWORD_RESET_REDIRECT_URL:
        options["redirect_to"] = settings.PASSWORD_RESET_REDIRECT_URL

    try:
        SupabaseClient.create_anon_client().auth.reset_password_for_email(email, options)
    except Exception as e:
        raise _provider_error("Password reset", e)

    return MessageResponse(message="Password reset email sent. Please check your inbox.")


@router.get("/verify", response_model=VerifyResponse)
async def verify_token(user: AuthUser = Depends(get_current_user)) -> VerifyResponse:
    """
    Verify that the current token is valid.

    Clients poll this to notice an expired session (401).
    """
    return VerifyResponse(valid=True, user_id=str(user.id), email=user.email)


# -----------------------------------------------------------------------------
# Profile
# -----------------------------------------------------------------------------

@router.get("/me", response_model=UserProfile)
async def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> UserProfile:
    """The caller's profile, created with defaults on first use."""
    profile = ProfileService.get_or_create_profile(str(user.id), user.email, user.full_name)
    return UserProfile.model_validate(profile)


@router.patch("/me", response_model=UserProfile)
async def update_current_user_info(
    updates: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
) -> UserProfile:
    """Edit display name, bio, website or avatar."""
    ProfileService.get_or_create_profile(str(user.id), user.email, user.full_name)
    profile = ProfileService.update_profile(str(user.id), updates.to_updates())
    return UserProfile.model_validate(profile)
