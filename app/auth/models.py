# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data: the user decoded from the access
# token, and the request/response bodies of the sign-in forms.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus custom claims.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: str  # Audience (should be "authenticated")
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    role: Optional[str] = None  # User role
    user_metadata: dict = Field(default_factory=dict)


# -----------------------------------------------------------------------------
# Sign-in forms
# -----------------------------------------------------------------------------

class SignUpRequest(BaseModel):
    """Body for POST /auth/sign-up."""
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(default=None, max_length=100)


class SignInRequest(BaseModel):
    """Body for POST /auth/sign-in."""
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    """
    Body for POST /auth/password-reset.

    Empty email is allowed through validation so the route can answer with
    the form's own message.
    """
    email: str = ""


class AuthSessionResponse(BaseModel):
    """
    Session returned after sign-up or sign-in.

    access_token is None when sign-up needs email confirmation first.
    """
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    email_confirmation_required: bool = False


class VerifyResponse(BaseModel):
    """Response for GET /auth/verify."""
    valid: bool
    user_id: str
    email: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
