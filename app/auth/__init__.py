# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Supabase Auth sign-in flows and JWT verification.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    decode_access_token,
    get_access_token,
    get_current_user,
    get_current_user_optional,
)
from app.auth.errors import auth_error_message
from app.auth.models import AuthUser

__all__ = [
    "decode_access_token",
    "get_access_token",
    "get_current_user",
    "get_current_user_optional",
    "auth_error_message",
    "AuthUser",
]
