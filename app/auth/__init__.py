# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth.
#
# Usage:
#   from app.auth import get_current_user, get_viewer, AuthUser
#
#   @router.post("/ideas/{idea_id}/files")
#   def upload(user: AuthUser = Depends(get_current_user)):
#       ...
# =============================================================================

from app.auth.dependencies import decode_access_token, get_current_user, get_viewer
from app.auth.models import AuthUser, UserRole, ViewerResponse

__all__ = [
    "decode_access_token",
    "get_current_user",
    "get_viewer",
    "AuthUser",
    "UserRole",
    "ViewerResponse",
]
