# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Note: Actual signup/login is handled by Supabase Auth client-side.
# This route lets the UI check which identity and role a token carries.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, ViewerResponse

router = APIRouter()


@router.get("/me", response_model=ViewerResponse)
def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> ViewerResponse:
    """
    Identity of the authenticated caller.

    Raises:
        401: If the token is invalid or expired
    """
    return ViewerResponse(id=user.id, email=user.email, role=user.role)
