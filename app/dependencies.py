# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated, Optional

from fastapi import Depends, Request

from app.auth import AuthUser, get_current_user, get_viewer
from core.context import AppContext


def get_context(request: Request) -> AppContext:
    """
    Get the application context built at startup.

    Tests override this dependency with a context wired to fakes.
    """
    return request.app.state.context


def actor_id(user: Optional[AuthUser]) -> Optional[str]:
    """User id as the services expect it (None for anonymous viewers)."""
    return user.user_id if user else None


# Type aliases for dependency injection
ContextDep = Annotated[AppContext, Depends(get_context)]
UserDep = Annotated[AuthUser, Depends(get_current_user)]
ViewerDep = Annotated[Optional[AuthUser], Depends(get_viewer)]
