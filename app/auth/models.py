# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the identity carried by a Supabase JWT.
# =============================================================================

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserRole(str, Enum):
    """Role chosen at sign-up, stored in user_metadata.role."""
    CREATOR = "creator"
    INVESTOR = "investor"


class AuthUser(BaseModel):
    """
    Authenticated viewer extracted from a Supabase JWT.

    This is the minimal identity available from the token itself,
    without querying the database.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    role: Optional[UserRole] = None

    @property
    def user_id(self) -> str:
        return str(self.id)


class ViewerResponse(BaseModel):
    """What /auth/me reports about the caller."""
    id: UUID
    email: Optional[str] = None
    role: Optional[UserRole] = None
