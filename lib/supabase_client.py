# =============================================================================
# lib/supabase_client.py - Supabase Client Factory
# =============================================================================
# Builds the Supabase client used for every metadata table (idea_files,
# idea_images, ideas, idea_validations) and provides the shared error type and
# PostgREST helpers the repositories rely on.
#
# The client is created once at application start (see core/context.py) and
# passed to the repositories that need it; nothing imports it as a global.
#
# Usage:
#   from lib.supabase_client import create_supabase_client
#   client = create_supabase_client(settings)
#   rows = client.table("idea_files").select("*").eq("idea_id", idea_id).execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code returned by .single() when no row matched
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: errors should tell HOW to fix,
    not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client for server-side metadata access.

    Uses the service_role key, which bypasses Row Level Security (RLS).
    Authorization is enforced by the service layer instead.

    Args:
        settings: Application settings

    Returns:
        Client: Supabase client instance

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
            suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
        ) from e

    logger.info("Supabase client initialized successfully")
    return client


def is_no_rows_error(error: Exception) -> bool:
    """Check whether a PostgREST error means "no row matched"."""
    code = getattr(error, "code", None)
    return code == NO_ROWS_CODE or NO_ROWS_CODE in str(error)
