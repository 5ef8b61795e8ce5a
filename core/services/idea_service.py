# =============================================================================
# core/services/idea_service.py - Idea Lookup
# =============================================================================
# Reads ideas to learn who created them and what they are called.
# The ideas table itself is owned by another part of the product; this
# service never writes to it.
# =============================================================================

import logging

from pydantic import ValidationError
from supabase import Client

from app.exceptions import IdeaNotFoundError, PersistenceError
from core.models.idea import Idea
from lib.supabase_client import is_no_rows_error
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class IdeaService:
    """Read access to the ideas table."""

    def __init__(self, client: Client):
        self.client = client

    def get_idea(self, idea_id: str) -> Idea:
        """
        Fetch an idea by id.

        Args:
            idea_id: The idea UUID

        Returns:
            Parsed Idea

        Raises:
            IdeaNotFoundError: If the idea doesn't exist
            PersistenceError: If the query fails or the row is malformed
        """
        idea_id = normalize_uuid(idea_id)

        try:
            response = (
                self.client.table("ideas")
                .select("*")
                .eq("id", idea_id)
                .single()
                .execute()
            )
        except Exception as e:
            if is_no_rows_error(e):
                raise IdeaNotFoundError(idea_id) from e
            logger.error(f"Failed to fetch idea: idea_id={idea_id} error={e}")
            raise PersistenceError("read idea", str(e)) from e

        if not response.data:
            raise IdeaNotFoundError(idea_id)

        try:
            return Idea.model_validate(response.data)
        except ValidationError as e:
            logger.error(f"Malformed ideas row: idea_id={idea_id} error={e}")
            raise PersistenceError(
                "read idea",
                "row does not match the expected schema",
                details={"idea_id": idea_id},
            ) from e
