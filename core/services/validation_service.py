# =============================================================================
# core/services/validation_service.py - Idea Validation
# =============================================================================
# Runs the AI validation for an idea at most once and stores the report in
# idea_validations. A stored report is returned as-is on later requests,
# so the model is only called when no report exists yet.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError
from supabase import Client

from agents.idea_validator import IdeaValidatorAgent
from app.exceptions import PersistenceError
from core.models.idea import IdeaValidation, IdeaValidationResult, ValidationStatus
from core.services.idea_service import IdeaService
from core.services.privacy import PrivacyGate
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

TABLE = "idea_validations"


class ValidationService:
    """Stored validation reports and the validation run itself."""

    def __init__(self, client: Client, ideas: IdeaService, agent: IdeaValidatorAgent):
        self.client = client
        self.ideas = ideas
        self.agent = agent

    def get_validation(self, idea_id: str) -> IdeaValidation | None:
        """
        Latest stored report for an idea.

        Returns:
            IdeaValidation, or None if the idea hasn't been validated

        Raises:
            PersistenceError: If the query fails or the row is malformed
        """
        idea_id = normalize_uuid(idea_id)
        try:
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("idea_id", idea_id)
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch validation: idea_id={idea_id} error={e}")
            raise PersistenceError("read idea validation", str(e)) from e

        if not response.data:
            return None
        return self._parse(response.data[0])

    def validate_idea(self, idea_id: str, actor_id: str | None) -> IdeaValidation:
        """
        Validate an idea, reusing a stored report when there is one.

        Args:
            idea_id: The idea to validate
            actor_id: Acting user (must be the creator)

        Returns:
            The stored or newly created report

        Raises:
            IdeaNotFoundError: Unknown idea
            PermissionDeniedError: Actor is not the creator
            ValidationFailedError: The model call or its output failed
            PersistenceError: The report could not be stored
        """
        idea = self.ideas.get_idea(idea_id)
        PrivacyGate.require_creator(actor_id, idea.creator_id, "validate this idea", idea.id)

        existing = self.get_validation(idea.id)
        if existing is not None:
            logger.info(f"Using stored validation: idea_id={idea.id}")
            return existing

        result = self.agent.analyze(idea)
        return self.save_validation(idea.id, result)

    def save_validation(self, idea_id: str, result: IdeaValidationResult) -> IdeaValidation:
        """
        Raises:
            PersistenceError: If the insert fails or returns nothing
        """
        idea_id = normalize_uuid(idea_id)
        data = {"idea_id": idea_id, **result.model_dump(mode="json")}

        try:
            response = self.client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to save validation: idea_id={idea_id} error={e}")
            raise PersistenceError("save idea validation", str(e)) from e

        if not response.data:
            raise PersistenceError("save idea validation", "no row returned")

        logger.info(f"Saved validation: idea_id={idea_id} score={result.investor_readiness_score}")
        return self._parse(response.data[0])

    def validation_status(self, idea_id: str) -> ValidationStatus:
        """Whether the idea has a report, and its score if so."""
        validation = self.get_validation(idea_id)
        return ValidationStatus(
            idea_id=normalize_uuid(idea_id),
            validated=validation is not None,
            investor_readiness_score=validation.investor_readiness_score if validation else None,
        )

    @staticmethod
    def _parse(row: dict[str, Any]) -> IdeaValidation:
        try:
            return IdeaValidation.model_validate(row)
        except ValidationError as e:
            logger.error(f"Malformed {TABLE} row: id={row.get('id')} error={e}")
            raise PersistenceError(
                "read idea validation",
                "row does not match the expected schema",
                details={"row_id": row.get("id")},
            ) from e
