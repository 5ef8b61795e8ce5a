# =============================================================================
# app/routers/validation.py - Idea Validation Endpoints
# =============================================================================
#   GET  /ideas/{idea_id}/validation          stored report (404 if none)
#   POST /ideas/{idea_id}/validation          run or reuse (creator only)
#   GET  /ideas/{idea_id}/validation/status   validated? + score
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import ContextDep, UserDep, actor_id
from app.exceptions import StoredObjectNotFoundError
from core.models.idea import IdeaValidation, ValidationStatus
from lib.utils import normalize_uuid

router = APIRouter()


@router.get("/ideas/{idea_id}/validation", response_model=IdeaValidation)
def get_validation(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    context: ContextDep,
):
    """Stored validation report of an idea."""
    validation = context.validations.get_validation(normalize_uuid(idea_id))
    if validation is None:
        raise StoredObjectNotFoundError("validation", normalize_uuid(idea_id))
    return validation


@router.post("/ideas/{idea_id}/validation", response_model=IdeaValidation)
def validate_idea(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    context: ContextDep,
    user: UserDep,
):
    """
    Validate an idea with the AI analyst.

    Returns the stored report if the idea was already validated; the model
    is only called once per idea.
    """
    return context.validations.validate_idea(normalize_uuid(idea_id), actor_id(user))


@router.get("/ideas/{idea_id}/validation/status", response_model=ValidationStatus)
def get_validation_status(
    idea_id: Annotated[UUID, Path(description="Idea UUID")],
    context: ContextDep,
):
    """Whether the idea has a validation report."""
    return context.validations.validation_status(normalize_uuid(idea_id))
