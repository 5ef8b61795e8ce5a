# =============================================================================
# core/models/idea.py - Idea & Validation Schemas
# =============================================================================
# These models describe:
# - Idea: The fields of an idea this service reads (creator, name, pitch)
# - IdeaValidationResult: The structured report produced by the AI validator
# - IdeaValidation: A stored report (table idea_validations)
#
# The ideas table mixes camelCase and snake_case columns; aliases accept both.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class IdeaStage(str, Enum):
    """How far along an idea is."""
    CONCEPT = "concept"
    PROTOTYPE = "prototype"
    MVP = "mvp"
    GROWTH = "growth"
    PRODUCTION = "production"


class Idea(BaseModel):
    """
    An idea as stored in the ideas table.

    Only creator_id and title matter to the storage pipeline; the remaining
    fields feed the validation prompt.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1)
    creator_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("creator_id", "creatorId"),
    )
    title: str = Field(default="")
    description: str | None = None
    about_this_idea: str | None = None
    key_features: list[str] = Field(default_factory=list)
    market_opportunity: str | None = None
    category: str | None = None
    stage: IdeaStage | None = None
    funding_goal: float | None = Field(
        default=None,
        validation_alias=AliasChoices("funding_goal", "fundingGoal"),
    )
    tags: list[str] = Field(default_factory=list)

    @field_validator("key_features", "tags", mode="before")
    @classmethod
    def _split_text_lists(cls, v):
        """Older rows store these as newline/comma separated text."""
        if v is None:
            return []
        if isinstance(v, str):
            separator = "\n" if "\n" in v else ","
            return [item.strip() for item in v.split(separator) if item.strip()]
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, v):
        return v or ""


# =============================================================================
# Validation Report
# =============================================================================

class SWOTAnalysis(BaseModel):
    strengths: list[str]
    weaknesses: list[str]
    opportunities: list[str]
    threats: list[str]


class UserPersona(BaseModel):
    name: str
    age: str
    occupation: str
    goals: list[str]
    pain_points: list[str]
    motivations: list[str]

    @field_validator("age", mode="before")
    @classmethod
    def _age_as_text(cls, v):
        # Models sometimes answer 34 instead of "34" or "30-40"
        return str(v) if isinstance(v, (int, float)) else v


class Competitor(BaseModel):
    name: str
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class MarketAnalysis(BaseModel):
    market_size: str
    target_segments: list[str]
    competition: list[Competitor | str]
    opportunities: list[str]
    risks: list[str]


class IdeaValidationResult(BaseModel):
    """
    The report returned by the validation agent.

    Example:
        {
            "swot_analysis": {"strengths": [...], ...},
            "user_personas": [{"name": "Maya", "age": "29", ...}],
            "market_analysis": {"market_size": "$2B", ...},
            "investor_readiness_score": 72,
            "recommendations": ["Run a pilot with ..."]
        }
    """

    model_config = ConfigDict(extra="ignore")

    swot_analysis: SWOTAnalysis
    user_personas: list[UserPersona]
    market_analysis: MarketAnalysis
    investor_readiness_score: float = Field(..., ge=0, le=100)
    recommendations: list[str]


class IdeaValidation(IdeaValidationResult):
    """A validation report persisted for an idea."""

    id: str | None = None
    idea_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ValidationStatus(BaseModel):
    """What the UI needs to decide whether the validation step is done."""
    idea_id: str
    validated: bool
    investor_readiness_score: float | None = None
