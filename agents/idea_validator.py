# =============================================================================
# agents/idea_validator.py - Idea Validation Agent
# =============================================================================
# Asks the LLM for a structured evaluation of an idea:
# SWOT analysis, user personas, market analysis, an investor readiness score
# (0-100) and recommendations.
#
# Flow:
# 1. Build the prompt from the idea's form data
# 2. Call OpenAI in JSON mode
# 3. Parse with json, validate with Pydantic
#
# Usage:
#   from agents.idea_validator import IdeaValidatorAgent
#   agent = IdeaValidatorAgent(client=OpenAI(api_key=...))
#   result = agent.analyze(idea)
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from app.config import Settings
from app.exceptions import ValidationFailedError
from agents.prompts.validation_system import VALIDATION_SYSTEM_PROMPT, build_validation_prompt
from core.models.idea import Idea, IdeaValidationResult

# Set up logging for this module
logger = logging.getLogger(__name__)


class IdeaValidatorAgent:
    """
    Produces an IdeaValidationResult for an idea.

    Example:
        agent = IdeaValidatorAgent(client=OpenAI(api_key="sk-..."))
        result = agent.analyze(idea)
        print(result.investor_readiness_score)  # 72.0

    Attributes:
        model: OpenAI model to use
        temperature: Generation temperature (low for consistent reports)
        max_tokens: Completion budget for one report
    """

    def __init__(
        self,
        client: OpenAI,
        model: str = "gpt-4-turbo",
        temperature: float = 0.2,
        max_tokens: int = 2000,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        logger.info(f"IdeaValidatorAgent initialized with model={self.model}, temp={self.temperature}")

    @classmethod
    def from_settings(cls, settings: Settings, client: OpenAI | None = None) -> IdeaValidatorAgent:
        return cls(
            client=client or OpenAI(api_key=settings.OPENAI_API_KEY),
            model=settings.OPENAI_MODEL,
            temperature=settings.VALIDATION_TEMPERATURE,
            max_tokens=settings.VALIDATION_MAX_TOKENS,
        )

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def analyze(self, idea: Idea) -> IdeaValidationResult:
        """
        Evaluate an idea.

        Args:
            idea: The idea to evaluate

        Returns:
            Validated report

        Raises:
            ValidationFailedError: code OPENAI_ERROR, JSON_PARSE_ERROR or SCHEMA_ERROR
        """
        logger.info(f"Validating idea: idea_id={idea.id} title='{idea.title[:50]}'")

        messages = [
            {"role": "system", "content": VALIDATION_SYSTEM_PROMPT},
            {"role": "user", "content": build_validation_prompt(idea)},
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={"type": "json_object"},  # Force JSON output
                messages=messages,
            )
            response_text = response.choices[0].message.content or ""
            logger.debug(f"OpenAI response: {response_text[:200]}...")

        except Exception as e:
            logger.error(f"OpenAI call failed: idea_id={idea.id} error={e}")
            raise ValidationFailedError(
                message=f"OpenAI API call failed: {e}",
                code="OPENAI_ERROR",
                suggestion="Check your OPENAI_API_KEY and network connection",
                details={"model": self.model, "idea_id": idea.id},
            ) from e

        result = self._parse_response(response_text)
        logger.info(
            f"Idea validated: idea_id={idea.id} score={result.investor_readiness_score}"
        )
        return result

    # -------------------------------------------------------------------------
    # Response Parsing
    # -------------------------------------------------------------------------

    def _parse_response(self, response_text: str) -> IdeaValidationResult:
        """
        Parse the model's JSON into an IdeaValidationResult.

        Raises:
            ValidationFailedError: If the text isn't JSON or doesn't fit the schema
        """
        try:
            data: Any = json.loads(response_text)
        except json.JSONDecodeError as e:
            raise ValidationFailedError(
                message=f"Invalid JSON response from model: {e}",
                code="JSON_PARSE_ERROR",
                suggestion="The model didn't return valid JSON. Run the validation again.",
                details={"raw_response": response_text[:500]},
            ) from e

        try:
            return IdeaValidationResult.model_validate(data)
        except ValidationError as e:
            errors = [f"{err['loc']}: {err['msg']}" for err in e.errors()]
            raise ValidationFailedError(
                message=f"AI response does not match the expected schema: {'; '.join(errors[:5])}",
                code="SCHEMA_ERROR",
                suggestion="The model's response was valid JSON but missing required fields.",
                details={"validation_errors": errors},
            ) from e
