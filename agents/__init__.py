# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the LLM-backed agents:
# - idea_validator.py: Evaluates an idea (SWOT, personas, market, score)
#
# Prompts:
# - prompts/validation_system.py: System + user prompt for the validator
# =============================================================================

from agents.idea_validator import IdeaValidatorAgent

__all__ = [
    "IdeaValidatorAgent",
]
