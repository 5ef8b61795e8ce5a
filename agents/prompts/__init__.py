# =============================================================================
# agents/prompts/ - System Prompts for AI Agents
# =============================================================================
# This package contains prompts for each agent:
# - validation_system.py: Idea validator prompt and output contract
# =============================================================================

from agents.prompts.validation_system import (
    VALIDATION_SYSTEM_PROMPT,
    build_validation_prompt,
)

__all__ = [
    "VALIDATION_SYSTEM_PROMPT",
    "build_validation_prompt",
]
