# =============================================================================
# agents/prompts/validation_system.py - Idea Validator Prompts
# =============================================================================
# Prompts for the idea validation agent.
#
# The system prompt fixes the persona and the JSON contract; the user prompt
# carries the idea's form data. The output keys must match
# core/models/idea.py:IdeaValidationResult exactly.
#
# Usage:
#   messages = [
#       {"role": "system", "content": VALIDATION_SYSTEM_PROMPT},
#       {"role": "user", "content": build_validation_prompt(idea)},
#   ]
# =============================================================================

from __future__ import annotations

from core.models.idea import Idea

# =============================================================================
# System Prompt
# =============================================================================

VALIDATION_SYSTEM_PROMPT = (
    "You are an expert business analyst and startup advisor, "
    "providing detailed analysis in JSON format."
)

OUTPUT_SCHEMA = """{
  "swot_analysis": { "strengths": [], "weaknesses": [], "opportunities": [], "threats": [] },
  "user_personas": [{ "name": "", "age": "", "occupation": "", "goals": [], "pain_points": [], "motivations": [] }],
  "market_analysis": { "market_size": "", "target_segments": [], "competition": [], "opportunities": [], "risks": [] },
  "investor_readiness_score": 0,
  "recommendations": []
}"""

NOT_PROVIDED = "Not provided"


# =============================================================================
# Prompt Builder
# =============================================================================

def _field(value: object) -> str:
    if value is None or value == "" or value == []:
        return NOT_PROVIDED
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


def _funding_goal(value: float | None) -> str:
    if value is None:
        return NOT_PROVIDED
    return f"${value:,.0f}"


def build_validation_prompt(idea: Idea) -> str:
    """
    Build the user message asking for a full evaluation of one idea.

    Missing form fields are spelled out as "Not provided" so the model
    doesn't invent them.

    Args:
        idea: The idea to evaluate

    Returns:
        Prompt text
    """
    return f"""Please analyze this business idea and provide a comprehensive evaluation:

Title: {_field(idea.title)}
Description: {_field(idea.description)}
About: {_field(idea.about_this_idea)}
Key Features: {_field(idea.key_features)}
Market Opportunity: {_field(idea.market_opportunity)}
Category: {_field(idea.category)}
Funding Goal: {_funding_goal(idea.funding_goal)}

Perform a detailed analysis and provide:
1. SWOT Analysis
2. User Personas
3. Market Analysis
4. Investment Readiness Score (0-100)
5. Strategic Recommendations

Format the response as a JSON object with these exact keys:
{OUTPUT_SCHEMA}"""
