"""
Career card scoring service - rate how well a card fits a company and role
"""
import json
import logging
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from careercard.models.enums import ScoreCategory
from careercard.services.llm_client import SERVICE_NAME, call_tool, function_tool
from careercard.services.response_parser import LLMResponseError, extract_payload
from careercard.utils.exceptions import ExternalAPIError

logger = logging.getLogger(__name__)

_CATEGORY_SCORE = {
    "type": "object",
    "properties": {
        "score": {"type": "number"},
        "feedback": {"type": "string"},
    },
    "required": ["score", "feedback"],
}

SCORE_TOOL = function_tool(
    "score_career_card",
    "Provide a detailed score and feedback for career card alignment",
    {
        "type": "object",
        "properties": {
            "overallScore": {
                "type": "number",
                "description": "Overall alignment score from 0-100",
            },
            "categoryScores": {
                "type": "object",
                "properties": {category.value: _CATEGORY_SCORE for category in ScoreCategory},
                "required": [category.value for category in ScoreCategory],
            },
            "strengths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Key strengths for this role",
            },
            "improvements": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Areas for improvement or gaps",
            },
            "overallFeedback": {
                "type": "string",
                "description": "Comprehensive summary feedback",
            },
        },
        "required": ["overallScore", "categoryScores", "strengths", "improvements", "overallFeedback"],
        "additionalProperties": False,
    },
)

SCORING_PROMPT = """You are an expert career advisor and recruiter. Analyze how well a candidate's career card aligns with a specific company and role.

Your analysis should be thorough, fair, and constructive. Consider:
- Technical skills match
- Experience relevance
- Cultural fit based on work styles and values
- Project alignment with company needs
- Overall qualifications

Be specific and provide actionable feedback."""


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


class CategoryScore(BaseModel):
    score: float
    feedback: str = ""

    @field_validator('score')
    @classmethod
    def clamp_score(cls, v):
        return _clamp(v)


class CategoryScores(BaseModel):
    technicalSkills: CategoryScore
    experience: CategoryScore
    culturalFit: CategoryScore
    projectAlignment: CategoryScore


class ScoringResult(BaseModel):
    overallScore: float
    categoryScores: CategoryScores
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    overallFeedback: str = ""

    @field_validator('overallScore')
    @classmethod
    def clamp_overall(cls, v):
        return _clamp(v)


def build_scoring_prompt(card_data: Dict, company_description: str, role_description: str) -> str:
    return f"""Analyze this career card for alignment with the company and role:

COMPANY DESCRIPTION:
{company_description}

ROLE DESCRIPTION:
{role_description}

CAREER CARD:
{json.dumps(card_data, indent=2)}

Provide a comprehensive scoring and feedback."""


def score_career_card(card_data: Dict, company_description: str, role_description: str) -> Dict:
    """
    Score ``card_data`` against a company and role description.

    Raises:
        ExternalAPIError: the model reply is missing or does not match the schema
    """
    completion = call_tool(
        SCORING_PROMPT,
        build_scoring_prompt(card_data, company_description, role_description),
        SCORE_TOOL,
    )

    try:
        result = ScoringResult.model_validate(extract_payload(completion))
    except (LLMResponseError, PydanticValidationError) as e:
        logger.error(f"Unusable scoring reply: {e}")
        raise ExternalAPIError(SERVICE_NAME, details={'reason': 'malformed_score'})

    logger.info("Career card scored", extra={'overall_score': result.overallScore})
    return result.model_dump()
