"""
Pydantic schema for the scoring JSON every provider must return.

Parsing order for one raw response:
    extract_json -> error-JSON check -> integrity check -> ScorePayload -> clamp
"""

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ProviderTransportFailure
from ..integrity import validate_response
from ..llm.json_parser import extract_json
from ..models import CriteriaScores, Feedback

logger = logging.getLogger(__name__)


class FeedbackPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    relevance: str = ""
    continuity: str = ""
    documentation: str = ""

    @field_validator("relevance", "continuity", "documentation", mode="before")
    @classmethod
    def _to_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ScorePayload(BaseModel):
    """Provider output contract. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    relevance: float = 0
    continuity: float = 0
    documentation: float = 0
    feedback: FeedbackPayload = Field(default_factory=FeedbackPayload)

    @field_validator("relevance", "continuity", "documentation", mode="before")
    @classmethod
    def _to_number(cls, value: Any) -> float:
        if isinstance(value, bool):
            return 0
        try:
            number = float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
        except (TypeError, ValueError):
            return 0
        return number if number == number else 0

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback_object(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    def to_scores(self) -> CriteriaScores:
        return CriteriaScores.clamped(self.relevance, self.continuity, self.documentation)

    def to_feedback(self) -> Feedback:
        return Feedback(
            relevance=self.feedback.relevance,
            continuity=self.feedback.continuity,
            documentation=self.feedback.documentation,
        )


def parse_scoring_response(text: str, provider_id: str) -> ScorePayload:
    """
    Turn raw model text into a checked ScorePayload.

    Raises:
        ProviderTransportFailure: no JSON object, or the error escape hatch was used
        IntegrityViolation: the response looks manipulated
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ProviderTransportFailure(provider_id, "response is not a JSON object")

    if "error" in data and data.get("validation_attempted") is False:
        raise ProviderTransportFailure(
            provider_id, f"provider declined: {str(data.get('error'))[:200]}"
        )

    validate_response(data, provider_id)
    return ScorePayload.model_validate(data)
