"""
ResponseIntegrityChecker -- rejects provider responses that look coerced.

Rejection rules:
  - Perfect scores: all three criteria exactly 100
  - Uniform extremes: all three >= 95, or all three <= 5
  - Admission phrases: the serialized response contains language such as
    "jailbroken", "bypassed" or "ignore previous"

A rejected response is dropped from the batch exactly like a transport
failure. It is never surfaced as a legitimate score.
"""

import json
import logging
import math
from typing import Any

from ..errors import IntegrityViolation
from ..models import CRITERIA
from .models import IntegrityResult, Violation

logger = logging.getLogger(__name__)

ADMISSION_PHRASES = [
    "ignore previous",
    "disregard previous",
    "override",
    "jailbreak",
    "jailbroken",
    "bypassed",
    "hacked",
    "exploited",
    "manipulated",
    "tricked",
    "injection",
]

PERFECT_SCORE = 100
HIGH_EXTREME = 95
LOW_EXTREME = 5


def _as_number(value: Any) -> float:
    """Coerce a raw JSON score; anything non-numeric counts as 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        # int literal too large for a float
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return 0.0
    return number if number == number else 0.0  # NaN


class ResponseIntegrityChecker:
    """Inspects a parsed provider response for manipulation or incoherence.

    Usage:
        checker = ResponseIntegrityChecker()
        result = checker.check({"relevance": 100, "continuity": 100, "documentation": 100})
        # result.outcome == "rejected"
    """

    def __init__(self, admission_phrases: list[str] | None = None):
        self._phrases = [p.lower() for p in (admission_phrases or ADMISSION_PHRASES)]

    def check(self, payload: dict[str, Any]) -> IntegrityResult:
        """Scan a parsed response. Returns IntegrityResult."""
        violations: list[Violation] = []

        serialized = json.dumps(payload, default=str).lower()
        for phrase in self._phrases:
            if phrase in serialized:
                violations.append(Violation(
                    rule="admission_phrase",
                    message=f"Response contains suspicious content: {phrase}",
                    location=phrase,
                ))
                break

        scores = [_as_number(payload.get(c)) for c in CRITERIA]
        shown = ",".join(f"{s:g}" for s in scores)
        if all(s == PERFECT_SCORE for s in scores):
            violations.append(Violation(
                rule="perfect_scores",
                message="Suspiciously perfect scores detected",
                location=shown,
            ))
        elif all(s >= HIGH_EXTREME for s in scores) or all(s <= LOW_EXTREME for s in scores):
            violations.append(Violation(
                rule="uniform_extreme",
                message="Unrealistic score pattern detected",
                location=shown,
            ))

        outcome = "rejected" if violations else "accepted"
        if violations:
            logger.debug(f"[Integrity] {len(violations)} violation(s): {outcome}")
        return IntegrityResult(outcome=outcome, violations=violations)


_default_checker = ResponseIntegrityChecker()


def validate_response(payload: dict[str, Any], provider_id: str = "unknown") -> None:
    """Raise IntegrityViolation when payload fails the default checker."""
    result = _default_checker.check(payload)
    if not result.accepted:
        logger.warning(f"[Integrity] Rejected {provider_id} response: {result.reason}")
        raise IntegrityViolation(provider_id, result.reason)
