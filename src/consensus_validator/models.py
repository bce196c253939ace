"""
Data contracts between the engine and its callers.

ValidationRequest in, ConsensusResult out. Everything here is created fresh
per validation call; persisting a ConsensusResult is the caller's job.
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

SCORE_MIN = 0
SCORE_MAX = 100
CRITERIA = ("relevance", "continuity", "documentation")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (81.5 -> 82), unlike round()."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    return max(low, min(high, value))


class ContentType(str, Enum):
    """Kind of educational content being scored. Selects the rubric."""

    ASSIGNMENT = "ASSIGNMENT"
    PRE_READ = "PRE_READ"
    LECTURE_NOTE = "LECTURE_NOTE"


@dataclass(frozen=True)
class AssignmentContext:
    """Assignment the content was written for. Immutable, one per request."""

    topic: str
    prerequisite_topics: tuple[str, ...] = ()
    guidelines: str | None = None
    content_type: ContentType = ContentType.LECTURE_NOTE

    def __post_init__(self):
        # Accept lists and plain strings from callers, store canonical forms
        object.__setattr__(self, "prerequisite_topics", tuple(self.prerequisite_topics))
        object.__setattr__(self, "content_type", ContentType(self.content_type))


@dataclass
class ValidationRequest:
    """Input to the engine."""

    content: str
    context: AssignmentContext | None = None
    brief: str | None = None


@dataclass
class CriteriaScores:
    """Three integer scores in [0, 100]."""

    relevance: int = 0
    continuity: int = 0
    documentation: int = 0

    @classmethod
    def clamped(cls, relevance: float, continuity: float, documentation: float) -> "CriteriaScores":
        return cls(
            relevance=round_half_up(clamp(relevance)),
            continuity=round_half_up(clamp(continuity)),
            documentation=round_half_up(clamp(documentation)),
        )

    def values(self) -> tuple[int, int, int]:
        return (self.relevance, self.continuity, self.documentation)


@dataclass
class Feedback:
    relevance: str = ""
    continuity: str = ""
    documentation: str = ""


@dataclass
class ValidationOutput:
    """One provider's scored opinion of the content."""

    provider_id: str
    scores: CriteriaScores
    feedback: Feedback = field(default_factory=Feedback)
    model: str = ""
    latency_ms: float = 0.0

    @property
    def is_stub(self) -> bool:
        return self.provider_id == "stub"


@dataclass
class CriteriaConfidence:
    """Per-criterion agreement in [0, 1]."""

    relevance: float = 1.0
    continuity: float = 1.0
    documentation: float = 1.0

    def values(self) -> tuple[float, float, float]:
        return (self.relevance, self.continuity, self.documentation)


@dataclass
class ConsensusResult:
    """Aggregated outcome of one batch validation."""

    consensus: CriteriaScores
    overall: int
    confidence: CriteriaConfidence
    overall_confidence: float
    successes: list[ValidationOutput] = field(default_factory=list)
    rejections: dict[str, str] = field(default_factory=dict)
    preprocessing: dict[str, Any] = field(default_factory=dict)

    @property
    def providers_succeeded(self) -> int:
        """Number of real (non-stub) providers behind the consensus."""
        return sum(1 for s in self.successes if not s.is_stub)

    @property
    def degraded(self) -> bool:
        """True when the consensus rests entirely on the stub."""
        return self.providers_succeeded == 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["providers_succeeded"] = self.providers_succeeded
        data["degraded"] = self.degraded
        return data
