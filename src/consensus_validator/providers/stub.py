"""
StubProvider -- deterministic, offline fallback.

Scores are a pure function of content length (and whether a brief was
given), so identical input always yields identical output. Every score
lands in [50, 100].
"""

from ..models import AssignmentContext, CriteriaScores, Feedback, ValidationOutput, clamp

STUB_ID = "stub"
STUB_FLOOR = 50

STUB_FEEDBACK = Feedback(
    relevance="AI validation unavailable - please ensure content covers the required topic comprehensively",
    continuity="AI validation unavailable - please ensure content flows logically from introduction to conclusion",
    documentation="AI validation unavailable - please ensure content is well-structured with clear headings and examples",
)


def stub_scores(content: str, brief: str | None = None) -> CriteriaScores:
    length = len(content)
    relevance = (80 if brief else 70) + (length % 20) - 10
    continuity = 65 + (length % 30) - 10
    documentation = 75 + (length % 25) - 10
    return CriteriaScores(
        relevance=int(clamp(relevance, STUB_FLOOR)),
        continuity=int(clamp(continuity, STUB_FLOOR)),
        documentation=int(clamp(documentation, STUB_FLOOR)),
    )


class StubProvider:
    """Always-available provider. Never raises."""

    @property
    def provider_id(self) -> str:
        return STUB_ID

    async def validate(
        self,
        content: str,
        context: AssignmentContext | None = None,
        brief: str | None = None,
    ) -> ValidationOutput:
        return ValidationOutput(
            provider_id=STUB_ID,
            scores=stub_scores(content, brief),
            feedback=Feedback(**vars(STUB_FEEDBACK)),
            model="stub",
        )
