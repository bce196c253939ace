"""
ScoringProvider protocol and the single-call fallback convention.

The orchestrator sees no difference between an SDK-backed provider, an
HTTP endpoint and the stub: each exposes provider_id and an async
validate() that either returns a ValidationOutput or raises
ProviderTransportFailure.
"""

import asyncio
import logging
from dataclasses import asdict, replace
from typing import Protocol, runtime_checkable

from ..errors import ProviderTransportFailure
from ..integrity import ResponseIntegrityChecker
from ..models import AssignmentContext, CriteriaScores, Feedback, ValidationOutput

logger = logging.getLogger(__name__)

FAILURE_FEEDBACK = Feedback(
    relevance="Content analysis failed - please check for formatting issues and try again",
    continuity="Unable to validate content flow - ensure content is complete and properly structured",
    documentation="Validation error occurred - please review content for completeness and clarity",
)


@runtime_checkable
class ScoringProvider(Protocol):
    """Interface every provider adapter implements.

    Example:
        class MyProvider:
            provider_id = "mine"

            async def validate(self, content, context=None, brief=None): ...
    """

    @property
    def provider_id(self) -> str: ...

    async def validate(
        self,
        content: str,
        context: AssignmentContext | None = None,
        brief: str | None = None,
    ) -> ValidationOutput: ...


def failure_output(provider_id: str) -> ValidationOutput:
    """Canned zero-score result with explanatory feedback."""
    return ValidationOutput(
        provider_id=provider_id,
        scores=CriteriaScores(0, 0, 0),
        feedback=Feedback(**vars(FAILURE_FEEDBACK)),
    )


def output_payload(output: ValidationOutput) -> dict:
    """Flatten a ValidationOutput into the JSON shape the integrity checker reads."""
    return {**asdict(output.scores), "feedback": asdict(output.feedback)}


def clamp_output(output: ValidationOutput) -> ValidationOutput:
    """Copy of output with every score clamped into [0, 100]."""
    return replace(output, scores=CriteriaScores.clamped(*output.scores.values()))


async def validate_with_fallback(
    provider: ScoringProvider,
    content: str,
    context: AssignmentContext | None = None,
    brief: str | None = None,
    checker: ResponseIntegrityChecker | None = None,
    timeout: float | None = None,
) -> ValidationOutput:
    """
    Single-call convention: never raises for provider-side failures.

    Used for one-off re-validation where there is no sibling batch to fall
    back on. Batch dispatch calls provider.validate() directly instead.
    Any failure, timeout or (when a checker is given) integrity rejection
    of a non-stub output returns the canned failure output.
    """
    try:
        output = await asyncio.wait_for(provider.validate(content, context, brief), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"[Provider:{provider.provider_id}] Validation timed out after {timeout}s")
        return failure_output(provider.provider_id)
    except ProviderTransportFailure as e:
        logger.error(f"[Provider:{provider.provider_id}] Validation failed: {e.reason}")
        return failure_output(provider.provider_id)
    except Exception as e:
        logger.error(
            f"[Provider:{provider.provider_id}] Validation raised unexpected "
            f"{type(e).__name__}: {e}"
        )
        return failure_output(provider.provider_id)

    if checker is not None and not output.is_stub:
        result = checker.check(output_payload(output))
        if not result.accepted:
            logger.warning(f"[Provider:{provider.provider_id}] Rejected: {result.reason}")
            return failure_output(provider.provider_id)
    return clamp_output(output)
