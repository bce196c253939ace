"""Fake providers and canned provider text shared by the eval tasks."""

import asyncio
import json

from consensus_validator.errors import ProviderTransportFailure
from consensus_validator.models import CriteriaScores, Feedback, ValidationOutput

SAMPLE_CONTENT = """# Recursion in Python

Recursion is a technique where a function calls itself on a smaller input.

## Base case

Every recursive function needs a base case that stops the calls.

```python
def factorial(n):
    if n <= 1:
        return 1
    return n * factorial(n - 1)
```

## Recursive case

Each call must move toward the base case, otherwise the stack overflows."""


def scoring_json(
    relevance=82,
    continuity=72,
    documentation=91,
    relevance_feedback="Covers recursion with a clear focus.",
    continuity_feedback="Builds on functions but skips the call stack.",
    documentation_feedback="Well organized with a worked example.",
) -> str:
    """Raw provider text in the output contract shape."""
    return json.dumps({
        "relevance": relevance,
        "continuity": continuity,
        "documentation": documentation,
        "feedback": {
            "relevance": relevance_feedback,
            "continuity": continuity_feedback,
            "documentation": documentation_feedback,
        },
    })



class FakeProvider:
    """ScoringProvider returning fixed scores. Records every call."""

    def __init__(self, provider_id: str, relevance: int, continuity: int, documentation: int,
                 feedback: Feedback | None = None, delay: float = 0.0):
        self._provider_id = provider_id
        self.scores = CriteriaScores(relevance, continuity, documentation)
        self.feedback = feedback or Feedback("Focused.", "Flows well.", "Clear headings.")
        self.delay = delay
        self.calls: list[tuple] = []

    @property
    def provider_id(self) -> str:
        return self._provider_id

    async def validate(self, content, context=None, brief=None):
        self.calls.append((content, context, brief))
        if self.delay:
            await asyncio.sleep(self.delay)
        return ValidationOutput(
            provider_id=self._provider_id,
            scores=CriteriaScores(*self.scores.values()),
            feedback=self.feedback,
            model="fake",
        )


class FailingProvider:
    """ScoringProvider that always fails the way a dead endpoint does."""

    def __init__(self, provider_id: str = "failing", error: Exception | None = None):
        self._provider_id = provider_id
        self.error = error
        self.calls = 0

    @property
    def provider_id(self) -> str:
        return self._provider_id

    async def validate(self, content, context=None, brief=None):
        self.calls += 1
        raise self.error or ProviderTransportFailure(self._provider_id, "connection refused")

