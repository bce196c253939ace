"""
LLMProvider -- adapter that scores content through an SDK-backed LLMClient.

One instance per configured external service (openai, gemini, anthropic).
Each validate() call builds the rubric prompt, makes exactly one
temperature-zero call, and parses the strict JSON contract.
"""

import logging

from ..errors import ProviderTransportFailure
from ..llm import CacheablePrompt, LLMClient
from ..models import AssignmentContext, ValidationOutput
from ..rubrics import SYSTEM_MESSAGE, build_prompt
from .schema import parse_scoring_response

logger = logging.getLogger(__name__)


class LLMProvider:
    """
    Adapter: wraps an LLMClient as a ScoringProvider.

    Usage:
        provider = LLMProvider("openai", LLMClient(provider="openai", api_key=key))
        output = await provider.validate(sanitized, context)
    """

    def __init__(self, provider_id: str, client: LLMClient):
        self._provider_id = provider_id
        self._client = client

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def model(self) -> str:
        return self._client.model

    async def validate(
        self,
        content: str,
        context: AssignmentContext | None = None,
        brief: str | None = None,
    ) -> ValidationOutput:
        """Score content. Raises ProviderTransportFailure or IntegrityViolation."""
        prompt = CacheablePrompt(
            system=SYSTEM_MESSAGE,
            user_message=build_prompt(content, context, brief),
        )
        try:
            response = await self._client.call(prompt=prompt, role="scoring", temperature=0.0)
        except ProviderTransportFailure as e:
            # client errors carry the SDK name ("google"), not this adapter's id
            raise ProviderTransportFailure(self._provider_id, e.reason) from e
        payload = parse_scoring_response(response.content, self._provider_id)

        logger.info(f"[Provider:{self._provider_id}] Scored in {response.latency_ms:.0f}ms")
        return ValidationOutput(
            provider_id=self._provider_id,
            scores=payload.to_scores(),
            feedback=payload.to_feedback(),
            model=response.model,
            latency_ms=response.latency_ms,
        )
