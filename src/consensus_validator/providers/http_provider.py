"""
HTTPProvider -- adapter for any OpenAI-compatible chat-completions endpoint.

Lets a self-hosted model (vLLM, Ollama, LM Studio, a gateway) join the
batch with no SDK:

  POST {base_url}/v1/chat/completions -> {"choices": [{"message": {"content": "<json>"}}]}

Security:
  - Response size is capped to prevent memory exhaustion
  - The same parse and integrity path as SDK-backed providers
"""

import logging
import time

import httpx

from ..errors import ProviderTransportFailure
from ..models import AssignmentContext, ValidationOutput
from ..rubrics import SYSTEM_MESSAGE, build_prompt
from .schema import parse_scoring_response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60
MAX_RESPONSE_BYTES = 1_000_000


class HTTPProvider:
    """
    Adapter: wraps an OpenAI-compatible HTTP endpoint as a ScoringProvider.

    Usage:
        provider = HTTPProvider("local", base_url="http://localhost:8000", model="llama3")
    """

    def __init__(
        self,
        provider_id: str,
        base_url: str,
        model: str,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._provider_id = provider_id
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def model(self) -> str:
        return self._model

    def _headers(self) -> dict[str, str]:
        """Build request headers including auth if configured."""
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _post(self, payload: dict) -> dict:
        """Send one POST. Any transport problem becomes ProviderTransportFailure."""
        url = f"{self._base_url}/v1/chat/completions"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                if len(response.content) > MAX_RESPONSE_BYTES:
                    raise ProviderTransportFailure(
                        self._provider_id, f"response exceeds {MAX_RESPONSE_BYTES} byte limit"
                    )
                return response.json()
        except httpx.TimeoutException as e:
            raise ProviderTransportFailure(self._provider_id, "timed out") from e
        except httpx.HTTPStatusError as e:
            raise ProviderTransportFailure(
                self._provider_id, f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderTransportFailure(self._provider_id, type(e).__name__) from e

    async def validate(
        self,
        content: str,
        context: AssignmentContext | None = None,
        brief: str | None = None,
    ) -> ValidationOutput:
        """Score content. Raises ProviderTransportFailure or IntegrityViolation."""
        start = time.time()
        data = await self._post({
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_MESSAGE},
                {"role": "user", "content": build_prompt(content, context, brief)},
            ],
            "temperature": 0,
            "response_format": {"type": "json_object"},
        })

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderTransportFailure(self._provider_id, "malformed completion body") from e

        payload = parse_scoring_response(text, self._provider_id)
        latency_ms = (time.time() - start) * 1000
        logger.info(f"[Provider:{self._provider_id}] Scored in {latency_ms:.0f}ms")
        return ValidationOutput(
            provider_id=self._provider_id,
            scores=payload.to_scores(),
            feedback=payload.to_feedback(),
            model=self._model,
            latency_ms=latency_ms,
        )
