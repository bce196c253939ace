"""
Provider-agnostic async LLM client for scoring calls.

Features:
  - One client type for OpenAI, Google (Gemini) and Anthropic
  - Deterministic by default (temperature 0) with JSON output mode where supported
  - Exactly one attempt per call: no retries, the orchestrator degrades instead
  - Timeout enforcement at the SDK boundary
  - Token tracking per call
  - Security: prompt sanitization, size limits, no secrets in logs

Failures raise ProviderTransportFailure so the caller can exclude this
provider from the batch without inspecting SDK exception types.

Usage:
    client = LLMClient(provider="openai", api_key=key)
    prompt = CacheablePrompt(system=SYSTEM_MESSAGE, user_message=rubric_prompt)
    response = await client.call(prompt=prompt, role="scoring")
    response.content  # str
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from ..errors import ProviderTransportFailure
from ..security.prompt_guard import sanitize_for_prompt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60
DEFAULT_MAX_TOKENS = 1024
DEFAULT_MAX_PROMPT_LENGTH = 200_000

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "google": "gemini-1.5-flash",
    "anthropic": "claude-sonnet-4-20250514",
}
PROVIDER_ALIASES = {"gemini": "google"}


# =============================================================================
# DATA MODELS
# =============================================================================


@dataclass
class CacheablePrompt:
    """
    Separates the stable system instructions from the per-call message.

    - system: Hardened engine instructions (identical for every call)
    - user_message: Rubric prompt with the fenced content
    """

    system: str = ""
    user_message: str = ""

    def to_flat_prompt(self) -> str:
        """Flatten to a single string (for providers without a system slot)."""
        parts = [p for p in (self.system, self.user_message) if p]
        return "\n\n".join(parts)


@dataclass
class TokenUsage:
    """Token usage tracking for a single LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        self.total_tokens = self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""
    provider: str = ""
    latency_ms: float = 0.0


# =============================================================================
# LLM CLIENT
# =============================================================================


class LLMClient:
    """
    Provider-agnostic LLM client.

    Usage:
        client = LLMClient(provider="google", api_key=key, timeout=30)
        response = await client.call(prompt="Score this", role="scoring")
    """

    def __init__(
        self,
        provider: str = "openai",
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_prompt_length: int = DEFAULT_MAX_PROMPT_LENGTH,
    ):
        provider = provider.lower()
        self._provider = PROVIDER_ALIASES.get(provider, provider)
        if self._provider not in DEFAULT_MODELS:
            raise ValueError(f"Unsupported provider: {provider}")
        self._model = model or DEFAULT_MODELS[self._provider]
        self._api_key = api_key or ""
        self._timeout = timeout
        self._max_prompt_length = max_prompt_length
        self._client: Any = None
        self._total_usage = TokenUsage()

        if not self._api_key:
            logger.warning(f"[LLM] No API key for {self._provider} -- calls will fail")
        logger.info(
            f"[LLM] Initialized {self._provider} client "
            f"(model={self._model}, timeout={self._timeout}s)"
        )

    def _init_client(self) -> None:
        """Initialize the provider-specific SDK client on first use."""
        if self._provider == "openai":
            import openai

            self._client = openai.AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        elif self._provider == "anthropic":
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=self._api_key, timeout=self._timeout)
        elif self._provider == "google":
            import google.generativeai as genai

            genai.configure(api_key=self._api_key)
            self._client = genai.GenerativeModel(self._model)

    async def call(
        self,
        prompt: str | CacheablePrompt,
        role: str = "scoring",
        temperature: float = 0.0,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = True,
    ) -> LLMResponse:
        """
        Make exactly one LLM call.

        Args:
            prompt: String or CacheablePrompt. Strings become the user message.
            role: Semantic role hint, used for logging only.
            temperature: Sampling temperature (0.0 = deterministic).
            max_tokens: Maximum output tokens.
            json_mode: Ask the provider for a JSON object where supported.

        Returns:
            LLMResponse with .content and .usage

        Raises:
            ProviderTransportFailure: missing key, missing SDK, timeout or API error
        """
        if isinstance(prompt, str):
            prompt = CacheablePrompt(user_message=prompt)
        prompt = self._sanitize_prompt(prompt)

        if not self._api_key:
            raise ProviderTransportFailure(self._provider, "API key missing")

        start = time.time()
        try:
            if self._client is None:
                self._init_client()
            response = await self._call_provider(prompt, temperature, max_tokens, json_mode)
        except ImportError as e:
            raise ProviderTransportFailure(self._provider, f"SDK not installed: {e.name}") from e
        except (asyncio.TimeoutError, TimeoutError) as e:
            raise ProviderTransportFailure(self._provider, "timed out") from e
        except ProviderTransportFailure:
            raise
        except Exception as e:
            raise ProviderTransportFailure(self._provider, type(e).__name__) from e

        response.latency_ms = (time.time() - start) * 1000
        self._track_usage(response.usage)
        logger.debug(
            f"[LLM] {self._provider}/{role}: "
            f"{response.usage.input_tokens}in + {response.usage.output_tokens}out "
            f"({response.latency_ms:.0f}ms)"
        )
        return response

    def _sanitize_prompt(self, prompt: CacheablePrompt) -> CacheablePrompt:
        """Enforce size limits and strip null bytes."""
        return CacheablePrompt(
            system=sanitize_for_prompt(prompt.system, max_length=self._max_prompt_length // 4),
            user_message=sanitize_for_prompt(prompt.user_message, max_length=self._max_prompt_length),
        )

    async def _call_provider(
        self,
        prompt: CacheablePrompt,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> LLMResponse:
        """Dispatch to provider-specific implementation."""
        if self._provider == "openai":
            return await self._call_openai(prompt, temperature, max_tokens, json_mode)
        elif self._provider == "google":
            return await self._call_google(prompt, temperature, max_tokens, json_mode)
        else:
            return await self._call_anthropic(prompt, temperature, max_tokens)

    async def _call_openai(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int, json_mode: bool
    ) -> LLMResponse:
        messages = []
        if prompt.system:
            messages.append({"role": "system", "content": prompt.system})
        messages.append({"role": "user", "content": prompt.user_message})

        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

        usage_data = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage_data.prompt_tokens if usage_data else 0,
                output_tokens=usage_data.completion_tokens if usage_data else 0,
            ),
            model=self._model,
            provider="openai",
        )

    async def _call_google(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int, json_mode: bool
    ) -> LLMResponse:
        """Google Gemini. The SDK call is blocking, so it runs in a worker thread."""
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        response = await asyncio.wait_for(
            asyncio.to_thread(
                self._client.generate_content,
                prompt.to_flat_prompt(),
                generation_config=generation_config,
            ),
            timeout=self._timeout,
        )

        input_tok = 0
        output_tok = 0
        if getattr(response, "usage_metadata", None):
            input_tok = getattr(response.usage_metadata, "prompt_token_count", 0)
            output_tok = getattr(response.usage_metadata, "candidates_token_count", 0)

        return LLMResponse(
            content=response.text,
            usage=TokenUsage(input_tokens=input_tok, output_tokens=output_tok),
            model=self._model,
            provider="google",
        )

    async def _call_anthropic(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int
    ) -> LLMResponse:
        """Anthropic has no JSON mode; the output contract in the prompt carries it."""
        kwargs: dict[str, Any] = {}
        if prompt.system:
            kwargs["system"] = prompt.system

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt.user_message}],
            **kwargs,
        )

        text = "".join(block.text for block in response.content if hasattr(block, "text"))
        usage_data = response.usage
        return LLMResponse(
            content=text,
            usage=TokenUsage(
                input_tokens=getattr(usage_data, "input_tokens", 0),
                output_tokens=getattr(usage_data, "output_tokens", 0),
            ),
            model=self._model,
            provider="anthropic",
        )

    def _track_usage(self, usage: TokenUsage) -> None:
        """Accumulate usage stats across calls."""
        self._total_usage.input_tokens += usage.input_tokens
        self._total_usage.output_tokens += usage.output_tokens
        self._total_usage.total_tokens += usage.total_tokens

    @property
    def total_usage(self) -> TokenUsage:
        """Cumulative token usage across all calls in this client's lifetime."""
        return self._total_usage

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key)
