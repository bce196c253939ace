"""
Provider registry -- turns EngineConfig into adapter instances.

Adding a provider is a configuration change: business logic never
branches on provider identity, only this factory does.

Usage:
    providers = build_providers(EngineConfig.from_env())
    orchestrator = ConsensusOrchestrator(providers=providers)
"""

import logging

from ..config import EngineConfig, ProviderSettings
from ..llm import LLMClient
from ..security import validate_in_choices
from .base import ScoringProvider
from .http_provider import HTTPProvider
from .llm_provider import LLMProvider

logger = logging.getLogger(__name__)

SDK_KINDS = {"openai", "gemini", "anthropic"}
PROVIDER_KINDS = sorted(SDK_KINDS | {"http"})


def build_provider(settings: ProviderSettings, timeout: float) -> ScoringProvider:
    """Create one adapter from its settings.

    Raises:
        ValidationError: unknown kind (a ValueError)
        ValueError: http kind without base_url
    """
    validate_in_choices(settings.kind, PROVIDER_KINDS, "provider kind")
    if settings.kind in SDK_KINDS:
        client = LLMClient(
            provider=settings.kind,
            model=settings.model,
            api_key=settings.api_key,
            timeout=timeout,
        )
        return LLMProvider(settings.provider_id, client)
    if not settings.base_url:
        raise ValueError(f"Provider {settings.provider_id} requires base_url")
    return HTTPProvider(
        settings.provider_id,
        base_url=settings.base_url,
        model=settings.model or "default",
        api_key=settings.api_key,
        timeout=timeout,
    )


def build_providers(config: EngineConfig) -> list[ScoringProvider]:
    """Create every configured remote adapter. An empty list means stub-only."""
    providers = [build_provider(s, config.timeout_seconds) for s in config.providers]
    ids = [p.provider_id for p in providers]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate provider ids: {ids}")
    logger.info(f"[Registry] Built {len(providers)} provider(s): {ids}")
    return providers
