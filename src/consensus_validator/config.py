"""
Engine configuration.

Which remote providers are active is decided by which credentials are
present. With no environment at all the engine still runs on the stub.

Environment:
    OPENAI_API_KEY, OPENAI_MODEL
    GEMINI_API_KEY (or GOOGLE_API_KEY), GEMINI_MODEL
    ANTHROPIC_API_KEY, ANTHROPIC_MODEL
    CONSENSUS_HTTP_BASE_URL, CONSENSUS_HTTP_API_KEY, CONSENSUS_HTTP_MODEL
    CONSENSUS_TIMEOUT_SECONDS        (default 60)
    CONSENSUS_MAX_CONTENT_LENGTH     (default 15000)
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_CONTENT_LENGTH = 15_000
DEFAULT_HTTP_MODEL = "default"


@dataclass
class ProviderSettings:
    """One remote provider to dispatch to.

    kind is one of "openai", "gemini", "anthropic", "http".
    """

    kind: str
    api_key: str = ""
    model: str | None = None
    base_url: str | None = None
    name: str | None = None

    @property
    def provider_id(self) -> str:
        return self.name or self.kind


@dataclass
class EngineConfig:
    """Configuration for a ConsensusOrchestrator."""

    providers: list[ProviderSettings] = field(default_factory=list)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """Build config from environment variables. Missing credentials disable a provider."""
        env = os.environ if environ is None else environ
        providers: list[ProviderSettings] = []

        if env.get("OPENAI_API_KEY"):
            providers.append(ProviderSettings(
                kind="openai", api_key=env["OPENAI_API_KEY"], model=env.get("OPENAI_MODEL"),
            ))
        gemini_key = env.get("GEMINI_API_KEY") or env.get("GOOGLE_API_KEY")
        if gemini_key:
            providers.append(ProviderSettings(
                kind="gemini", api_key=gemini_key, model=env.get("GEMINI_MODEL"),
            ))
        if env.get("ANTHROPIC_API_KEY"):
            providers.append(ProviderSettings(
                kind="anthropic", api_key=env["ANTHROPIC_API_KEY"], model=env.get("ANTHROPIC_MODEL"),
            ))
        if env.get("CONSENSUS_HTTP_BASE_URL"):
            providers.append(ProviderSettings(
                kind="http",
                base_url=env["CONSENSUS_HTTP_BASE_URL"],
                api_key=env.get("CONSENSUS_HTTP_API_KEY", ""),
                model=env.get("CONSENSUS_HTTP_MODEL", DEFAULT_HTTP_MODEL),
            ))

        config = cls(
            providers=providers,
            timeout_seconds=float(env.get("CONSENSUS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
            max_content_length=int(env.get("CONSENSUS_MAX_CONTENT_LENGTH", DEFAULT_MAX_CONTENT_LENGTH)),
        )
        logger.info(
            f"[Config] {len(providers)} remote provider(s) configured: "
            f"{[p.provider_id for p in providers] or 'none (stub only)'}"
        )
        return config
