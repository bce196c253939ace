"""
Consensus Orchestrator - gate, fan out to every provider, filter, aggregate.

Pipeline (single shot, no state revisited, no retries):
    RECEIVED -> GATED -> SANITIZED -> PROMPTED -> DISPATCHED (parallel)
    -> COLLECTED -> INTEGRITY-FILTERED -> AGGREGATED -> RETURNED

Dispatch waits for every call to settle. A failed, timed-out or rejected
call only shrinks the successes list; when nothing survives, the stub
fills in so the caller always gets a complete ConsensusResult. The only
exceptions that escape are InputRejected and ValidationError, both raised
before any provider is called.
"""

import asyncio
import logging
from dataclasses import asdict

from ..config import EngineConfig
from ..errors import IntegrityViolation, ProviderTransportFailure
from ..integrity import ResponseIntegrityChecker
from ..models import ConsensusResult, ValidationOutput, ValidationRequest
from ..preprocessing import check_structure, preprocess_content
from ..providers import (
    ScoringProvider,
    StubProvider,
    build_providers,
    clamp_output,
    output_payload,
    validate_with_fallback,
)
from ..security import sanitize_content, validate_for_injection, validate_request
from .aggregation import aggregate

logger = logging.getLogger(__name__)


class ConsensusOrchestrator:
    """
    Runs one validation request against every configured provider.

    Usage:
        orchestrator = ConsensusOrchestrator.from_env()
        result = await orchestrator.run_batch_validation(
            ValidationRequest(content=text, context=AssignmentContext(topic="Recursion"))
        )
        if result.degraded:
            print("No provider corroborated this score")
    """

    def __init__(
        self,
        providers: list[ScoringProvider] | None = None,
        config: EngineConfig | None = None,
        stub: ScoringProvider | None = None,
        checker: ResponseIntegrityChecker | None = None,
    ):
        self.config = config or EngineConfig()
        self.providers = list(providers or [])
        self.stub = stub or StubProvider()
        self.checker = checker or ResponseIntegrityChecker()
        logger.info(
            f"[Consensus] Initialized with {len(self.providers)} provider(s): "
            f"{[p.provider_id for p in self.providers] or 'stub only'}"
        )

    @classmethod
    def from_config(cls, config: EngineConfig) -> "ConsensusOrchestrator":
        return cls(providers=build_providers(config), config=config)

    @classmethod
    def from_env(cls) -> "ConsensusOrchestrator":
        return cls.from_config(EngineConfig.from_env())

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def run_batch_validation(self, request: ValidationRequest) -> ConsensusResult:
        """Full pipeline. Raises only InputRejected or ValidationError."""
        cleaned, sanitized, preprocessing = self._prepare(request)

        dispatched = self.providers or [self.stub]
        logger.info(
            f"[Consensus] Dispatching to {len(dispatched)} provider(s) "
            f"({len(sanitized)} chars, context={'yes' if request.context else 'no'})"
        )
        settled = await asyncio.gather(
            *[
                self._dispatch(p, self._content_for(p, cleaned, sanitized), request)
                for p in dispatched
            ],
            return_exceptions=True,
        )

        successes: list[ValidationOutput] = []
        rejections: dict[str, str] = {}
        for provider, outcome in zip(dispatched, settled):
            if isinstance(outcome, BaseException):
                rejections[provider.provider_id] = self._describe_failure(provider, outcome)
                continue
            reason = self._integrity_reason(outcome)
            if reason:
                logger.warning(f"[Consensus] {provider.provider_id} excluded: {reason}")
                rejections[provider.provider_id] = reason
                continue
            successes.append(clamp_output(outcome))

        if not successes:
            logger.warning(
                f"[Consensus] All {len(dispatched)} provider(s) failed or were rejected "
                f"-- falling back to stub"
            )
            successes.append(await self.stub.validate(cleaned, request.context, request.brief))

        result = aggregate(successes)
        result.rejections = rejections
        result.preprocessing = preprocessing
        logger.info(
            f"[Consensus] Complete: overall={result.overall} "
            f"confidence={result.overall_confidence:.2f} "
            f"({result.providers_succeeded}/{len(self.providers)} providers succeeded)"
        )
        return result

    async def run_single_validation(
        self,
        request: ValidationRequest,
        provider_id: str | None = None,
    ) -> ValidationOutput:
        """
        Re-validate with one provider. Provider failures do not raise: they
        return a zero-score output with explanatory feedback.
        """
        cleaned, sanitized, _ = self._prepare(request)
        provider = self._select(provider_id)

        return await validate_with_fallback(
            provider,
            self._content_for(provider, cleaned, sanitized),
            request.context,
            request.brief,
            checker=self.checker,
            timeout=self.config.timeout_seconds,
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _prepare(self, request: ValidationRequest) -> tuple[str, str, dict]:
        """
        RECEIVED -> GATED -> SANITIZED. Raises before any provider call.

        Returns (cleaned, sanitized, preprocessing report).
        """
        pre = preprocess_content(request.content)
        cleaned = ValidationRequest(
            content=pre.cleaned_content, context=request.context, brief=request.brief
        )
        validate_request(cleaned, self.config.max_content_length)
        validate_for_injection(cleaned.content)
        sanitized = sanitize_content(cleaned.content)

        structure = check_structure(pre.cleaned_content)
        preprocessing = {
            "warnings": pre.warnings,
            "metadata": asdict(pre.metadata) if pre.metadata else {},
            "structure": asdict(structure),
        }
        return cleaned.content, sanitized, preprocessing

    def _content_for(self, provider: ScoringProvider, cleaned: str, sanitized: str) -> str:
        """Remote providers see sanitized text; the stub scores the cleaned text."""
        return cleaned if provider is self.stub else sanitized

    async def _dispatch(
        self, provider: ScoringProvider, content: str, request: ValidationRequest
    ) -> ValidationOutput:
        """One provider call, bounded by the configured timeout."""
        try:
            return await asyncio.wait_for(
                provider.validate(content, request.context, request.brief),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ProviderTransportFailure(
                provider.provider_id, f"timed out after {self.config.timeout_seconds}s"
            ) from e

    def _integrity_reason(self, output: ValidationOutput) -> str | None:
        """INTEGRITY-FILTERED. The stub is trusted; everything else is checked."""
        if output.is_stub:
            return None
        result = self.checker.check(output_payload(output))
        return None if result.accepted else result.reason

    def _describe_failure(self, provider: ScoringProvider, error: BaseException) -> str:
        if isinstance(error, IntegrityViolation):
            logger.warning(f"[Consensus] {provider.provider_id} excluded: {error.reason}")
            return error.reason
        if isinstance(error, ProviderTransportFailure):
            logger.error(f"[Consensus] {provider.provider_id} failed: {error.reason}")
            return error.reason
        logger.error(
            f"[Consensus] {provider.provider_id} raised unexpected "
            f"{type(error).__name__}: {error}"
        )
        return f"unexpected error: {type(error).__name__}"

    def _select(self, provider_id: str | None) -> ScoringProvider:
        if provider_id is None:
            return self.providers[0] if self.providers else self.stub
        for provider in [*self.providers, self.stub]:
            if provider.provider_id == provider_id:
                return provider
        raise ValueError(f"Unknown provider: {provider_id}")
