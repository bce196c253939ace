"""
Error taxonomy for the consensus engine.

Only InputRejected (and security.ValidationError for malformed input) ever
reaches the caller. Provider-side failures are caught by the orchestrator
and turn into fewer successes, never into an exception.
"""


class ConsensusError(Exception):
    """Base class for engine errors."""


class InputRejected(ConsensusError):
    """Raised by the injection gate. No model call has been made."""

    def __init__(self, reason: str):
        super().__init__(f"Content validation failed: {reason}")
        self.reason = reason


class ProviderTransportFailure(ConsensusError):
    """Network, credential, timeout or parse failure from one provider."""

    def __init__(self, provider_id: str, reason: str):
        super().__init__(f"{provider_id}: {reason}")
        self.provider_id = provider_id
        self.reason = reason


class IntegrityViolation(ProviderTransportFailure):
    """A parsed provider response looks manipulated or incoherent."""
