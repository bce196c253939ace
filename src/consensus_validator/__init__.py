"""
consensus_validator -- multi-provider consensus scoring for educational content.

Usage:
    from consensus_validator import ConsensusOrchestrator, ValidationRequest

    orchestrator = ConsensusOrchestrator.from_env()
    result = await orchestrator.run_batch_validation(ValidationRequest(content=text))
    print(result.overall, result.overall_confidence)
"""

from .config import EngineConfig, ProviderSettings
from .errors import ConsensusError, InputRejected, IntegrityViolation, ProviderTransportFailure
from .models import (
    AssignmentContext,
    ConsensusResult,
    ContentType,
    CriteriaConfidence,
    CriteriaScores,
    Feedback,
    ValidationOutput,
    ValidationRequest,
)
from .orchestration import ConsensusOrchestrator
from .security import ValidationError

__version__ = "0.1.0"

__all__ = [
    "AssignmentContext",
    "ConsensusError",
    "ConsensusOrchestrator",
    "ConsensusResult",
    "ContentType",
    "CriteriaConfidence",
    "CriteriaScores",
    "EngineConfig",
    "Feedback",
    "InputRejected",
    "IntegrityViolation",
    "ProviderSettings",
    "ProviderTransportFailure",
    "ValidationError",
    "ValidationOutput",
    "ValidationRequest",
]
