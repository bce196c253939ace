"""
Response integrity -- post-hoc check that drops manipulated provider output.

Components:
  - ResponseIntegrityChecker: score-pattern and admission-phrase rules
  - validate_response: raising entry point used by the provider adapters
"""

from .checker import ADMISSION_PHRASES, ResponseIntegrityChecker, validate_response
from .models import IntegrityResult, Violation

__all__ = [
    "ADMISSION_PHRASES",
    "IntegrityResult",
    "ResponseIntegrityChecker",
    "Violation",
    "validate_response",
]
