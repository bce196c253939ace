"""
Code-Based Graders -- named deterministic checks over a result object.

Used by the consensus evals to assert structural properties of a
ConsensusResult (score ranges, confidence bounds, successes non-empty)
in one pass, reporting every failing property instead of the first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CodeGraderResult:
    eval_name: str
    passed: bool
    checks_passed: int = 0
    checks_total: int = 0
    failures: list[str] = field(default_factory=list)


class CodeGrader:
    """Runs a list of named predicates against one output.

    Usage:
        grader = CodeGrader("consensus_shape")
        grader.add_check("has_successes", lambda r: len(r.successes) > 0)
        result = grader.grade(consensus_result)
        assert result.passed, result.failures
    """

    def __init__(self, eval_name: str):
        self.eval_name = eval_name
        self._checks: list[tuple[str, Callable[[Any], bool]]] = []

    def add_check(self, name: str, check_fn: Callable[[Any], bool]) -> "CodeGrader":
        self._checks.append((name, check_fn))
        return self

    def grade(self, output: Any) -> CodeGraderResult:
        failures = []
        for name, check_fn in self._checks:
            try:
                ok = check_fn(output)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                failures.append(f"ERROR: {name} -- {e}")
                continue
            if not ok:
                failures.append(f"FAIL: {name}")

        if failures:
            logger.info(f"[Grader:{self.eval_name}] {len(failures)} failing check(s)")
        return CodeGraderResult(
            eval_name=self.eval_name,
            passed=not failures,
            checks_passed=len(self._checks) - len(failures),
            checks_total=len(self._checks),
            failures=failures,
        )


def consensus_shape_grader() -> CodeGrader:
    """Invariants every ConsensusResult must satisfy, whatever the inputs."""
    from consensus_validator.models import CRITERIA

    grader = CodeGrader("consensus_shape")
    grader.add_check("has_successes", lambda r: len(r.successes) >= 1)
    grader.add_check(
        "scores_in_range",
        lambda r: all(0 <= getattr(r.consensus, c) <= 100 for c in CRITERIA),
    )
    grader.add_check("overall_in_range", lambda r: 0 <= r.overall <= 100)
    grader.add_check(
        "confidence_in_unit_interval",
        lambda r: all(0.0 <= getattr(r.confidence, c) <= 1.0 for c in CRITERIA),
    )
    grader.add_check("overall_confidence_in_unit_interval", lambda r: 0.0 <= r.overall_confidence <= 1.0)
    grader.add_check(
        "no_rejected_provider_in_successes",
        lambda r: not (set(r.rejections) & {s.provider_id for s in r.successes}),
    )
    return grader
