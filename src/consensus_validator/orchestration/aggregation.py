"""
Consensus arithmetic. Pure functions of the successes list, nothing else.

consensus[c]  = round(mean(scores[c]))
overall       = round(mean(consensus))      # rounds twice, kept on purpose
confidence[c] = clamp(1 - pstdev(scores[c]) / 50, 0, 1)
overall_conf  = round(mean(confidence) * 100) / 100
"""

import math

from ..models import (
    CRITERIA,
    ConsensusResult,
    CriteriaConfidence,
    CriteriaScores,
    ValidationOutput,
    clamp,
    round_half_up,
)

SPREAD_FOR_ZERO_CONFIDENCE = 50


def mean(values: list[float]) -> float:
    return sum(values) / len(values)


def population_std(values: list[float]) -> float:
    """Population standard deviation. 0 for fewer than two values."""
    if len(values) <= 1:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def confidence_from_spread(std: float) -> float:
    return clamp(1 - std / SPREAD_FOR_ZERO_CONFIDENCE, 0.0, 1.0)


def aggregate(successes: list[ValidationOutput]) -> ConsensusResult:
    """
    Reduce provider outputs to one ConsensusResult.

    Raises:
        ValueError: successes is empty (the orchestrator never lets this happen)
    """
    if not successes:
        raise ValueError("Cannot aggregate an empty successes list")

    columns = {c: [float(getattr(s.scores, c)) for s in successes] for c in CRITERIA}

    consensus = CriteriaScores(**{c: round_half_up(mean(columns[c])) for c in CRITERIA})
    overall = round_half_up(mean(list(consensus.values())))

    confidence = CriteriaConfidence(
        **{c: confidence_from_spread(population_std(columns[c])) for c in CRITERIA}
    )
    overall_confidence = round_half_up(mean(list(confidence.values())) * 100) / 100

    return ConsensusResult(
        consensus=consensus,
        overall=overall,
        confidence=confidence,
        overall_confidence=overall_confidence,
        successes=list(successes),
    )
