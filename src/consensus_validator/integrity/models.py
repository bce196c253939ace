"""Data models for the response integrity checker."""

from dataclasses import dataclass, field


@dataclass
class Violation:
    """A single sign of manipulation found in a provider response.

    Attributes:
        rule: Category of violation (e.g. "perfect_scores", "admission_phrase").
        message: Human-readable explanation of what's wrong.
        location: The fragment or values that triggered the violation.
    """

    rule: str
    message: str
    location: str = ""


@dataclass
class IntegrityResult:
    """Result of checking one parsed provider response.

    Attributes:
        outcome: "accepted" or "rejected". Any violation rejects.
        violations: All violations found.
    """

    outcome: str = "accepted"
    violations: list[Violation] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.outcome == "accepted"

    @property
    def reason(self) -> str:
        return "; ".join(v.message for v in self.violations)
