"""
Validation outcome models: per-requirement verdicts and aggregate scores.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .requirement_models import RequirementKind


class MatchStrategy(Enum):
    """Matcher layer that confirmed a requirement."""
    EXACT = "exact"
    CANONICAL = "canonical"
    SYNONYM = "synonym"
    KEYWORD = "keyword"
    POLICY = "policy"  # layout rule accepted by LAYOUT_EVALUATION_POLICY

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one target against the evidence."""
    found: bool
    strategy: Optional[MatchStrategy] = None
    match_ratio: float = 0.0


@dataclass(frozen=True)
class Verdict:
    """Found/valid outcome for one requirement."""

    requirement_id: str
    description: str
    kind: RequirementKind
    required: bool
    found: bool
    strategy: Optional[MatchStrategy] = None
    rule: Optional[str] = None
    """Layout rule name (layout verdicts only)."""

    @property
    def valid(self) -> bool:
        """Absence only invalidates required items."""
        return self.found or not self.required


@dataclass(frozen=True)
class ComplianceScore:
    """Category ratios, weighted overall score and pass/fail."""
    text: float
    symbol: float
    layout: float
    overall: float
    passed: bool


@dataclass(frozen=True)
class ValidationOutcome:
    """Everything the report builder needs."""
    text_verdicts: Tuple[Verdict, ...] = ()
    symbol_verdicts: Tuple[Verdict, ...] = ()
    layout_verdicts: Tuple[Verdict, ...] = ()
    score: ComplianceScore = field(
        default_factory=lambda: ComplianceScore(1.0, 1.0, 1.0, 1.0, True)
    )
