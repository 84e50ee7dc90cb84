"""
Compliance scoring over per-requirement verdicts.
"""
import logging
import math
from typing import Iterable, Sequence

from label_compliance.core.constants import (
    COMPLIANCE_THRESHOLD,
    LAYOUT_WEIGHT,
    SYMBOL_WEIGHT,
    TEXT_WEIGHT,
)
from label_compliance.models.validation_models import ComplianceScore, Verdict

logger = logging.getLogger(__name__)


def category_ratio(verdicts: Iterable[Verdict]) -> float:
    """
    Share of required verdicts that were found.

    Optional verdicts are ignored. A category with no required items is a
    vacuous pass and scores exactly 1.0.
    """
    required = [v for v in verdicts if v.required]
    if not required:
        return 1.0
    return sum(1 for v in required if v.found) / len(required)


class ComplianceAggregator:
    """Combine category ratios into a weighted, thresholded score."""

    def __init__(
        self,
        text_weight: float = TEXT_WEIGHT,
        symbol_weight: float = SYMBOL_WEIGHT,
        layout_weight: float = LAYOUT_WEIGHT,
        threshold: float = COMPLIANCE_THRESHOLD
    ):
        total = text_weight + symbol_weight + layout_weight
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Category weights must sum to 1.0, got {total}")
        self.text_weight = text_weight
        self.symbol_weight = symbol_weight
        self.layout_weight = layout_weight
        self.threshold = threshold

    def passes(self, overall: float) -> bool:
        """True when ``overall`` reaches the threshold."""
        return overall >= self.threshold

    def weighted_overall(self, text: float, symbol: float, layout: float) -> float:
        return (
            text * self.text_weight
            + symbol * self.symbol_weight
            + layout * self.layout_weight
        )

    def aggregate(
        self,
        text_verdicts: Sequence[Verdict],
        symbol_verdicts: Sequence[Verdict],
        layout_verdicts: Sequence[Verdict]
    ) -> ComplianceScore:
        """
        Score one validation run.

        Computes strictly from the verdicts given; layout verdicts are not
        assumed valid here.
        """
        text = category_ratio(text_verdicts)
        symbol = category_ratio(symbol_verdicts)
        layout = category_ratio(layout_verdicts)
        overall = self.weighted_overall(text, symbol, layout)
        passed = self.passes(overall)

        logger.info(
            f"Compliance: text={text:.2%} symbol={symbol:.2%} layout={layout:.2%} "
            f"overall={overall:.2%} passed={passed}",
            extra={"extra_fields": {"compliance": {
                "text": text, "symbol": symbol, "layout": layout, "overall": overall, "passed": passed
            }}}
        )
        return ComplianceScore(text=text, symbol=symbol, layout=layout, overall=overall, passed=passed)
