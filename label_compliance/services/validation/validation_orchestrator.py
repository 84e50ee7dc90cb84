"""
Validation orchestration for label compliance.

Runs the pipeline for one label: build requirements, normalize evidence,
match every requirement, aggregate scores and build the report. Each run
works on its own local data; the service holds only configuration.
"""
import logging
import time
from typing import Any, Mapping, Optional, Tuple

from label_compliance.core.config import settings
from label_compliance.models.api_models import ValidationReport
from label_compliance.models.evidence_models import NormalizedEvidence
from label_compliance.models.requirement_models import Requirement, RequirementSet, SymbolRequirement
from label_compliance.models.validation_models import MatchResult, MatchStrategy, ValidationOutcome, Verdict
from label_compliance.services.report_builder import ReportBuilder
from label_compliance.services.requirements import RequirementBuilder
from label_compliance.services.synonyms import DEFAULT_SYNONYM_TABLE

from .aggregator import ComplianceAggregator
from .evidence_normalizer import EvidenceNormalizer
from .matcher import Matcher

logger = logging.getLogger(__name__)

LAYOUT_POLICIES = ("assume_valid", "match")


class ComplianceValidationService:
    """Validate detected label content against legal requirements."""

    def __init__(
        self,
        normalizer: Optional[EvidenceNormalizer] = None,
        matcher: Optional[Matcher] = None,
        aggregator: Optional[ComplianceAggregator] = None,
        builder: Optional[RequirementBuilder] = None,
        report_builder: Optional[ReportBuilder] = None,
        layout_policy: Optional[str] = None
    ):
        """
        Initialize validation service.

        Args:
            normalizer: Evidence normalizer (defaults use MIN_SYMBOL_CONFIDENCE)
            matcher: Requirement matcher
            aggregator: Score aggregator
            builder: Requirement builder
            report_builder: Report projection
            layout_policy: "assume_valid" or "match" (defaults to LAYOUT_EVALUATION_POLICY)
        """
        self.normalizer = normalizer or EvidenceNormalizer(
            synonyms=DEFAULT_SYNONYM_TABLE,
            min_symbol_confidence=settings.MIN_SYMBOL_CONFIDENCE
        )
        self.matcher = matcher or Matcher(synonyms=DEFAULT_SYNONYM_TABLE)
        self.aggregator = aggregator or ComplianceAggregator()
        self.builder = builder or RequirementBuilder()
        self.report_builder = report_builder or ReportBuilder()

        policy = (layout_policy or settings.LAYOUT_EVALUATION_POLICY).lower()
        if policy not in LAYOUT_POLICIES:
            raise ValueError(
                f"Unknown layout evaluation policy '{policy}'. Use one of: {', '.join(LAYOUT_POLICIES)}"
            )
        self.layout_policy = policy

    def _verdict(self, requirement: Requirement, result: MatchResult) -> Verdict:
        return Verdict(
            requirement_id=requirement.id,
            description=requirement.description,
            kind=requirement.kind,
            required=requirement.required,
            found=result.found,
            strategy=result.strategy,
            rule=getattr(requirement, "rule", None),
        )

    def _match(self, requirement: Requirement, evidence: NormalizedEvidence) -> Verdict:
        synonyms = requirement.synonyms if isinstance(requirement, SymbolRequirement) else ()
        return self._verdict(requirement, self.matcher.match(requirement.match_target, evidence, synonyms))

    def _layout(self, requirement: Requirement, evidence: NormalizedEvidence) -> Verdict:
        if self.layout_policy == "assume_valid":
            return self._verdict(requirement, MatchResult(found=True, strategy=MatchStrategy.POLICY, match_ratio=1.0))
        return self._match(requirement, evidence)

    def evaluate(self, requirements: RequirementSet, evidence: NormalizedEvidence) -> ValidationOutcome:
        """
        Produce one verdict per requirement and the aggregate score.

        Args:
            requirements: Built requirement set
            evidence: Normalized evidence

        Returns:
            ValidationOutcome with verdicts in requirement order
        """
        text_verdicts: Tuple[Verdict, ...] = tuple(
            self._match(r, evidence) for r in requirements.required_texts
        )
        symbol_verdicts: Tuple[Verdict, ...] = tuple(
            self._match(r, evidence) for r in requirements.required_symbols
        )
        layout_verdicts: Tuple[Verdict, ...] = tuple(
            self._layout(r, evidence) for r in requirements.layout_requirements
        )
        score = self.aggregator.aggregate(text_verdicts, symbol_verdicts, layout_verdicts)
        return ValidationOutcome(
            text_verdicts=text_verdicts,
            symbol_verdicts=symbol_verdicts,
            layout_verdicts=layout_verdicts,
            score=score,
        )

    def validate_requirements(
        self,
        requirements: RequirementSet,
        text_regions: Any = None,
        symbols: Any = None
    ) -> ValidationReport:
        """Validate an already-built requirement set against raw evidence."""
        start_time = time.time()
        evidence = self.normalizer.normalize(text_regions, symbols)
        outcome = self.evaluate(requirements, evidence)
        report = self.report_builder.build(outcome)

        logger.info(
            f"Validated {requirements.total} requirements in {time.time() - start_time:.3f}s: "
            f"compliant={report.is_compliant}"
        )
        return report

    def validate(
        self,
        requirements: Any,
        text_regions: Any = None,
        symbols: Any = None,
        column_overrides: Optional[Mapping[str, Optional[str]]] = None
    ) -> ValidationReport:
        """
        Validate one label end to end.

        Args:
            requirements: Raw requirement source (rows, structured tree or JSON string)
            text_regions: Raw OCR text regions
            symbols: Raw symbol detections
            column_overrides: Replace detected spreadsheet columns

        Returns:
            ValidationReport
        """
        requirement_set = self.builder.build(requirements, column_overrides)
        return self.validate_requirements(requirement_set, text_regions, symbols)


# Singleton service instance
_service: Optional[ComplianceValidationService] = None


def get_validation_service() -> ComplianceValidationService:
    """Get singleton validation service instance.

    Returns:
        ComplianceValidationService singleton instance
    """
    global _service
    if _service is None:
        _service = ComplianceValidationService()
    return _service
