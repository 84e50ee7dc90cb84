"""
Report builder for compliance validation endpoints.

Pure projection of engine results (dataclasses) onto the pydantic response
models. No scoring happens here.
"""
import logging
from typing import Optional, Sequence

from label_compliance.core.constants import COMPLIANT_MESSAGE, NON_COMPLIANT_MESSAGE
from label_compliance.models.api_models import (
    ComplianceRatios,
    LayoutValidation,
    RequirementSetResponse,
    RequirementView,
    SymbolValidation,
    TermValidation,
    ValidationReport,
)
from label_compliance.models.requirement_models import (
    ColumnMapping,
    LayoutRequirement,
    Requirement,
    RequirementSet,
    SymbolRequirement,
)
from label_compliance.models.validation_models import ValidationOutcome, Verdict

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Builds responses for validation endpoints."""

    @staticmethod
    def _term(verdict: Verdict) -> TermValidation:
        return TermValidation(
            term=verdict.description,
            required=verdict.required,
            found=verdict.found,
            valid=verdict.valid,
        )

    @staticmethod
    def _symbol(verdict: Verdict) -> SymbolValidation:
        return SymbolValidation(
            symbol=verdict.description,
            required=verdict.required,
            found=verdict.found,
            valid=verdict.valid,
        )

    @staticmethod
    def _layout(verdict: Verdict) -> LayoutValidation:
        return LayoutValidation(
            rule=verdict.rule or "",
            description=verdict.description,
            valid=verdict.valid,
        )

    def build(self, outcome: ValidationOutcome) -> ValidationReport:
        """Build the final report for one validation run.

        Args:
            outcome: Verdicts and score from the validation service

        Returns:
            ValidationReport
        """
        score = outcome.score
        return ValidationReport(
            is_compliant=score.passed,
            compliance_message=COMPLIANT_MESSAGE if score.passed else NON_COMPLIANT_MESSAGE,
            term_validations=[self._term(v) for v in outcome.text_verdicts],
            symbol_validations=[self._symbol(v) for v in outcome.symbol_verdicts],
            layout_validations=[self._layout(v) for v in outcome.layout_verdicts],
            compliance=ComplianceRatios(
                text=score.text,
                symbol=score.symbol,
                layout=score.layout,
                overall=score.overall,
            ),
        )

    @staticmethod
    def requirement_view(requirement: Requirement) -> RequirementView:
        view = {
            "id": requirement.id,
            "kind": str(requirement.kind),
            "description": requirement.description,
            "match_target": requirement.match_target,
            "required": requirement.required,
        }
        if isinstance(requirement, SymbolRequirement):
            view["synonyms"] = list(requirement.synonyms)
        if isinstance(requirement, LayoutRequirement):
            view["rule"] = requirement.rule
            view["element_id"] = requirement.element_id
            view["parameters"] = dict(requirement.parameters)
        return RequirementView(**view)

    def build_requirement_set_response(
        self,
        requirements: RequirementSet,
        filename: str,
        column_mapping: Optional[ColumnMapping] = None
    ) -> RequirementSetResponse:
        """Build the /requirements/parse response."""
        def views(items: Sequence[Requirement]):
            return [self.requirement_view(r) for r in items]

        return RequirementSetResponse(
            filename=filename,
            required_texts=views(requirements.required_texts),
            required_symbols=views(requirements.required_symbols),
            layout_requirements=views(requirements.layout_requirements),
            column_mapping=column_mapping.to_dict() if column_mapping else None,
        )
