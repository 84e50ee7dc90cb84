"""
Unit tests for the report builder.
"""
import unittest
from types import MappingProxyType

from label_compliance.core.constants import COMPLIANT_MESSAGE, NON_COMPLIANT_MESSAGE
from label_compliance.models.requirement_models import (
    ColumnMapping,
    LayoutRequirement,
    RequirementKind,
    RequirementSet,
    SymbolRequirement,
    TextRequirement,
)
from label_compliance.models.validation_models import (
    ComplianceScore,
    MatchStrategy,
    ValidationOutcome,
    Verdict,
)
from label_compliance.services.report_builder import ReportBuilder


class TestReportBuilder(unittest.TestCase):
    """Test cases for building validation reports."""

    def setUp(self):
        """Set up test fixtures."""
        self.builder = ReportBuilder()
        self.outcome = ValidationOutcome(
            text_verdicts=(
                Verdict("text_0", "Warning: choking hazard", RequirementKind.TEXT, True, True, MatchStrategy.EXACT),
                Verdict("text_1", "Brand name", RequirementKind.TEXT, False, False),
            ),
            symbol_verdicts=(
                Verdict("symbol_0", "CE mark", RequirementKind.SYMBOL, True, False),
            ),
            layout_verdicts=(
                Verdict("layout_0", "Logo top left", RequirementKind.LAYOUT, True, True, MatchStrategy.POLICY, "position"),
            ),
            score=ComplianceScore(text=1.0, symbol=0.0, layout=1.0, overall=0.6, passed=False),
        )

    def test_projection(self):
        """Test verdicts are reshaped without recomputation."""
        report = self.builder.build(self.outcome)

        self.assertFalse(report.is_compliant)
        self.assertEqual(report.compliance_message, NON_COMPLIANT_MESSAGE)
        self.assertEqual(
            [(t.term, t.required, t.found, t.valid) for t in report.term_validations],
            [("Warning: choking hazard", True, True, True), ("Brand name", False, False, True)]
        )
        self.assertEqual(report.symbol_validations[0].symbol, "CE mark")
        self.assertFalse(report.symbol_validations[0].valid)
        self.assertEqual(report.layout_validations[0].rule, "position")
        self.assertEqual(report.layout_validations[0].description, "Logo top left")
        self.assertTrue(report.layout_validations[0].valid)
        self.assertEqual(report.compliance.overall, 0.6)

    def test_compliant_message(self):
        """Test a passing score gets the compliant message."""
        report = self.builder.build(ValidationOutcome())
        self.assertTrue(report.is_compliant)
        self.assertEqual(report.compliance_message, COMPLIANT_MESSAGE)
        self.assertEqual(report.term_validations, [])

    def test_camel_case_json(self):
        """Test the report serializes with camelCase keys."""
        data = self.builder.build(self.outcome).model_dump(by_alias=True)
        self.assertEqual(
            set(data),
            {"isCompliant", "complianceMessage", "termValidations", "symbolValidations",
             "layoutValidations", "compliance"}
        )
        self.assertEqual(set(data["termValidations"][0]), {"term", "required", "found", "valid"})
        self.assertEqual(set(data["layoutValidations"][0]), {"rule", "description", "valid"})

    def test_requirement_set_response(self):
        """Test built requirements are listed per category."""
        requirements = RequirementSet(
            required_texts=(TextRequirement("text_0", "Warning", "Warning"),),
            required_symbols=(SymbolRequirement("symbol_0", "CE mark", "ce mark", synonyms=("ce",)),),
            layout_requirements=(
                LayoutRequirement(
                    "layout_0", "Logo top left", "Logo top left",
                    rule="alignment", element_id="symbol_0",
                    parameters=MappingProxyType({"margin": "5mm"}),
                ),
            ),
        )
        response = self.builder.build_requirement_set_response(
            requirements, "labels.csv", ColumnMapping(item="Item")
        )
        data = response.model_dump(by_alias=True)

        self.assertEqual(data["filename"], "labels.csv")
        self.assertEqual(data["requiredTexts"][0]["kind"], "text")
        self.assertEqual(data["requiredSymbols"][0]["synonyms"], ["ce"])
        self.assertEqual(data["layoutRequirements"][0]["elementId"], "symbol_0")
        self.assertEqual(data["layoutRequirements"][0]["parameters"], {"margin": "5mm"})
        self.assertEqual(data["columnMapping"]["item"], "Item")


if __name__ == '__main__':
    unittest.main()
