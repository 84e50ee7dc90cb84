"""
Unit tests for the requirement builder (tabular and structured sources).
"""
import json
import unittest

from label_compliance.models.requirement_models import RequirementKind, RequirementSet
from label_compliance.services.requirements import RequirementBuilder, parse_required


class TestParseRequired(unittest.TestCase):
    """Test cases for the required-flag rule."""

    def test_false_values(self):
        """Test only a literal false makes a requirement optional."""
        self.assertFalse(parse_required(False))
        self.assertFalse(parse_required("false"))
        self.assertFalse(parse_required(" FALSE "))

    def test_everything_else_is_required(self):
        """Test missing and other values default to required."""
        for value in (True, "true", "no", "0", 0, None, ""):
            with self.subTest(value=value):
                self.assertTrue(parse_required(value))


class TestTabularRequirements(unittest.TestCase):
    """Test cases for building requirements from spreadsheet rows."""

    def setUp(self):
        """Set up test fixtures."""
        self.builder = RequirementBuilder()

    def test_typed_rows(self):
        """Test an explicit type column decides the category."""
        rows = [
            {"Item": "Warning: small parts", "Symbol": "", "Description": "Choking hazard", "Required": True, "Type": "Text"},
            {"Item": "CE mark", "Symbol": "CE_Mark", "Description": "", "Required": "false", "Type": "symbol"},
            {
                "Item": "Barcode",
                "Symbol": "",
                "Description": "Barcode on the back panel",
                "Required": True,
                "Type": "layout",
                "rule": "alignment",
                "element_id": "symbol_0",
                "parameters": '{"side": "back"}',
            },
        ]
        requirements = self.builder.build(rows)

        self.assertEqual(len(requirements.required_texts), 1)
        text = requirements.required_texts[0]
        self.assertEqual(text.id, "text_0")
        self.assertEqual(text.description, "Warning: small parts")
        self.assertEqual(text.match_target, "Warning: small parts")
        self.assertTrue(text.required)
        self.assertEqual(text.kind, RequirementKind.TEXT)

        symbol = requirements.required_symbols[0]
        self.assertEqual(symbol.id, "symbol_0")
        self.assertEqual(symbol.description, "CE mark")
        self.assertEqual(symbol.match_target, "ce_mark")
        self.assertFalse(symbol.required)

        layout = requirements.layout_requirements[0]
        self.assertEqual(layout.id, "layout_0")
        self.assertEqual(layout.description, "Barcode on the back panel")
        self.assertEqual(layout.rule, "alignment")
        self.assertEqual(layout.element_id, "symbol_0")
        self.assertEqual(dict(layout.parameters), {"side": "back"})

    def test_typed_symbol_without_symbol_value_uses_item(self):
        """Test a symbol row with no symbol cell matches on the item text."""
        requirements = self.builder.build([{"Item": "Mobius Loop", "Type": "symbol"}])
        self.assertEqual(requirements.required_symbols[0].match_target, "mobius loop")

    def test_layout_defaults(self):
        """Test layout rows without rule or parameters get defaults."""
        requirements = self.builder.build([
            {"Item": "Logo", "Description": "Top left corner", "Type": "layout", "parameters": "{not json"}
        ])
        layout = requirements.layout_requirements[0]
        self.assertEqual(layout.rule, "position")
        self.assertEqual(layout.element_id, "")
        self.assertEqual(dict(layout.parameters), {})

    def test_untyped_symbol_row(self):
        """Test a row with a symbol value becomes a symbol requirement."""
        requirements = self.builder.build([{"Item": "Recycling", "Symbol": "mobius_loop"}])
        self.assertEqual(len(requirements.required_symbols), 1)
        self.assertEqual(requirements.required_symbols[0].match_target, "mobius_loop")
        self.assertEqual(requirements.required_texts, ())

    def test_placeholder_symbol_values_ignored(self):
        """Test placeholder symbol cells do not make a symbol requirement."""
        for placeholder in ("#UNKNOWN", "undefined", "null", "N/A", "  "):
            with self.subTest(placeholder=placeholder):
                requirements = self.builder.build([{"Item": "Country of origin", "Symbol": placeholder}])
                self.assertEqual(requirements.required_symbols, ())
                self.assertEqual(len(requirements.required_texts), 1)

    def test_untyped_text_heuristics(self):
        """Test warning and compliance wording makes a text requirement."""
        rows = [
            {"Item": "Warning: not for children under 3"},
            {"Item": "Age grade 3+"},
            {"Item": "Brand line", "Description": "Trademark statement on front"},
        ]
        requirements = self.builder.build(rows)
        self.assertEqual(
            [r.match_target for r in requirements.required_texts],
            ["Warning: not for children under 3", "Age grade 3+", "Brand line"]
        )
        self.assertEqual([r.id for r in requirements.required_texts], ["text_0", "text_1", "text_2"])

    def test_unclassifiable_rows_dropped(self):
        """Test rows that fit no category produce nothing."""
        requirements = self.builder.build([{"Item": "Batch code", "Description": "Printed on bottom"}])
        self.assertTrue(requirements.is_empty)

    def test_unknown_type_falls_through(self):
        """Test an unrecognized type value is classified by the other rules."""
        requirements = self.builder.build([
            {"Item": "Age grade 3+", "Type": "other"},
            {"Item": "Use by date", "Type": "note"},
        ])
        self.assertEqual(len(requirements.required_texts), 1)
        self.assertEqual(requirements.total, 1)

    def test_blank_rows_skipped(self):
        """Test completely empty rows are ignored."""
        requirements = self.builder.build([
            {"Item": "", "Symbol": None, "Type": "  "},
            {"Item": "Warning label", "Type": "text"},
        ])
        self.assertEqual(requirements.total, 1)

    def test_derived_layout_rule(self):
        """Test placement wording adds a layout rule tied to its requirement."""
        rows = [
            {"Item": "Mobius loop", "Symbol": "mobius_loop", "Description": "Recycling mark must be visible on the back"},
            {"Item": "Warning: small parts", "Description": "Warning should be on the front panel"},
        ]
        requirements = self.builder.build(rows)

        self.assertEqual(len(requirements.layout_requirements), 2)
        first, second = requirements.layout_requirements
        self.assertEqual(first.element_id, "symbol_0")
        self.assertEqual(first.rule, "position")
        self.assertEqual(first.description, "Recycling mark must be visible on the back")
        self.assertEqual(second.element_id, "text_0")
        self.assertEqual(second.id, "layout_1")

    def test_required_column(self):
        """Test the required column is applied per row."""
        requirements = self.builder.build([
            {"Item": "Warning A", "Mandatory": "FALSE", "Type": "text"},
            {"Item": "Warning B", "Mandatory": "yes", "Type": "text"},
        ])
        self.assertEqual([r.required for r in requirements.required_texts], [False, True])

    def test_column_overrides(self):
        """Test overriding a column the classifier cannot detect."""
        rows = [{"Legal Phrase": "Warning: keep away from fire"}]
        self.assertTrue(self.builder.build(rows).is_empty)

        requirements = self.builder.build(rows, {"item": "Legal Phrase"})
        self.assertEqual(requirements.required_texts[0].match_target, "Warning: keep away from fire")

    def test_unknown_override_role(self):
        """Test an unknown override role is a caller error."""
        with self.assertRaises(ValueError):
            self.builder.build([{"Item": "Warning"}], {"colour": "Item"})

    def test_json_string_source(self):
        """Test a JSON-encoded row list is accepted."""
        requirements = self.builder.build(json.dumps([{"Item": "Warning label", "Type": "text"}]))
        self.assertEqual(len(requirements.required_texts), 1)


class TestStructuredRequirements(unittest.TestCase):
    """Test cases for building requirements from a structured tree."""

    def setUp(self):
        """Set up test fixtures."""
        self.builder = RequirementBuilder()

    def test_backend_spelling(self):
        """Test the parser backend's result tree."""
        tree = {
            "result": {
                "text_requirement": [
                    {
                        "name": "Small parts warning",
                        "req_properties": [
                            {"req_name": "Font size", "req_desc": "3mm"},
                            {"req_name": "Required statement", "req_desc": "WARNING: CHOKING HAZARD"},
                        ],
                    },
                    {"name": "Brand name", "req_properties": []},
                    {"req_properties": [{"req_name": "Statement", "req_desc": "nameless"}]},
                ],
                "symbol_requirement": [
                    {"name": "CE Mark", "req_labels": ["CE", "ce_mark"]},
                ],
            }
        }
        requirements = self.builder.build(tree)

        self.assertEqual(len(requirements.required_texts), 2)
        warning, brand = requirements.required_texts
        self.assertEqual(warning.description, "Small parts warning")
        self.assertEqual(warning.match_target, "WARNING: CHOKING HAZARD")
        self.assertEqual(brand.match_target, "Brand name")

        symbol = requirements.required_symbols[0]
        self.assertEqual(symbol.match_target, "ce mark")
        self.assertEqual(symbol.synonyms, ("ce", "ce_mark"))
        self.assertTrue(symbol.required)

    def test_camel_case_spelling(self):
        """Test the camelCase API spelling with a layout group."""
        tree = {
            "textRequirement": [
                {"name": "Origin", "properties": [{"name": "Expected text", "description": "Made in China"}]}
            ],
            "symbolRequirement": [{"name": "Mobius Loop", "required": "false"}],
            "layoutRequirement": [
                {
                    "name": "Logo top left",
                    "properties": [
                        {"name": "rule", "description": "alignment"},
                        {"name": "element_id", "description": "symbol_0"},
                        {"name": "margin", "description": "5mm"},
                    ],
                }
            ],
        }
        requirements = self.builder.build(tree)

        self.assertEqual(requirements.required_texts[0].match_target, "Made in China")
        self.assertFalse(requirements.required_symbols[0].required)

        layout = requirements.layout_requirements[0]
        self.assertEqual(layout.description, "Logo top left")
        self.assertEqual(layout.rule, "alignment")
        self.assertEqual(layout.element_id, "symbol_0")
        self.assertEqual(dict(layout.parameters), {"margin": "5mm"})

    def test_malformed_group(self):
        """Test a group that is not a list degrades to an empty set."""
        requirements = self.builder.build({"result": {"text_requirement": "oops"}})
        self.assertEqual(requirements, RequirementSet())


class TestMalformedSources(unittest.TestCase):
    """Test cases for sources that cannot be read."""

    def setUp(self):
        """Set up test fixtures."""
        self.builder = RequirementBuilder()

    def test_degrades_to_empty(self):
        """Test every malformed source gives an empty requirement set."""
        for source in (None, "not json", b"\xff\xfe", 42, [1, "two", None], {}):
            with self.subTest(source=source):
                self.assertTrue(self.builder.build(source).is_empty)


if __name__ == '__main__':
    unittest.main()
