"""
Unit tests for evidence normalization.
"""
import unittest

from label_compliance.models.evidence_models import RegionShape
from label_compliance.services.synonyms import SynonymTable
from label_compliance.services.validation import EvidenceNormalizer


class TestRegionClassification(unittest.TestCase):
    """Test cases for tagging text region shapes."""

    def test_shapes(self):
        """Test each region layout gets its tag."""
        cases = [
            ({"text": "Made in China"}, RegionShape.FLAT_TEXT),
            ("Made in China", RegionShape.FLAT_TEXT),
            ({"text": "  ", "lines": ["Made in China"]}, RegionShape.LINES),
            ({"words": ["Made", "in", "China"]}, RegionShape.WORDS),
            ({"xmin": 1, "ymin": 2}, RegionShape.EMPTY),
            (None, RegionShape.EMPTY),
            (42, RegionShape.EMPTY),
        ]
        for raw, shape in cases:
            with self.subTest(raw=raw):
                self.assertEqual(EvidenceNormalizer.classify_region(raw, 0).shape, shape)


class TestTextRegions(unittest.TestCase):
    """Test cases for text extraction."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = EvidenceNormalizer()

    def test_flat_text_lowercased(self):
        """Test flat text is lowercased."""
        evidence = self.normalizer.normalize([{"text": "WARNING: Choking Hazard"}], None)
        self.assertEqual(evidence.texts, frozenset({"warning: choking hazard"}))

    def test_lines_variants(self):
        """Test lines given as strings, token lists and objects."""
        regions = [
            {"lines": ["Made in", "China"]},
            {"lines": [["Small", "parts"], [{"text": "inside"}]]},
            {"lines": [{"text": "Age 3+"}]},
            {"lines": "Keep dry"},
        ]
        evidence = self.normalizer.normalize(regions)
        self.assertEqual(
            evidence.texts,
            frozenset({"made in china", "small parts inside", "age 3+", "keep dry"})
        )

    def test_words_fallback(self):
        """Test words are joined when there is no text or lines."""
        evidence = self.normalizer.normalize([{"words": ["CE", {"text": "mark"}, 7]}])
        self.assertEqual(evidence.texts, frozenset({"ce mark"}))

    def test_placeholder_regions(self):
        """Test regions without text keep a label but add no evidence."""
        regions = self.normalizer.normalize_text_regions([
            {"xmin": 0},
            {"id": "r7", "lines": []},
            {"text": "Keep dry"},
        ])
        self.assertEqual([r.label for r in regions], ["Region 1", "Region r7", "keep dry"])
        self.assertTrue(regions[0].is_placeholder)
        self.assertFalse(regions[2].is_placeholder)

        evidence = self.normalizer.normalize([{"xmin": 0}, {"id": "r7"}])
        self.assertEqual(evidence.texts, frozenset())
        self.assertTrue(evidence.is_empty)

    def test_malformed_input_is_empty(self):
        """Test non-list inputs are treated as no evidence."""
        for raw in (None, "text", {"text": "x"}, 3.5):
            with self.subTest(raw=raw):
                evidence = self.normalizer.normalize(raw, raw)
                self.assertTrue(evidence.is_empty)


class TestSymbols(unittest.TestCase):
    """Test cases for symbol normalization."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = EvidenceNormalizer()

    def test_separator_variants(self):
        """Test each class adds its underscore and space forms."""
        plain = EvidenceNormalizer(synonyms=SynonymTable(families=()))
        classes = plain.normalize_symbols([{"class": "Green-Dot"}])
        self.assertEqual(classes, frozenset({"green-dot", "green_dot", "green dot"}))

    def test_synonym_expansion(self):
        """Test detected classes expand to their whole synonym family."""
        classes = self.normalizer.normalize_symbols([{"class": "CE", "confidence": 0.9}])
        self.assertEqual(classes, frozenset({"ce", "ce mark", "ce_mark"}))

    def test_label_key_and_bare_strings(self):
        """Test the label key and plain string detections."""
        classes = self.normalizer.normalize_symbols([{"label": "Logo"}, "barcode"])
        self.assertIn("logo", classes)
        self.assertIn("barcode", classes)

    def test_unusable_detections_skipped(self):
        """Test detections without a usable class name are ignored."""
        classes = self.normalizer.normalize_symbols([{"confidence": 0.9}, {"class": ""}, {"class": 5}, None])
        self.assertEqual(classes, frozenset())

    def test_confidence_filter(self):
        """Test detections below the minimum confidence are dropped."""
        normalizer = EvidenceNormalizer(min_symbol_confidence=0.5)
        classes = normalizer.normalize_symbols([
            {"class": "logo", "confidence": 0.2},
            {"class": "barcode", "confidence": 0.8},
            {"class": "qr", "confidence": "high"},
        ])
        self.assertNotIn("logo", classes)
        self.assertIn("barcode", classes)
        self.assertIn("qr", classes)

    def test_partial_evidence(self):
        """Test symbols alone are enough for evidence."""
        evidence = self.normalizer.normalize(None, [{"class": "logo"}])
        self.assertEqual(evidence.texts, frozenset())
        self.assertFalse(evidence.is_empty)


if __name__ == '__main__':
    unittest.main()
