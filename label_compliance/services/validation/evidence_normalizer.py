"""
Evidence normalization for compliance matching.

Reduces raw OCR text regions and raw symbol detections to two flat sets of
lowercase strings. Malformed input never raises: anything that cannot be read
is treated as absent evidence.
"""
import logging
import re
from numbers import Number
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from label_compliance.models.evidence_models import (
    NormalizedEvidence,
    RegionShape,
    TaggedRegion,
    TextEvidence,
)
from label_compliance.services.synonyms import DEFAULT_SYNONYM_TABLE, SynonymTable, canonical_form

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s_\-]+")


def _as_list(value: Any) -> List[Any]:
    """Accept lists and tuples; everything else is no evidence."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _item_text(item: Any) -> str:
    """Text of a line/word/token: a string or an object with a ``text`` field."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and isinstance(item.get("text"), str):
        return item["text"]
    return ""


def _join(parts: Iterable[str]) -> str:
    return " ".join(part.strip() for part in parts if part and part.strip())


def _extract_flat_text(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return payload.get("text", "")


def _extract_lines(payload: Dict[str, Any]) -> str:
    lines = payload.get("lines")
    if isinstance(lines, str):
        return lines

    line_texts = []
    for line in _as_list(lines):
        if isinstance(line, (list, tuple)):
            line_texts.append(_join(_item_text(token) for token in line))
        else:
            line_texts.append(_item_text(line))
    return _join(line_texts)


def _extract_words(payload: Dict[str, Any]) -> str:
    return _join(_item_text(word) for word in _as_list(payload.get("words")))


def _extract_nothing(payload: Any) -> str:
    return ""


class EvidenceNormalizer:
    """Normalize detection output into comparable evidence sets."""

    # One extraction function per region shape
    EXTRACTORS: Dict[RegionShape, Callable[[Any], str]] = {
        RegionShape.FLAT_TEXT: _extract_flat_text,
        RegionShape.LINES: _extract_lines,
        RegionShape.WORDS: _extract_words,
        RegionShape.EMPTY: _extract_nothing,
    }

    def __init__(
        self,
        synonyms: SynonymTable = DEFAULT_SYNONYM_TABLE,
        min_symbol_confidence: float = 0.0
    ):
        """
        Initialize evidence normalizer.

        Args:
            synonyms: Shared symbol synonym table
            min_symbol_confidence: Symbol detections below this confidence are ignored
        """
        self.synonyms = synonyms
        self.min_symbol_confidence = min_symbol_confidence

    # ============================================================================
    # TEXT REGIONS
    # ============================================================================

    @staticmethod
    def classify_region(raw_region: Any, index: int) -> TaggedRegion:
        """
        Tag a raw text region with the shape its text is stored in.

        Precedence: a non-empty ``text`` field, then ``lines``, then ``words``.
        """
        if isinstance(raw_region, str):
            shape = RegionShape.FLAT_TEXT if raw_region.strip() else RegionShape.EMPTY
            return TaggedRegion(shape=shape, payload=raw_region, index=index)

        if not isinstance(raw_region, dict):
            return TaggedRegion(shape=RegionShape.EMPTY, payload=raw_region, index=index)

        text = raw_region.get("text")
        if isinstance(text, str) and text.strip():
            shape = RegionShape.FLAT_TEXT
        elif raw_region.get("lines"):
            shape = RegionShape.LINES
        elif raw_region.get("words"):
            shape = RegionShape.WORDS
        else:
            shape = RegionShape.EMPTY
        return TaggedRegion(shape=shape, payload=raw_region, index=index)

    @staticmethod
    def placeholder_label(tagged: TaggedRegion) -> str:
        """``Region <id>`` when the region has an id, else its 1-based position."""
        payload = tagged.payload
        if isinstance(payload, dict) and payload.get("id") is not None:
            return f"Region {payload['id']}"
        return f"Region {tagged.index + 1}"

    def extract_region(self, tagged: TaggedRegion) -> TextEvidence:
        """Extract lowercase text from one tagged region."""
        text = self.EXTRACTORS[tagged.shape](tagged.payload)
        text = text.strip() if isinstance(text, str) else ""

        if not text:
            label = self.placeholder_label(tagged)
            logger.debug(f"No text in region {tagged.index} ({tagged.shape}); using placeholder '{label}'")
            return TextEvidence(label=label, content="", shape=tagged.shape)

        content = text.lower()
        return TextEvidence(label=content, content=content, shape=tagged.shape)

    def normalize_text_regions(self, raw_regions: Any) -> Tuple[TextEvidence, ...]:
        """Extract text evidence from every region, in document order."""
        if raw_regions is not None and not isinstance(raw_regions, (list, tuple)):
            logger.warning(f"Text regions should be a list, got {type(raw_regions).__name__}; ignoring")
        return tuple(
            self.extract_region(self.classify_region(raw, index))
            for index, raw in enumerate(_as_list(raw_regions))
        )

    # ============================================================================
    # SYMBOLS
    # ============================================================================

    def _symbol_class(self, detection: Any) -> Optional[str]:
        """Lowercase class name of a detection, or None if unusable."""
        if isinstance(detection, str):
            name = detection
        elif isinstance(detection, dict):
            name = detection.get("class") or detection.get("label")
            confidence = detection.get("confidence")
            if (
                isinstance(confidence, Number)
                and not isinstance(confidence, bool)
                and confidence < self.min_symbol_confidence
            ):
                logger.debug(f"Dropping symbol '{name}' below confidence threshold ({confidence})")
                return None
        else:
            return None

        if not isinstance(name, str) or not name.strip():
            return None
        return name.strip().lower()

    def symbol_variants(self, class_name: str) -> FrozenSet[str]:
        """
        Evidence strings for one detected class.

        The name itself, its ``_``-joined and space-joined forms, and every
        member of any synonym family it belongs to.
        """
        variants = {
            class_name,
            _SEPARATORS.sub("_", class_name),
            canonical_form(class_name),
        }
        variants.update(self.synonyms.expand(class_name))
        return frozenset(v for v in variants if v)

    def normalize_symbols(self, raw_symbols: Any) -> FrozenSet[str]:
        """Expanded lowercase symbol classes from all detections."""
        if raw_symbols is not None and not isinstance(raw_symbols, (list, tuple)):
            logger.warning(f"Symbols should be a list, got {type(raw_symbols).__name__}; ignoring")

        classes: set = set()
        for detection in _as_list(raw_symbols):
            class_name = self._symbol_class(detection)
            if class_name:
                classes.update(self.symbol_variants(class_name))
        return frozenset(classes)

    # ============================================================================
    # COMBINED
    # ============================================================================

    def normalize(self, raw_text_regions: Any = None, raw_symbols: Any = None) -> NormalizedEvidence:
        """
        Normalize both evidence sources.

        Either source may be missing; the result then holds only the other.

        Args:
            raw_text_regions: Text regions from the OCR backend
            raw_symbols: Detections from the symbol backend

        Returns:
            NormalizedEvidence with lowercase text and symbol sets
        """
        regions = self.normalize_text_regions(raw_text_regions)
        texts = frozenset(region.content for region in regions if not region.is_placeholder)
        symbol_classes = self.normalize_symbols(raw_symbols)

        placeholders = sum(1 for region in regions if region.is_placeholder)
        logger.info(
            f"Normalized evidence: {len(regions)} regions "
            f"({placeholders} without text), {len(texts)} texts, "
            f"{len(symbol_classes)} symbol classes"
        )
        return NormalizedEvidence(texts=texts, symbol_classes=symbol_classes, regions=regions)
