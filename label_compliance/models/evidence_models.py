"""
Evidence models derived from upstream text and symbol detection.

Text regions arrive in several shapes depending on the OCR backend. Each raw
region is tagged with a ``RegionShape`` and extracted by the function
registered for that tag in the evidence normalizer.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Tuple


class RegionShape(Enum):
    """How a detected text region carries its text."""
    FLAT_TEXT = "flat_text"  # {"text": "..."}
    LINES = "lines"          # {"lines": [str | [tokens] | {"text": ...}]}
    WORDS = "words"          # {"words": [str | {"text": ...}]}
    EMPTY = "empty"          # nothing extractable

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaggedRegion:
    """A raw text region paired with its detected shape."""
    shape: RegionShape
    payload: Any
    index: int


@dataclass(frozen=True)
class TextEvidence:
    """Text extracted from one region.

    ``content`` is the lowercase comparable text. Placeholder regions carry a
    ``Region <n>`` label for display and an empty ``content``.
    """
    label: str
    content: str
    shape: RegionShape

    @property
    def is_placeholder(self) -> bool:
        return not self.content


@dataclass(frozen=True)
class NormalizedEvidence:
    """Flat comparable evidence sets for one validation run."""

    texts: FrozenSet[str] = frozenset()
    symbol_classes: FrozenSet[str] = frozenset()
    regions: Tuple[TextEvidence, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.texts and not self.symbol_classes
