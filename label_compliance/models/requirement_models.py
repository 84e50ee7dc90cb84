"""
Requirement models for compliance validation.

Requirements are built once per validation run and never mutated: every
model here is a frozen dataclass and collections are tuples.
"""
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union


class RequirementKind(Enum):
    """Requirement categories, each scored separately."""
    TEXT = "text"
    SYMBOL = "symbol"
    LAYOUT = "layout"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TextRequirement:
    """A phrase that must appear in the detected label text."""

    id: str
    """Stable identifier, ``text_<n>``."""

    description: str
    """Label shown in the report."""

    match_target: str
    """Phrase compared against the evidence."""

    required: bool = True

    kind = RequirementKind.TEXT


@dataclass(frozen=True)
class SymbolRequirement:
    """A graphical symbol that must be detected on the label."""

    id: str
    description: str
    match_target: str
    required: bool = True

    synonyms: Tuple[str, ...] = ()
    """Extra names accepted as equivalent to ``match_target``."""

    kind = RequirementKind.SYMBOL


@dataclass(frozen=True)
class LayoutRequirement:
    """A placement rule for a text or symbol element."""

    id: str
    description: str
    match_target: str
    required: bool = True
    rule: str = "position"
    element_id: str = ""
    parameters: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)

    kind = RequirementKind.LAYOUT


Requirement = Union[TextRequirement, SymbolRequirement, LayoutRequirement]


@dataclass(frozen=True)
class RequirementSet:
    """Flat requirement collection for one validation run."""

    required_texts: Tuple[TextRequirement, ...] = ()
    required_symbols: Tuple[SymbolRequirement, ...] = ()
    layout_requirements: Tuple[LayoutRequirement, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.required_texts or self.required_symbols or self.layout_requirements)

    @property
    def total(self) -> int:
        return len(self.required_texts) + len(self.required_symbols) + len(self.layout_requirements)


@dataclass(frozen=True)
class ColumnMapping:
    """Which spreadsheet header plays which role. ``None`` means not present."""

    item: Optional[str] = None
    symbol: Optional[str] = None
    description: Optional[str] = None
    required: Optional[str] = None
    type: Optional[str] = None

    def with_overrides(self, overrides: Optional[Mapping[str, Optional[str]]]) -> "ColumnMapping":
        """Return a copy with the given roles replaced; unknown roles raise ValueError."""
        if not overrides:
            return self
        roles = {f.name for f in fields(self)}
        unknown = set(overrides) - roles
        if unknown:
            raise ValueError(f"Unknown column roles: {', '.join(sorted(unknown))}")
        return replace(self, **dict(overrides))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
