"""
Requirement model building.

Turns a raw requirement source into a ``RequirementSet``. Two source shapes are
supported:

- Tabular: rows (dicts) from a spreadsheet with loosely named columns.
- Structured: a tree that already separates text, symbol and layout groups.

Malformed sources never raise; they produce an empty (vacuously passing)
requirement set and a log entry.
"""
import json
import logging
import math
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from label_compliance.core.constants import (
    DEFAULT_LAYOUT_RULE,
    LAYOUT_PHRASES,
    PHRASE_PROPERTY_KEYWORDS,
    SYMBOL_PLACEHOLDER_VALUES,
    TEXT_DESCRIPTION_KEYWORDS,
    TEXT_ITEM_KEYWORDS,
)
from label_compliance.models.requirement_models import (
    ColumnMapping,
    LayoutRequirement,
    RequirementSet,
    SymbolRequirement,
    TextRequirement,
)
from label_compliance.models.source_models import (
    RequirementNode,
    RequirementProperty,
    StructuredRequirementSource,
)
from .column_classifier import classify_columns, collect_headers

logger = logging.getLogger(__name__)

EMPTY_REQUIREMENTS = RequirementSet()


# ============================================================================
# Cell helpers
# ============================================================================

def cell_text(value: Any) -> str:
    """Spreadsheet cell as stripped text; None and NaN become empty."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def parse_required(value: Any) -> bool:
    """Required unless the value is literally ``false`` (bool or string)."""
    if value is False:
        return False
    if isinstance(value, str) and value.strip().lower() == "false":
        return False
    return True


def is_placeholder_symbol(value: str) -> bool:
    return value.strip().lower() in SYMBOL_PLACEHOLDER_VALUES


def parse_parameters(value: Any) -> Mapping[str, Any]:
    """Layout parameters from a dict or a JSON object string; anything else is empty."""
    if isinstance(value, Mapping):
        return MappingProxyType(dict(value))
    if isinstance(value, str) and value.strip():
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            logger.debug(f"Ignoring non-JSON layout parameters: {value!r}")
            return MappingProxyType({})
        if isinstance(parsed, dict):
            return MappingProxyType(parsed)
    return MappingProxyType({})


def _lookup(row: Mapping[str, Any], key: str) -> Any:
    """Case-insensitive exact key lookup."""
    for row_key, value in row.items():
        if isinstance(row_key, str) and row_key.strip().lower() == key:
            return value
    return None


class _RequirementAccumulator:
    """Collects requirements and hands out per-kind sequential ids."""

    def __init__(self):
        self.texts: List[TextRequirement] = []
        self.symbols: List[SymbolRequirement] = []
        self.layouts: List[LayoutRequirement] = []

    def add_text(self, description: str, target: str, required: bool) -> TextRequirement:
        requirement = TextRequirement(
            id=f"text_{len(self.texts)}",
            description=description,
            match_target=target,
            required=required,
        )
        self.texts.append(requirement)
        return requirement

    def add_symbol(
        self,
        description: str,
        target: str,
        required: bool,
        synonyms: Sequence[str] = ()
    ) -> SymbolRequirement:
        requirement = SymbolRequirement(
            id=f"symbol_{len(self.symbols)}",
            description=description,
            match_target=target,
            required=required,
            synonyms=tuple(synonyms),
        )
        self.symbols.append(requirement)
        return requirement

    def add_layout(
        self,
        description: str,
        target: str,
        required: bool,
        rule: str = DEFAULT_LAYOUT_RULE,
        element_id: str = "",
        parameters: Optional[Mapping[str, Any]] = None
    ) -> LayoutRequirement:
        requirement = LayoutRequirement(
            id=f"layout_{len(self.layouts)}",
            description=description,
            match_target=target,
            required=required,
            rule=rule or DEFAULT_LAYOUT_RULE,
            element_id=element_id,
            parameters=parameters if parameters is not None else MappingProxyType({}),
        )
        self.layouts.append(requirement)
        return requirement

    def build(self) -> RequirementSet:
        return RequirementSet(
            required_texts=tuple(self.texts),
            required_symbols=tuple(self.symbols),
            layout_requirements=tuple(self.layouts),
        )


class RequirementBuilder:
    """Build a RequirementSet from tabular rows or a structured tree."""

    # ============================================================================
    # ENTRY POINT
    # ============================================================================

    def build(
        self,
        source: Any,
        column_overrides: Optional[Mapping[str, Optional[str]]] = None
    ) -> RequirementSet:
        """
        Build requirements from any supported source shape.

        Args:
            source: List of row dicts, a structured tree dict, or a JSON string of either
            column_overrides: Replace detected columns for tabular sources

        Returns:
            RequirementSet (empty if the source is missing or malformed)

        Raises:
            ValueError: If column_overrides names an unknown column role
        """
        if source is None:
            logger.warning("No requirement source provided; using empty requirement set")
            return EMPTY_REQUIREMENTS

        if isinstance(source, (bytes, bytearray)):
            source = source.decode("utf-8", errors="replace")
        if isinstance(source, str):
            try:
                source = json.loads(source)
            except json.JSONDecodeError as e:
                logger.warning(f"Requirement source is not valid JSON ({e}); using empty requirement set")
                return EMPTY_REQUIREMENTS

        if isinstance(source, (list, tuple)):
            # Unknown override roles are a caller error and propagate as ValueError
            mapping = self.resolve_columns(source, column_overrides)
            try:
                return self.build_from_rows(source, mapping)
            except Exception:
                logger.exception("Failed to build requirements; using empty requirement set")
                return EMPTY_REQUIREMENTS

        if isinstance(source, Mapping):
            try:
                return self.build_from_tree(source)
            except Exception:
                logger.exception("Failed to build requirements; using empty requirement set")
                return EMPTY_REQUIREMENTS

        logger.warning(f"Unsupported requirement source type {type(source).__name__}; using empty requirement set")
        return EMPTY_REQUIREMENTS

    # ============================================================================
    # TABULAR
    # ============================================================================

    def resolve_columns(
        self,
        rows: Sequence[Any],
        column_overrides: Optional[Mapping[str, Optional[str]]] = None
    ) -> ColumnMapping:
        """Detected column mapping with any overrides applied."""
        return classify_columns(collect_headers(rows)).with_overrides(column_overrides)

    def build_from_rows(
        self,
        rows: Sequence[Any],
        mapping: Optional[ColumnMapping] = None
    ) -> RequirementSet:
        """
        Classify every spreadsheet row into a text, symbol or layout requirement.

        Rows that fit no category are dropped.

        Args:
            rows: Row dicts keyed by spreadsheet header
            mapping: Column roles (detected from the rows when omitted)
        """
        if mapping is None:
            mapping = self.resolve_columns(rows)
        accumulator = _RequirementAccumulator()
        dropped = 0

        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                logger.debug(f"Skipping row {index}: not an object")
                dropped += 1
                continue
            if not any(cell_text(value) for value in row.values()):
                continue
            if not self._classify_row(row, mapping, accumulator):
                logger.debug(f"Dropping row {index}: no requirement category matched")
                dropped += 1

        requirements = accumulator.build()
        logger.info(
            f"Built requirements from {len(rows)} rows: {len(requirements.required_texts)} text, "
            f"{len(requirements.required_symbols)} symbol, {len(requirements.layout_requirements)} layout "
            f"({dropped} rows dropped)"
        )
        return requirements

    def _classify_row(
        self,
        row: Mapping[str, Any],
        mapping: ColumnMapping,
        acc: _RequirementAccumulator
    ) -> bool:
        """Add the requirement(s) for one row. Returns False if the row was dropped."""
        item = cell_text(row.get(mapping.item)) if mapping.item else ""
        symbol = cell_text(row.get(mapping.symbol)) if mapping.symbol else ""
        description = cell_text(row.get(mapping.description)) if mapping.description else ""
        required = parse_required(row.get(mapping.required)) if mapping.required else True
        row_type = cell_text(row.get(mapping.type)).lower() if mapping.type else ""

        if is_placeholder_symbol(symbol):
            symbol = ""

        # 1. Explicit type column
        if "text" in row_type:
            acc.add_text(item or description, item or description, required)
            return True
        if "symbol" in row_type:
            acc.add_symbol(item or description, (symbol or item).lower(), required)
            return True
        if "layout" in row_type:
            acc.add_layout(
                description=description or item,
                target=description or item,
                required=required,
                rule=cell_text(_lookup(row, "rule")) or DEFAULT_LAYOUT_RULE,
                element_id=cell_text(_lookup(row, "element_id")),
                parameters=parse_parameters(_lookup(row, "parameters")),
            )
            return True

        # 2. A symbol value makes it a symbol requirement
        if symbol:
            requirement = acc.add_symbol(item or description, (symbol or item).lower(), required)
            self._add_derived_layout(description, requirement.id, required, acc)
            return True

        # 3. Warning/compliance wording makes it a text requirement
        if (item or description) and self._looks_like_text_requirement(item, description):
            requirement = acc.add_text(item or description, item or description, required)
            self._add_derived_layout(description, requirement.id, required, acc)
            return True

        # 4. Dropped
        return False

    @staticmethod
    def _looks_like_text_requirement(item: str, description: str) -> bool:
        item_lower = item.lower()
        description_lower = description.lower()
        return (
            any(keyword in item_lower for keyword in TEXT_ITEM_KEYWORDS)
            or any(keyword in description_lower for keyword in TEXT_DESCRIPTION_KEYWORDS)
        )

    @staticmethod
    def _add_derived_layout(
        description: str,
        element_id: str,
        required: bool,
        acc: _RequirementAccumulator
    ) -> None:
        """Placement wording ("must be", "should be") also yields a layout rule."""
        description_lower = description.lower()
        if description and any(phrase in description_lower for phrase in LAYOUT_PHRASES):
            acc.add_layout(
                description=description,
                target=description,
                required=required,
                rule=DEFAULT_LAYOUT_RULE,
                element_id=element_id,
            )

    # ============================================================================
    # STRUCTURED
    # ============================================================================

    @staticmethod
    def _parse_node(raw: Any, group: str, index: int) -> Optional[RequirementNode]:
        try:
            return RequirementNode.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Skipping {group}[{index}]: {e.error_count()} validation error(s)")
            return None

    @staticmethod
    def _expected_phrase(properties: Sequence[RequirementProperty]) -> str:
        """Description of the first property naming a statement, text or phrase."""
        for prop in properties:
            name = prop.name.lower()
            if any(keyword in name for keyword in PHRASE_PROPERTY_KEYWORDS) and prop.description.strip():
                return prop.description.strip()
        return ""

    @staticmethod
    def _node_required(node: RequirementNode) -> bool:
        return True if node.required is None else parse_required(node.required)

    def build_from_tree(self, tree: Mapping[str, Any]) -> RequirementSet:
        """
        One requirement per named node.

        Text nodes whose properties name an expected statement/text/phrase
        match that phrase instead of the node name. Symbol node labels become
        synonyms.
        """
        payload = tree.get("result") if isinstance(tree.get("result"), Mapping) else tree
        try:
            source = StructuredRequirementSource.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Malformed structured requirements ({e.error_count()} errors); using empty requirement set")
            return EMPTY_REQUIREMENTS

        acc = _RequirementAccumulator()

        for index, raw in enumerate(source.text_requirement):
            node = self._parse_node(raw, "text_requirement", index)
            if node is None:
                continue
            phrase = self._expected_phrase(node.properties)
            acc.add_text(node.name, phrase or node.name, self._node_required(node))

        for index, raw in enumerate(source.symbol_requirement):
            node = self._parse_node(raw, "symbol_requirement", index)
            if node is None:
                continue
            synonyms = [label.strip().lower() for label in node.labels if label.strip()]
            acc.add_symbol(node.name, node.name.lower(), self._node_required(node), synonyms)

        for index, raw in enumerate(source.layout_requirement):
            node = self._parse_node(raw, "layout_requirement", index)
            if node is None:
                continue
            properties: Dict[str, str] = {p.name.lower(): p.description for p in node.properties if p.name}
            description = self._expected_phrase(node.properties) or node.name
            acc.add_layout(
                description=description,
                target=description,
                required=self._node_required(node),
                rule=properties.pop("rule", "") or DEFAULT_LAYOUT_RULE,
                element_id=properties.pop("element_id", ""),
                parameters=MappingProxyType(properties),
            )

        requirements = acc.build()
        logger.info(
            f"Built requirements from structured source: {len(requirements.required_texts)} text, "
            f"{len(requirements.required_symbols)} symbol, {len(requirements.layout_requirements)} layout"
        )
        return requirements
