"""
Pydantic models for API request and response structures.

Responses serialize with the camelCase keys consumed by the label-review UI;
requests accept either camelCase or snake_case keys.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ValidationRequest(_CamelModel):
    """Request model for label validation."""

    requirements: Any = Field(
        default=None,
        description="Tabular rows (list of objects) or a structured requirement tree (object)"
    )
    text_regions: Any = Field(
        default_factory=list,
        description="Text regions from the OCR backend: {text?, lines?, words?, xmin, ymin, xmax, ymax}"
    )
    symbols: Any = Field(
        default_factory=list,
        description="Symbol detections: {class, confidence, xmin, ymin, xmax, ymax}"
    )
    column_mapping: Optional[Dict[str, Optional[str]]] = Field(
        default=None,
        description="Override for detected spreadsheet columns, e.g. {'item': 'Legal Term'}"
    )

    @field_validator("column_mapping")
    @classmethod
    def validate_column_roles(cls, v: Optional[Dict[str, Optional[str]]]) -> Optional[Dict[str, Optional[str]]]:
        """Only the five known column roles may be overridden."""
        if v is None:
            return v
        valid_roles = {"item", "symbol", "description", "required", "type"}
        unknown = set(v) - valid_roles
        if unknown:
            raise ValueError(f"Column roles must be one of: {', '.join(sorted(valid_roles))}")
        return v

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "requirements": [
                    {"Item": "Warning: choking hazard", "Type": "text", "Required": True},
                    {"Item": "CE mark", "Symbol": "ce_mark", "Type": "symbol"}
                ],
                "textRegions": [
                    {"text": "WARNING: CHOKING HAZARD - small parts", "xmin": 10, "ymin": 12, "xmax": 220, "ymax": 40}
                ],
                "symbols": [
                    {"class": "CE", "confidence": 0.93, "xmin": 300, "ymin": 20, "xmax": 340, "ymax": 60}
                ]
            }
        }
    )


class TermValidation(_FrozenCamelModel):
    """Verdict view for one text requirement."""
    term: str
    required: bool
    found: bool
    valid: bool


class SymbolValidation(_FrozenCamelModel):
    """Verdict view for one symbol requirement."""
    symbol: str
    required: bool
    found: bool
    valid: bool


class LayoutValidation(_FrozenCamelModel):
    """Verdict view for one layout rule."""
    rule: str
    description: str
    valid: bool


class ComplianceRatios(_FrozenCamelModel):
    """Category compliance ratios and weighted overall score."""
    text: float
    symbol: float
    layout: float
    overall: float


class ValidationReport(_FrozenCamelModel):
    """Final validation report."""

    is_compliant: bool = Field(..., description="Overall score met the compliance threshold")
    compliance_message: str = Field(..., description="Human-readable outcome")
    term_validations: List[TermValidation] = Field(default_factory=list)
    symbol_validations: List[SymbolValidation] = Field(default_factory=list)
    layout_validations: List[LayoutValidation] = Field(default_factory=list)
    compliance: Optional[ComplianceRatios] = Field(None, description="Category ratios behind is_compliant")


class RequirementView(_FrozenCamelModel):
    """One built requirement as returned by the parse endpoint."""
    id: str
    kind: str
    description: str
    match_target: str
    required: bool
    synonyms: List[str] = Field(default_factory=list)
    rule: Optional[str] = None
    element_id: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)


class RequirementSetResponse(_FrozenCamelModel):
    """Response model for requirement file parsing."""
    filename: str
    required_texts: List[RequirementView] = Field(default_factory=list)
    required_symbols: List[RequirementView] = Field(default_factory=list)
    layout_requirements: List[RequirementView] = Field(default_factory=list)
    column_mapping: Optional[Dict[str, Optional[str]]] = None
