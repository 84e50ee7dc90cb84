"""
Pydantic models for structured requirement trees.

The requirement parser backend returns
``{"result": {"text_requirement": [{"name", "req_properties": [{"req_name", "req_desc"}]}], ...}}``
while API clients may send the camelCase form
``{"textRequirement": [{"name", "properties": [{"name", "description"}]}], ...}``.
Both spellings validate into the same models.
"""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RequirementProperty(BaseModel):
    """One property of a requirement node (e.g. the expected statement)."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "req_name", "req_property_name"),
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "req_desc", "req_property_value"),
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Treat null as empty and stringify scalars."""
        return "" if v is None else str(v)


class RequirementNode(BaseModel):
    """A named requirement in a structured tree."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "req_name"))
    properties: List[RequirementProperty] = Field(
        default_factory=list,
        validation_alias=AliasChoices("properties", "req_properties", "reqs"),
    )
    labels: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("labels", "req_labels", "synonyms"),
    )
    required: Optional[Any] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("properties", "labels", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class StructuredRequirementSource(BaseModel):
    """Requirement groups; nodes are validated one by one by the builder."""

    model_config = ConfigDict(extra="ignore")

    text_requirement: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("text_requirement", "textRequirement", "text_requirements"),
    )
    symbol_requirement: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("symbol_requirement", "symbolRequirement", "symbol_requirements"),
    )
    layout_requirement: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("layout_requirement", "layoutRequirement", "layout_requirements"),
    )

    @field_validator("text_requirement", "symbol_requirement", "layout_requirement", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def is_empty(self) -> bool:
        return not (self.text_requirement or self.symbol_requirement or self.layout_requirement)
