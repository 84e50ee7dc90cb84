"""Data models for requirements, evidence, verdicts and the API."""

from .requirement_models import (
    RequirementKind,
    TextRequirement,
    SymbolRequirement,
    LayoutRequirement,
    Requirement,
    RequirementSet,
    ColumnMapping
)
from .evidence_models import (
    RegionShape,
    TaggedRegion,
    TextEvidence,
    NormalizedEvidence
)
from .validation_models import (
    MatchStrategy,
    MatchResult,
    Verdict,
    ComplianceScore,
    ValidationOutcome
)
from .api_models import (
    ValidationRequest,
    ValidationReport,
    TermValidation,
    SymbolValidation,
    LayoutValidation,
    ComplianceRatios,
    RequirementView,
    RequirementSetResponse
)

__all__ = [
    "RequirementKind",
    "TextRequirement",
    "SymbolRequirement",
    "LayoutRequirement",
    "Requirement",
    "RequirementSet",
    "ColumnMapping",
    "RegionShape",
    "TaggedRegion",
    "TextEvidence",
    "NormalizedEvidence",
    "MatchStrategy",
    "MatchResult",
    "Verdict",
    "ComplianceScore",
    "ValidationOutcome",
    "ValidationRequest",
    "ValidationReport",
    "TermValidation",
    "SymbolValidation",
    "LayoutValidation",
    "ComplianceRatios",
    "RequirementView",
    "RequirementSetResponse"
]
