"""
Validation package for label compliance.

- evidence_normalizer.py: OCR text regions and symbol detections -> flat string sets
- matcher.py: layered exact / canonical / synonym / keyword matching
- aggregator.py: category ratios, weighted score and pass/fail
- validation_orchestrator.py: ComplianceValidationService running the pipeline
"""
from .validation_orchestrator import ComplianceValidationService, get_validation_service
from .evidence_normalizer import EvidenceNormalizer
from .matcher import Matcher
from .aggregator import ComplianceAggregator, category_ratio

__all__ = [
    'ComplianceValidationService',
    'get_validation_service',
    'EvidenceNormalizer',
    'Matcher',
    'ComplianceAggregator',
    'category_ratio',
]
