"""Services package: requirement building, evidence matching, scoring and reporting."""

from label_compliance.services.requirements import RequirementBuilder, RequirementFileLoader
from label_compliance.services.validation import ComplianceValidationService, get_validation_service
from label_compliance.services.report_builder import ReportBuilder

__all__ = [
    'RequirementBuilder',
    'RequirementFileLoader',
    'ComplianceValidationService',
    'get_validation_service',
    'ReportBuilder',
]
