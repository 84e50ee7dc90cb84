"""
Label compliance API endpoints.

Validates detected label content (OCR text regions and symbol detections)
against legal requirements supplied as JSON or as an uploaded file.
"""
import json
import logging
from typing import Any, Optional, Type

from fastapi import APIRouter, Depends, File, Form, UploadFile

from label_compliance.core.error_handling import EvidenceFormatError, handle_validation_errors
from label_compliance.core.security import verify_api_key
from label_compliance.models.api_models import RequirementSetResponse, ValidationReport, ValidationRequest
from label_compliance.services.report_builder import ReportBuilder
from label_compliance.services.requirements import RequirementBuilder, RequirementFileLoader
from label_compliance.services.validation import get_validation_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _parse_json_field(
    value: Optional[str],
    field_name: str,
    default: Any,
    error: Type[Exception] = EvidenceFormatError
) -> Any:
    """Decode a JSON form field; blank means ``default``.

    Raises:
        error: If the field is not valid JSON (detection payloads by default)
    """
    if value is None or not value.strip():
        return default
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise error(f"{field_name} is not valid JSON: {e.msg}")


@router.post(
    "/requirements/parse",
    response_model=RequirementSetResponse,
    dependencies=[Depends(verify_api_key)]
)
@handle_validation_errors("Failed to parse requirement file")
async def parse_requirements(
    requirements: UploadFile = File(...),
    column_mapping: Optional[str] = Form(None)
):
    """
    Build the requirement set from an uploaded file without validating.

    Lets a reviewer check how spreadsheet columns and rows were interpreted.

    Args:
        requirements: CSV, Excel (.xlsx) or JSON requirement file
        column_mapping: Optional JSON object overriding detected columns

    Returns:
        Built requirements and the column mapping used (tabular files only)
    """
    loader = RequirementFileLoader()
    builder = RequirementBuilder()

    source = await loader.load_upload(requirements)
    overrides = _parse_json_field(column_mapping, "column_mapping", None, error=ValueError)
    if overrides is not None and not isinstance(overrides, dict):
        raise ValueError("column_mapping must be a JSON object")

    mapping = builder.resolve_columns(source, overrides) if isinstance(source, list) else None
    requirement_set = builder.build(source, overrides)

    return ReportBuilder().build_requirement_set_response(
        requirement_set,
        filename=requirements.filename,
        column_mapping=mapping
    )


@router.post("/validate", response_model=ValidationReport, dependencies=[Depends(verify_api_key)])
@handle_validation_errors("Failed to validate label")
async def validate_label(request: ValidationRequest):
    """
    Validate one label from a JSON body.

    Args:
        request: Requirements plus raw text regions and symbol detections

    Returns:
        ValidationReport
    """
    service = get_validation_service()
    return service.validate(
        request.requirements,
        request.text_regions,
        request.symbols,
        request.column_mapping
    )


@router.post("/verify-requirements", response_model=ValidationReport, dependencies=[Depends(verify_api_key)])
@handle_validation_errors("Failed to verify requirements")
async def verify_requirements(
    requirements: UploadFile = File(...),
    text_results: Optional[str] = Form(None),
    symbol_results: Optional[str] = Form(None)
):
    """
    Validate one label from a requirement file plus detection results.

    Args:
        requirements: CSV, Excel (.xlsx) or JSON requirement file
        text_results: JSON array of OCR text regions (optional)
        symbol_results: JSON array of symbol detections (optional)

    Returns:
        ValidationReport
    """
    text_regions = _parse_json_field(text_results, "text_results", [])
    symbols = _parse_json_field(symbol_results, "symbol_results", [])

    source = await RequirementFileLoader().load_upload(requirements)
    logger.info(f"Verifying {requirements.filename} against detection results")

    return get_validation_service().validate(source, text_regions, symbols)
