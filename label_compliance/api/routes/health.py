from fastapi import APIRouter

from label_compliance.core.config import settings

router = APIRouter()


@router.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "Label Compliance API", "status": "healthy"}


@router.get("/health")
async def health_check():
    """
    Health check with a configuration summary.

    Reports:
    - Whether bearer-token auth is enabled and configured
    - Engine settings that change verdicts
    """
    health_status = {
        "status": "healthy",
        "service": "Label Compliance Validator",
        "version": "1.0",
        "auth_required": settings.REQUIRE_API_KEY,
        "auth_configured": bool(settings.API_KEY),
        "layout_evaluation_policy": settings.LAYOUT_EVALUATION_POLICY,
        "min_symbol_confidence": settings.MIN_SYMBOL_CONFIDENCE,
        "max_upload_mb": settings.MAX_UPLOAD_MB,
    }

    if settings.REQUIRE_API_KEY and not settings.API_KEY:
        health_status["status"] = "degraded"
        health_status["warning"] = "REQUIRE_API_KEY is set but API_KEY is not configured"

    return health_status
