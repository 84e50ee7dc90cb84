"""
FastAPI application for validating product-packaging labels.
Checks detected label text and symbols against legal requirements.
"""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from label_compliance.api.routes import health, validation
from label_compliance.core.logging import setup_logging
from label_compliance.core.exceptions import http_exception_handler, validation_exception_handler
from label_compliance.core.middleware import RequestIDMiddleware

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Label Compliance Validator",
    description="API for validating packaging labels against legal text, symbol and layout requirements",
    version="1.0.0"
)

# Middleware
app.add_middleware(RequestIDMiddleware)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(health.router)
app.include_router(validation.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
