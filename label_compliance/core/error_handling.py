"""
Error handling utilities for compliance validation endpoints.

This module provides custom exceptions and a decorator for consistent error
handling across the API. The validation engine itself never raises for
malformed requirement or evidence data; these exceptions cover the request
boundary (uploaded files and form fields).
"""
import asyncio
import logging
import time
import uuid
from typing import Callable, TypeVar, ParamSpec
from functools import wraps
from contextvars import ContextVar

from fastapi import HTTPException

from label_compliance.core.config import settings

logger = logging.getLogger(__name__)

# Context variable for request ID tracking across async contexts
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

P = ParamSpec('P')
T = TypeVar('T')


# ============================================================================
# Custom Exceptions
# ============================================================================

class ComplianceEngineError(Exception):
    """Base exception for compliance validation errors."""
    pass


class RequirementSourceError(ComplianceEngineError):
    """Requirement file was rejected before parsing (type or size)."""
    pass


class EvidenceFormatError(ComplianceEngineError):
    """Detection payload could not be decoded."""
    pass


# ============================================================================
# Error Handler Decorator
# ============================================================================

def _ensure_request_id() -> str:
    if not request_id_var.get():
        request_id_var.set(str(uuid.uuid4()))
    return request_id_var.get()


def _log_completion(func_name: str, request_id: str, start_time: float) -> None:
    elapsed = time.time() - start_time
    elapsed_ms = elapsed * 1000
    threshold_ms = settings.RESPONSE_TIME_WARNING_THRESHOLD_MS
    if elapsed_ms > threshold_ms:
        logger.warning(
            f"[{request_id}] SLOW RESPONSE: {func_name} took {elapsed:.2f}s "
            f"({elapsed_ms:.0f}ms > {threshold_ms}ms threshold)"
        )
    else:
        logger.info(f"[{request_id}] Completed {func_name} in {elapsed:.2f}s")


def _to_http_exception(
    exc: Exception,
    func_name: str,
    error_message: str,
    request_id: str,
    start_time: float
) -> HTTPException:
    """Map an exception raised by an endpoint to an HTTPException."""
    elapsed = time.time() - start_time
    headers = {"X-Request-ID": request_id}

    if isinstance(exc, RequirementSourceError):
        logger.error(f"[{request_id}] {error_message} - Requirement file rejected after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"Requirement file rejected: {exc}", headers=headers)
    if isinstance(exc, EvidenceFormatError):
        logger.error(f"[{request_id}] {error_message} - Evidence payload error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"Invalid detection payload: {exc}", headers=headers)
    if isinstance(exc, ComplianceEngineError):
        logger.error(f"[{request_id}] {error_message} - Engine error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=str(exc), headers=headers)
    if isinstance(exc, ValueError):
        logger.error(f"[{request_id}] {error_message} - Invalid value after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"Invalid input: {exc}", headers=headers)

    logger.exception(
        f"[{request_id}] {error_message} - Unexpected error in {func_name} after {elapsed:.2f}s: {exc}"
    )
    return HTTPException(status_code=500, detail=f"{error_message}: {exc}", headers=headers)


def handle_validation_errors(
    error_message: str = "Operation failed"
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to handle errors in validation endpoints.

    Converts engine errors to HTTP exceptions, logs them with the request ID
    and reports timing. Works with both sync and async functions.
    HTTPExceptions raised by the wrapped function pass through unchanged.

    Args:
        error_message: Custom error message prefix

    Returns:
        Decorated function with error handling

    Example:
        @handle_validation_errors("Failed to validate label")
        async def validate(request: ValidationRequest) -> ValidationReport:
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            request_id = _ensure_request_id()
            start_time = time.time()
            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(e, func.__name__, error_message, request_id, start_time)
            _log_completion(func.__name__, request_id, start_time)
            return result

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            request_id = _ensure_request_id()
            start_time = time.time()
            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(e, func.__name__, error_message, request_id, start_time)
            _log_completion(func.__name__, request_id, start_time)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
