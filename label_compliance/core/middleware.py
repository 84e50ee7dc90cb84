"""
HTTP middleware utilities.

Every request runs with a request id: the caller's ``X-Request-ID`` (or
``X-Correlation-ID``) when given, otherwise a fresh UUID. The id is visible to
logging through ``request_id_var`` and echoed in the response headers.
"""
import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from label_compliance.core.error_handling import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADERS = ("X-Request-ID", "X-Correlation-ID")


def incoming_request_id(request: Request) -> str:
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of each request."""

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = incoming_request_id(request)
        token = request_id_var.set(request_id)
        start_time = time.time()
        try:
            response = await call_next(request)
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"in {(time.time() - start_time) * 1000:.0f}ms"
            )
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response
