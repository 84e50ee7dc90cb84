"""
Bearer-token authentication for the validation endpoints.
"""
import logging
import secrets
from typing import Optional

from fastapi import Security, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from label_compliance.core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_api_key(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme)
) -> bool:
    """
    Verify the Bearer token from the Authorization header.

    Disabled entirely when REQUIRE_API_KEY is false.

    Raises:
        HTTPException: 401 if the token is missing, 403 if it does not match,
            500 if authentication is required but no API_KEY is configured
    """
    if not settings.REQUIRE_API_KEY:
        return True

    if not settings.API_KEY:
        logger.warning("API_KEY not configured but REQUIRE_API_KEY is True. Denying access.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication is not properly configured"
        )

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer token is required. Provide Authorization: Bearer <token> header.",
            headers={"WWW-Authenticate": "Bearer"}
        )

    if not secrets.compare_digest(credentials.credentials, settings.API_KEY):
        logger.warning("Rejected request with invalid bearer token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return True
