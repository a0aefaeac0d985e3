# scriptflow/core/auth.py
"""
Authentication module for the pipeline server.
Handles optional API token verification for protected endpoints.
"""

import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from scriptflow.core.config import config

# API Key header configuration
bearer_scheme = HTTPBearer(auto_error=False)
api_key_header = APIKeyHeader(name="X-API-Token", auto_error=False)


async def verify_token(
    api_token: Optional[str] = Depends(api_key_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Verify the API token when the server is configured with one.

    Without ``API_TOKEN`` the server is meant for local use and every request passes.

    Args:
        api_token: Token from the ``X-API-Token`` header
        credentials: Token from the ``Authorization: Bearer`` header

    Returns:
        Optional[str]: The validated token, None when authentication is disabled

    Raises:
        HTTPException: 401 error if token is missing or invalid
    """
    if not config.API_TOKEN:
        return None

    if api_token:
        token = api_token
    elif credentials:
        token = credentials.credentials
    else:
        token = None

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not hmac.compare_digest(token, config.API_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return token
