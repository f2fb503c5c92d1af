# -*- coding: utf-8 -*-
"""
API key guard for the endpoints that spend Gemini quota (/generate, /images).

Reading endpoints stay open: the article state is not secret, generating it is
what costs money.
"""
import logging
import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyHeader

from .config import settings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
        request: Request,
        api_key: Annotated[str | None, Depends(api_key_header)],
) -> bool:
    """
    Check the X-API-Key header against settings.API_KEY.

    Args:
        request: Incoming request (for logging)
        api_key: Header value, if any

    Returns:
        True when access is granted (always, if API_KEY is empty)

    Raises:
        HTTPException: 401 when the key is missing or wrong
    """
    if not settings.API_KEY:
        return True

    if not api_key:
        raise _unauthorized("Missing API key. Provide X-API-Key header.")

    if not secrets.compare_digest(api_key.encode(), settings.API_KEY.encode()):
        logger.warning(
            "Rejected API key",
            extra={"path": request.url.path, "method": request.method},
        )
        raise _unauthorized("Invalid API key")

    return True


# Dependency for quota-spending routes
RequireApiKey = Annotated[bool, Depends(verify_api_key)]
