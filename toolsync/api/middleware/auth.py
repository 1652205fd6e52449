"""
Authentication Middleware
Guards the scheduled sync endpoint with the shared cron secret
"""

import hmac
from typing import Optional
from fastapi import Request

from toolsync.core.config import settings
from toolsync.core.logging import get_logger
from toolsync.core.exceptions import AuthenticationError

logger = get_logger(__name__)


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract a Bearer token from the Authorization header"""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return None


async def verify_cron_secret(request: Request) -> None:
    """
    Dependency that checks Authorization: Bearer <CRON_SECRET>

    The check is skipped when no cron secret is configured.

    Raises:
        AuthenticationError: If the token is missing or does not match
    """
    if not settings.cron_secret:
        return

    token = get_bearer_token(request)
    if not token or not hmac.compare_digest(token.encode(), settings.cron_secret.encode()):
        logger.warning(f"Rejected cron request from {request.client.host if request.client else 'unknown'}")
        raise AuthenticationError("Invalid cron secret")
