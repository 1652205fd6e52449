"""API Middleware"""

from .auth import get_bearer_token, verify_cron_secret

__all__ = [
    "get_bearer_token",
    "verify_cron_secret"
]
