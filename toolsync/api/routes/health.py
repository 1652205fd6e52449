"""
Health check and status endpoints
"""

from datetime import datetime
from fastapi import APIRouter

from toolsync.core.config import settings
from toolsync.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.environment
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - verifies the credentials needed for a sync are configured
    """
    missing = settings.missing_credentials()
    checks = {
        "composio": "COMPOSIO_API_KEY" not in missing,
        "elevenlabs": "ELEVENLABS_API_KEY" not in missing,
        "supabase": "SUPABASE_URL" not in missing and "SUPABASE_SERVICE_ROLE_KEY" not in missing,
        "cron_secret": bool(settings.cron_secret)
    }

    return {
        "status": "ready" if not missing else "degraded",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": checks,
        "webhook_url": settings.webhook_url
    }
