"""
Tool Sync - Main Application Entry Point

Synchronizes the tools a tenant has connected through Composio into
ElevenLabs Conversational AI, so the tenant's voice agent can call them.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from toolsync.core.config import settings
from toolsync.core.logging import setup_logging, get_logger
from toolsync.core.exceptions import ToolSyncException, AuthenticationError
from toolsync.api.routes import tools, health

# Setup logging
setup_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Starting Tool Sync")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Webhook URL: {settings.webhook_url}")

    missing = settings.missing_credentials()
    if missing:
        logger.warning(f"Missing credentials, sync endpoints will fail: {', '.join(missing)}")
    if not settings.cron_secret:
        logger.warning("CRON_SECRET not set, scheduled sync endpoint is unauthenticated")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Shutting down Tool Sync")


# Create FastAPI application
app = FastAPI(
    title="Tool Sync API",
    description="""
    ## Voice Agent Tool Synchronization

    Registers the actions of each tenant's connected integrations
    (Calendly, Cal.com, HubSpot, Pipedrive, Salesforce) as ElevenLabs
    webhook tools.

    ### Endpoints

    - **Manual sync**: `POST /api/v1/tools/sync`
    - **Scheduled sync**: `GET|POST /api/v1/cron/sync-tools` (Bearer cron secret)
    - **Agent tools**: `GET|POST /api/v1/agents/{tenant_id}/tools`
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom Exception Handlers
@app.exception_handler(AuthenticationError)
async def auth_exception_handler(request: Request, exc: AuthenticationError):
    """Handle authentication errors"""
    logger.warning(f"AuthenticationError: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"WWW-Authenticate": "Bearer"}
    )


@app.exception_handler(ToolSyncException)
async def tool_sync_exception_handler(request: Request, exc: ToolSyncException):
    """Handle custom tool sync exceptions"""
    logger.warning(f"ToolSyncException: {exc.error_code} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "details": {"exception": str(exc)} if settings.debug else {}
        }
    )


# Include routers
app.include_router(health.router)
app.include_router(tools.router, prefix="/api/v1")


@app.get("/api")
async def api_info():
    """API information endpoint"""
    return {
        "service": "Tool Sync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "sync": "/api/v1/tools/sync",
            "cron": "/api/v1/cron/sync-tools",
            "agent_tools": "/api/v1/agents/{tenant_id}/tools"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "toolsync.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug
    )
