"""
Tool Sync API Routes
Manual, scheduled and per-agent tool synchronization
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends

from toolsync.api.middleware.auth import verify_cron_secret
from toolsync.core.logging import get_logger
from toolsync.models.tool import AgentTools, AgentToolsRequest, SyncRequest
from toolsync.services.tool_sync import ToolSyncService, get_tool_sync_service

logger = get_logger(__name__)

router = APIRouter(tags=["tools"])


def get_service() -> ToolSyncService:
    """Dependency to get the tool sync service"""
    return get_tool_sync_service()


@router.post("/tools/sync")
async def sync_tools(
    request: SyncRequest,
    service: ToolSyncService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Sync Composio tools to ElevenLabs for a tenant user

    Returns the registered tool ids and any per-integration errors.
    """
    result = await service.sync_tools(request.tenant_id, request.user_id)
    return result.to_response()


@router.api_route(
    "/cron/sync-tools",
    methods=["GET", "POST"],
    dependencies=[Depends(verify_cron_secret)]
)
async def cron_sync_tools(
    service: ToolSyncService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Sync tools for every tenant user with connected integrations

    Requires `Authorization: Bearer <CRON_SECRET>` when a cron secret is configured.
    """
    summaries = await service.sync_all_tenants()

    total_errors = sum(len(summary.errors) for summary in summaries)
    logger.info(f"Scheduled sync finished: {len(summaries)} tenant user(s), {total_errors} error(s)")

    return {
        "success": True,
        "message": f"Synced tools for {len(summaries)} tenant user(s)",
        "synced": len(summaries),
        "errors": total_errors,
        "results": [summary.model_dump(by_alias=True) for summary in summaries]
    }


@router.get("/agents/{tenant_id}/tools")
async def get_agent_tools(
    tenant_id: str,
    service: ToolSyncService = Depends(get_service)
) -> Dict[str, Any]:
    """
    List the tools attached to a tenant's voice agent
    """
    agent_tools: AgentTools = await service.get_agent_tools(tenant_id)
    return agent_tools.model_dump(by_alias=True)


@router.post("/agents/{tenant_id}/tools")
async def refresh_agent_tools(
    tenant_id: str,
    request: AgentToolsRequest,
    service: ToolSyncService = Depends(get_service)
) -> Dict[str, Any]:
    """
    Sync tools for a tenant user and attach them to the tenant's voice agent
    """
    agent_tools = await service.sync_agent_tools(tenant_id, request.user_id)
    return agent_tools.model_dump(by_alias=True)
