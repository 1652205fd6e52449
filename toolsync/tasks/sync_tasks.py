"""
Tool Synchronization Tasks
Runs the sync pipeline from Celery workers and beat
"""
import asyncio
from typing import Dict, Any
from celery import shared_task
from celery.utils.log import get_task_logger

logger = get_task_logger(__name__)


def run_async(coro):
    """Helper to run async code in Celery tasks"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@shared_task(
    bind=True,
    name="toolsync.tasks.sync_tasks.sync_all_tenants_task",
    queue="sync"
)
def sync_all_tenants_task(self) -> Dict[str, Any]:
    """
    Sync tools for every tenant user with connected integrations

    Not retried: a failed nightly run is picked up by the next one.
    """
    logger.info(f"Starting scheduled tool sync (task_id: {self.request.id})")

    async def _sync():
        from toolsync.services.tool_sync import get_tool_sync_service
        service = get_tool_sync_service()
        return await service.sync_all_tenants()

    summaries = run_async(_sync())

    total_errors = sum(len(summary.errors) for summary in summaries)
    logger.info(f"Scheduled tool sync finished: {len(summaries)} tenant user(s), {total_errors} error(s)")

    return {
        "status": "success",
        "task_id": self.request.id,
        "synced": len(summaries),
        "errors": total_errors,
        "results": [summary.model_dump(by_alias=True) for summary in summaries]
    }


@shared_task(
    bind=True,
    name="toolsync.tasks.sync_tasks.sync_tenant_tools_task",
    queue="sync"
)
def sync_tenant_tools_task(self, tenant_id: str, user_id: str) -> Dict[str, Any]:
    """
    Sync tools for a single tenant user, e.g. right after a new connection
    """
    logger.info(f"Syncing tools for tenant {tenant_id}, user {user_id} (task_id: {self.request.id})")

    async def _sync():
        from toolsync.services.tool_sync import get_tool_sync_service
        service = get_tool_sync_service()
        return await service.sync_tools(tenant_id, user_id)

    result = run_async(_sync())

    return {
        "status": "success" if not result.errors else "partial",
        "task_id": self.request.id,
        "tenant_id": tenant_id,
        "user_id": user_id,
        **result.to_response()
    }
