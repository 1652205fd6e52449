"""
Celery Tasks for Scheduled Tool Synchronization
"""
from .celery_app import celery_app
from .sync_tasks import sync_all_tenants_task, sync_tenant_tools_task

__all__ = ["celery_app", "sync_all_tenants_task", "sync_tenant_tools_task"]
