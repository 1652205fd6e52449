"""
Celery Configuration for Scheduled Tool Synchronization
"""
from celery import Celery
from celery.schedules import crontab

from toolsync.core.config import settings

# Create Celery app
celery_app = Celery(
    "toolsync",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["toolsync.tasks.sync_tasks"]
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # A sync run is long and sequential; one at a time per worker process
    worker_prefetch_multiplier=1,

    # Task routing
    task_routes={
        "toolsync.tasks.sync_tasks.sync_all_tenants_task": {"queue": "sync"},
        "toolsync.tasks.sync_tasks.sync_tenant_tools_task": {"queue": "sync"},
    },

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completes
    task_reject_on_worker_lost=True,  # Requeue if worker dies
    task_time_limit=3600,  # 1 hour hard limit
    task_soft_time_limit=3300,

    # Result backend settings
    result_expires=86400,

    broker_connection_retry_on_startup=True,
)

# Nightly sync of every tenant
celery_app.conf.beat_schedule = {
    "sync-all-tenant-tools": {
        "task": "toolsync.tasks.sync_tasks.sync_all_tenants_task",
        "schedule": crontab(hour=settings.sync_schedule_hour, minute=0),
    },
}

# Define task queues
celery_app.conf.task_queues = {
    "sync": {
        "exchange": "sync",
        "routing_key": "sync",
    },
    "default": {
        "exchange": "default",
        "routing_key": "default",
    },
}
