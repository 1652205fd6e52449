"""Data models for the Tool Sync service"""

from .integration import IntegrationConnection

from .tool import (
    RawTool,
    RegisteredTool,
    SyncResult,
    TenantSyncSummary,
    SyncRequest,
    AgentToolsRequest,
    AgentTools
)

__all__ = [
    # Integration models
    "IntegrationConnection",
    # Tool models
    "RawTool",
    "RegisteredTool",
    "SyncResult",
    "TenantSyncSummary",
    "SyncRequest",
    "AgentToolsRequest",
    "AgentTools"
]
