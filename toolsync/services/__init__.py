"""Services for the Tool Sync engine"""

from .composio_service import ComposioService
from .elevenlabs_service import ElevenLabsService
from .supabase_service import SupabaseService
from .tool_fetcher import ToolFetcher, unwrap_tools
from .tool_registrar import ToolRegistrar, build_webhook_payload
from .tool_sync import ToolSyncService, get_tool_sync_service
from .whitelist import has_allow_list, is_allowed, match_tool

__all__ = [
    "ComposioService",
    "ElevenLabsService",
    "SupabaseService",
    "ToolFetcher",
    "unwrap_tools",
    "ToolRegistrar",
    "build_webhook_payload",
    "ToolSyncService",
    "get_tool_sync_service",
    "has_allow_list",
    "is_allowed",
    "match_tool"
]
