"""
Tool Registrar
Creates ElevenLabs webhook tools for Composio actions, reusing tools that
already exist under the same name.
"""

from typing import Any, Dict, Optional, Set

from toolsync.core.exceptions import ElevenLabsServiceError, ToolRegistrationError
from toolsync.core.logging import get_logger
from toolsync.models.tool import RawTool
from toolsync.services.elevenlabs_service import ElevenLabsService
from toolsync.services.naming import display_name, registered_name
from toolsync.services.schema_converter import convert_schema

logger = get_logger(__name__)

RESPONSE_TIMEOUT_SECS = 30


def build_webhook_payload(tool: RawTool, connection_id: str, webhook_url: str) -> Dict[str, Any]:
    """
    ElevenLabs tool creation body for a Composio action

    connectionId and toolName are fixed per tool so the dispatch endpoint
    knows which account and action to execute; the agent only fills in
    parameters.
    """
    readable = display_name(tool.name)

    return {
        "tool_config": {
            "type": "webhook",
            "name": registered_name(tool.name),
            "description": tool.description or readable,
            "api_schema": {
                "url": webhook_url,
                "method": "POST",
                "path_params_schema": {},
                "query_params_schema": None,
                "request_body_schema": {
                    "type": "object",
                    "description": f"Execute {readable}",
                    "properties": {
                        "connectionId": {
                            "type": "string",
                            "description": "Composio connected account",
                            "constant_value": connection_id,
                        },
                        "toolName": {
                            "type": "string",
                            "description": "Composio action to execute",
                            "constant_value": tool.name,
                        },
                        "parameters": convert_schema(tool.parameters),
                    },
                    "required": ["parameters"],
                },
                "request_headers": {"Content-Type": "application/json"},
                "content_type": "application/json",
                "auth_connection": None,
            },
            "response_timeout_secs": RESPONSE_TIMEOUT_SECS,
            "disable_interruptions": False,
            "force_pre_tool_speech": False,
            "assignments": [],
            "tool_call_sound": None,
            "tool_call_sound_behavior": "auto",
            "dynamic_variables": {},
            "execution_mode": "immediate",
        }
    }


class ToolRegistrar:
    """
    Registers tools for one sync run

    Holds the registry snapshot and the names already handled in the run,
    so a registrar instance must not be shared between runs.
    """

    def __init__(self, elevenlabs_service: ElevenLabsService, webhook_url: str):
        self.elevenlabs = elevenlabs_service
        self.webhook_url = webhook_url

        self.existing: Dict[str, str] = {}
        self.processed: Set[str] = set()

        self.created = 0
        self.reused = 0
        self.skipped = 0

    async def load_registry(self) -> int:
        """
        Snapshot existing tools as a lower-cased name -> id index

        Returns:
            Number of indexed tools
        """
        tools = await self.elevenlabs.list_tools()
        self.existing = {}
        for tool in tools:
            if tool.name and tool.id:
                self.existing.setdefault(tool.name.lower(), tool.id)

        logger.info(f"Found {len(self.existing)} existing tool(s) in ElevenLabs")
        return len(self.existing)

    async def register_tool(self, tool: RawTool, connection_id: str) -> Optional[str]:
        """
        Register a tool, or reuse the existing one with the same name

        Returns:
            Tool id, or None when the name was already handled in this run

        Raises:
            ToolRegistrationError: when creation fails
        """
        name = registered_name(tool.name)
        key = name.lower()

        if key in self.processed:
            logger.info(f"Skipping duplicate: {name} (already processed)")
            self.skipped += 1
            return None
        self.processed.add(key)

        existing_id = self.existing.get(key)
        if existing_id:
            logger.info(f"Using existing tool: {name} ({existing_id})")
            self.reused += 1
            return existing_id

        payload = build_webhook_payload(tool, connection_id, self.webhook_url)
        try:
            tool_id = await self.elevenlabs.create_tool(payload)
        except ElevenLabsServiceError as e:
            logger.error(f"Failed to create tool {tool.name}: {e.message}")
            raise ToolRegistrationError(tool.name, e.message) from e

        logger.info(f"Created tool: {name} ({tool_id})")
        self.created += 1
        return tool_id
