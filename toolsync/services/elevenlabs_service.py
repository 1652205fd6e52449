"""
ElevenLabs Service
Manages webhook tools and agent tool assignments on ElevenLabs Conversational AI
"""

import httpx
from typing import Optional, Dict, Any, List

from toolsync.core.config import settings
from toolsync.core.logging import get_logger
from toolsync.core.exceptions import ElevenLabsServiceError
from toolsync.models.tool import RegisteredTool

logger = get_logger(__name__)


class ElevenLabsService:
    """Service for interacting with the ElevenLabs Conversational AI API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key or settings.elevenlabs_api_key
        self.api_base = (api_base or settings.elevenlabs_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout

        self.headers = {
            "xi-api-key": self.api_key or "",
            "Content-Type": "application/json"
        }

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    f"{self.api_base}{path}",
                    headers=self.headers,
                    json=json
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"ElevenLabs API error {e.response.status_code} on {method} {path}: {e.response.text}")
            raise ElevenLabsServiceError(
                e.response.text or f"HTTP {e.response.status_code}",
                elevenlabs_status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed on {method} {path}: {e}")
            raise ElevenLabsServiceError(str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error(f"ElevenLabs returned a non-JSON body on {method} {path}: {e}")
            raise ElevenLabsServiceError(f"Invalid JSON response: {e}") from e

    async def list_tools(self) -> List[RegisteredTool]:
        """
        List every tool in the workspace registry

        Returns:
            Registered tools; the API answers with a bare list or {"tools": [...]}
        """
        data = await self._request("GET", "/convai/tools")

        if isinstance(data, dict):
            data = data.get("tools")
        if not isinstance(data, list):
            return []

        return [
            RegisteredTool.from_payload(tool)
            for tool in data
            if isinstance(tool, dict)
        ]

    async def get_tool(self, tool_id: str) -> Optional[RegisteredTool]:
        """
        Get a tool by ID

        Returns:
            The tool, or None when it no longer exists
        """
        try:
            data = await self._request("GET", f"/convai/tools/{tool_id}")
        except ElevenLabsServiceError as e:
            if e.details.get("status_code") == 404:
                return None
            raise
        if not isinstance(data, dict):
            return None
        return RegisteredTool.from_payload(data)

    async def create_tool(self, payload: Dict[str, Any]) -> str:
        """
        Create a tool

        Args:
            payload: {"tool_config": {...}} request body

        Returns:
            ID of the created tool
        """
        data = await self._request("POST", "/convai/tools", json=payload)
        if not isinstance(data, dict):
            raise ElevenLabsServiceError("Tool creation returned an unexpected response")

        tool_id = data.get("id") or data.get("tool_id") or data.get("toolId")
        if not tool_id:
            raise ElevenLabsServiceError("Tool created without an id in the response")
        return str(tool_id)

    async def update_agent_tools(self, agent_id: str, tool_ids: List[str]) -> None:
        """Replace the tool list of an agent"""
        payload = {
            "conversation_config": {
                "agent": {
                    "prompt": {"tool_ids": tool_ids}
                }
            }
        }
        await self._request("PATCH", f"/convai/agents/{agent_id}", json=payload)
        logger.info(f"Attached {len(tool_ids)} tool(s) to agent {agent_id}")
