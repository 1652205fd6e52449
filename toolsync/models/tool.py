"""
Tool Models
Raw connector tools, registered platform tools and sync results
"""

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field


class RawTool(BaseModel):
    """A tool definition as returned by the connector aggregation service"""
    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RawTool":
        """
        Build from either the flat Composio shape or the function-calling shape

        Flat: {"slug": "CALENDLY_GET_USER", "name": "Get user",
               "description": ..., "input_parameters": {...}}
        Function: {"type": "function", "function": {"name": ..., "parameters": {...}}}
        """
        function = payload.get("function")
        if not isinstance(function, dict):
            function = {}

        name = (
            payload.get("slug")
            or payload.get("name")
            or function.get("name")
            or "Unknown Tool"
        )
        description = payload.get("description") or function.get("description") or ""

        parameters = None
        for key in ("parameters", "input_parameters", "inputParameters"):
            if isinstance(payload.get(key), dict):
                parameters = payload[key]
                break
        if parameters is None and isinstance(function.get("parameters"), dict):
            parameters = function["parameters"]

        return cls(
            name=str(name),
            description=str(description),
            parameters=parameters or {},
        )


def _text(value: Any) -> str:
    """Text form of a scalar payload field, empty for anything else"""
    if isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


class RegisteredTool(BaseModel):
    """A tool that exists in the ElevenLabs tool registry"""
    id: str
    name: str = ""
    description: str = ""
    parameters: Optional[Dict[str, Any]] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RegisteredTool":
        """
        Build from a registry entry

        Fields that are not scalars come back empty, so an entry with an
        unusable name is left out of the name index.
        """
        tool_config = payload.get("tool_config")
        if not isinstance(tool_config, dict):
            tool_config = {}
        return cls(
            id=_text(payload.get("id") or payload.get("tool_id")),
            name=_text(tool_config.get("name") or payload.get("name")),
            description=_text(tool_config.get("description") or payload.get("description")),
        )


class SyncResult(BaseModel):
    """Outcome of one tenant/user sync run"""
    model_config = ConfigDict(populate_by_name=True)

    tool_ids: List[str] = Field(default_factory=list, alias="toolIds")
    errors: List[str] = Field(default_factory=list)

    created: int = Field(default=0, exclude=True)
    reused: int = Field(default=0, exclude=True)
    skipped: int = Field(default=0, exclude=True)

    def to_response(self) -> Dict[str, Any]:
        """Wire shape: {"toolIds": [...], "errors": [...]}"""
        return self.model_dump(by_alias=True)


class TenantSyncSummary(BaseModel):
    """One tenant/user row of the all-tenant sync"""
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(alias="tenantId")
    user_id: str = Field(alias="userId")
    tool_ids: List[str] = Field(default_factory=list, alias="toolIds")
    errors: List[str] = Field(default_factory=list)


class SyncRequest(BaseModel):
    """Body of the manual sync endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(alias="tenantId", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)


class AgentToolsRequest(BaseModel):
    """Body of the agent tool refresh endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class AgentTools(BaseModel):
    """Tools attached to a tenant's voice agent"""
    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(alias="agentId")
    tool_ids: List[str] = Field(default_factory=list, alias="toolIds")
    tools: List[RegisteredTool] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
