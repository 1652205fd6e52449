"""
Tool Sync Service
Orchestrates Supabase, Composio and ElevenLabs to keep a tenant's voice agent
tools in step with the integrations the tenant has connected
"""

from typing import Optional, Dict, List, Tuple

from toolsync.core.config import Settings, settings
from toolsync.core.exceptions import (
    AgentNotFoundError,
    ElevenLabsServiceError,
    ServiceError,
    SupabaseServiceError,
    ToolRegistrationError,
)
from toolsync.core.logging import get_logger
from toolsync.models.integration import IntegrationConnection
from toolsync.models.tool import AgentTools, RegisteredTool, SyncResult, TenantSyncSummary
from toolsync.services.composio_service import ComposioService
from toolsync.services.elevenlabs_service import ElevenLabsService
from toolsync.services.naming import resolve_toolkit
from toolsync.services.supabase_service import SupabaseService
from toolsync.services.tool_fetcher import ToolFetcher, UserKeyResolver
from toolsync.services.tool_registrar import ToolRegistrar
from toolsync.services.whitelist import has_allow_list, is_allowed

logger = get_logger(__name__)

AGENT_TOOL_IDS_KEY = "composio_tool_ids"


def error_message(error: Exception) -> str:
    """Message of a service exception, or its text for anything else"""
    return getattr(error, "message", None) or str(error) or type(error).__name__


class ToolSyncService:
    """
    Runs tool synchronization for tenant users

    Integrations and tools are processed one at a time. Failures are
    collected into the result instead of aborting the run.
    """

    def __init__(
        self,
        supabase: SupabaseService,
        composio: ComposioService,
        elevenlabs: ElevenLabsService,
        app_settings: Optional[Settings] = None
    ):
        app_settings = app_settings or settings

        self.supabase = supabase
        self.composio = composio
        self.elevenlabs = elevenlabs
        self.webhook_url = app_settings.webhook_url
        self.fetcher = ToolFetcher(
            composio,
            page_size=app_settings.tool_fetch_page_size,
            max_tools=app_settings.tool_fetch_max_tools
        )

    def _user_key_resolver(self, tenant_id: str, user_id: str) -> UserKeyResolver:
        """Lazily look up the Composio user key once per run"""
        cache: Dict[str, str] = {}

        async def resolve() -> str:
            if "key" not in cache:
                try:
                    email = await self.supabase.get_user_email(tenant_id, user_id)
                except SupabaseServiceError as e:
                    logger.warning(f"Could not look up email for user {user_id}: {e.message}")
                    email = None
                cache["key"] = email or user_id
                logger.info(f"Using Composio user key: {cache['key']}")
            return cache["key"]

        return resolve

    async def sync_tools(self, tenant_id: str, user_id: str) -> SyncResult:
        """
        Sync tools for every connected integration of a tenant user

        Args:
            tenant_id: Tenant ID
            user_id: User ID within the tenant

        Returns:
            SyncResult with the registered tool ids and any errors
        """
        result = SyncResult()
        logger.info(f"Syncing tools for tenant {tenant_id}, user {user_id}")

        try:
            integrations = await self.supabase.get_connected_integrations(tenant_id, user_id)
        except Exception as e:
            error = f"Failed to fetch integrations: {error_message(e)}"
            logger.error(error)
            result.errors.append(error)
            return result

        syncable = []
        for integration in integrations:
            if integration.is_syncable:
                syncable.append(integration)
            else:
                logger.info(f"Skipping integration {integration.integration_type} - no connection_id")

        if not syncable:
            logger.info(f"No connected integrations for tenant {tenant_id}, user {user_id}")
            return result

        registrar = ToolRegistrar(self.elevenlabs, self.webhook_url)
        try:
            await registrar.load_registry()
        except Exception as e:
            error = f"Failed to list existing tools: {error_message(e)}"
            logger.error(error)
            result.errors.append(error)
            return result

        resolve_user_key = self._user_key_resolver(tenant_id, user_id)

        for integration in syncable:
            try:
                await self._sync_integration(integration, registrar, resolve_user_key, result)
            except Exception as e:
                error = f"Failed to sync tools for {integration.integration_type}: {error_message(e)}"
                logger.error(error)
                result.errors.append(error)

        result.created = registrar.created
        result.reused = registrar.reused
        result.skipped = registrar.skipped

        logger.info(
            f"Sync finished for tenant {tenant_id}: {len(result.tool_ids)} tool(s) "
            f"({result.created} created, {result.reused} reused, {result.skipped} skipped), "
            f"{len(result.errors)} error(s)"
        )
        return result

    async def _sync_integration(
        self,
        integration: IntegrationConnection,
        registrar: ToolRegistrar,
        resolve_user_key: UserKeyResolver,
        result: SyncResult
    ) -> None:
        integration_type = integration.integration_type.lower()
        toolkit = resolve_toolkit(integration_type)
        logger.info(
            f"Fetching tools for integration: {integration.integration_type}, "
            f"connection: {integration.connection_id}, toolkit: {toolkit}"
        )

        tools = await self.fetcher.fetch_all_tools(
            toolkit,
            integration.connection_id,
            resolve_user_key,
            integration_type=integration.integration_type
        )

        if not tools:
            logger.warning(f"No tools found for integration {integration.integration_type}")
            result.errors.append(f"No tools found for {integration.integration_type}")
            return

        if not has_allow_list(integration_type):
            logger.warning(f"No whitelist found for integration: {integration.integration_type}, allowing all tools")

        allowed = [tool for tool in tools if is_allowed(tool.name, integration_type)]
        logger.info(f"Filtered to {len(allowed)} allowed tool(s) (from {len(tools)} total)")

        for tool in allowed:
            try:
                tool_id = await registrar.register_tool(tool, integration.connection_id)
            except ToolRegistrationError as e:
                result.errors.append(e.message)
                continue

            if tool_id:
                result.tool_ids.append(tool_id)

    async def sync_all_tenants(self) -> List[TenantSyncSummary]:
        """
        Sync every tenant user that has at least one connected integration

        Raises:
            ServiceError: when the connected integrations cannot be listed
        """
        integrations = await self.supabase.list_connected_integrations()

        users: Dict[Tuple[str, str], None] = {}
        for integration in integrations:
            users.setdefault((integration.tenant_id, integration.user_id), None)

        logger.info(f"Syncing tools for {len(users)} tenant user(s)")

        summaries = []
        for tenant_id, user_id in users:
            result = await self.sync_tools(tenant_id, user_id)
            summaries.append(TenantSyncSummary(
                tenant_id=tenant_id,
                user_id=user_id,
                tool_ids=result.tool_ids,
                errors=result.errors
            ))
        return summaries

    async def sync_agent_tools(self, tenant_id: str, user_id: str) -> AgentTools:
        """
        Sync tools and attach them to the tenant's ElevenLabs agent

        Raises:
            AgentNotFoundError: when the tenant has no ElevenLabs agent
        """
        agent = await self.supabase.get_tenant_agent(tenant_id)
        if not agent or not agent.get("elevenlabs_agent_id"):
            raise AgentNotFoundError(tenant_id)

        agent_id = agent["elevenlabs_agent_id"]
        result = await self.sync_tools(tenant_id, user_id)
        errors = list(result.errors)

        if result.tool_ids:
            try:
                await self.elevenlabs.update_agent_tools(agent_id, result.tool_ids)

                metadata = dict(agent.get("metadata") or {})
                metadata[AGENT_TOOL_IDS_KEY] = result.tool_ids
                await self.supabase.update_agent_metadata(agent["id"], metadata)
            except ServiceError as e:
                logger.error(f"Failed to attach tools to agent {agent_id}: {e.message}")
                errors.append(f"Failed to attach tools to agent: {e.message}")

        return AgentTools(agent_id=agent_id, tool_ids=result.tool_ids, errors=errors)

    async def get_agent_tools(self, tenant_id: str) -> AgentTools:
        """
        Describe the tools stored on the tenant's agent

        Raises:
            AgentNotFoundError: when the tenant has no ElevenLabs agent
        """
        agent = await self.supabase.get_tenant_agent(tenant_id)
        if not agent or not agent.get("elevenlabs_agent_id"):
            raise AgentNotFoundError(tenant_id)

        metadata = agent.get("metadata") or {}
        tool_ids = [str(tool_id) for tool_id in metadata.get(AGENT_TOOL_IDS_KEY) or []]

        tools: List[RegisteredTool] = []
        errors: List[str] = []
        for tool_id in tool_ids:
            try:
                tool = await self.elevenlabs.get_tool(tool_id)
            except ElevenLabsServiceError as e:
                errors.append(f"Failed to load tool {tool_id}: {e.message}")
                tool = None
            tools.append(tool or RegisteredTool(id=tool_id, name="Unknown tool"))

        return AgentTools(
            agent_id=agent["elevenlabs_agent_id"],
            tool_ids=tool_ids,
            tools=tools,
            errors=errors
        )


# Singleton instance
_tool_sync_service: Optional[ToolSyncService] = None


def get_tool_sync_service() -> ToolSyncService:
    """
    Get the ToolSyncService singleton instance

    Raises:
        ConfigurationError: when a required credential is missing
    """
    global _tool_sync_service
    if _tool_sync_service is None:
        settings.require_credentials()
        _tool_sync_service = ToolSyncService(
            supabase=SupabaseService(),
            composio=ComposioService(),
            elevenlabs=ElevenLabsService()
        )
    return _tool_sync_service
