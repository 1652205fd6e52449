"""
Tests for the tool sync orchestrator
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from conftest import html_response, make_tool_payloads, mock_async_client, mock_response
from toolsync.core.exceptions import (
    AgentNotFoundError,
    ComposioServiceError,
    ConfigurationError,
    ElevenLabsServiceError,
    SupabaseServiceError,
)
from toolsync.models.integration import IntegrationConnection
from toolsync.models.tool import RegisteredTool, SyncResult


def connection(integration_type="calendly", connection_id="conn-1", tenant_id="tenant-1", user_id="user-1"):
    return IntegrationConnection(
        tenant_id=tenant_id,
        user_id=user_id,
        integration_type=integration_type,
        connection_id=connection_id,
        is_connected=True,
    )


def tool(slug):
    return {"slug": slug, "description": "", "input_parameters": {"type": "object", "properties": {}}}


class TestSyncTools:
    """Tests for a single tenant user sync"""

    @pytest.mark.asyncio
    async def test_filters_creates_and_reuses(self, sync_service, mock_supabase, mock_composio, mock_elevenlabs):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_composio.list_tools.return_value = [
            tool("CALENDLY_CANCEL_EVENT"),
            tool("CALENDLY_DELETE_WEBHOOK_SUBSCRIPTION"),
            tool("CALENDLY_GET_USER"),
        ]
        mock_elevenlabs.list_tools.return_value = [RegisteredTool(id="existing-1", name="Get_user")]
        mock_elevenlabs.create_tool.return_value = "new-1"

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.tool_ids == ["new-1", "existing-1"]
        assert result.errors == []
        assert (result.created, result.reused, result.skipped) == (1, 1, 0)
        mock_elevenlabs.create_tool.assert_awaited_once()
        payload = mock_elevenlabs.create_tool.await_args.args[0]
        assert payload["tool_config"]["api_schema"]["url"] == "https://app.example.com/api/composio/execute"

    @pytest.mark.asyncio
    async def test_no_integrations(self, sync_service, mock_elevenlabs):
        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.to_response() == {"toolIds": [], "errors": []}
        mock_elevenlabs.list_tools.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_integration_without_connection_id_skipped(self, sync_service, mock_supabase, mock_composio):
        mock_supabase.get_connected_integrations.return_value = [connection(connection_id=None)]

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == []
        mock_composio.list_tools.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_store_failure(self, sync_service, mock_supabase):
        mock_supabase.get_connected_integrations.side_effect = SupabaseServiceError("connection refused")

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == ["Failed to fetch integrations: Supabase error: connection refused"]

    @pytest.mark.asyncio
    async def test_registry_failure_stops_before_creating(
        self, sync_service, mock_supabase, mock_composio, mock_elevenlabs
    ):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_elevenlabs.list_tools.side_effect = ElevenLabsServiceError("unauthorized", elevenlabs_status=401)

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == ["Failed to list existing tools: ElevenLabs error: unauthorized"]
        mock_composio.list_tools.assert_not_awaited()
        mock_elevenlabs.create_tool.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_tools_found(self, sync_service, mock_supabase, mock_composio):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_composio.list_tools.return_value = {"items": []}

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == ["No tools found for calendly"]

    @pytest.mark.asyncio
    async def test_fetch_exhausted_recorded_and_next_integration_runs(
        self, sync_service, mock_supabase, mock_composio, mock_elevenlabs
    ):
        mock_supabase.get_connected_integrations.return_value = [
            connection("calendly", "conn-1"),
            connection("hubspot", "conn-2"),
        ]

        async def list_tools(toolkit=None, **kwargs):
            if toolkit == "CALENDLY":
                raise ComposioServiceError("forbidden")
            return [tool("HUBSPOT_CREATE_CONTACT")]

        mock_composio.list_tools.side_effect = list_tools
        mock_supabase.get_user_email.return_value = None

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert len(result.errors) == 1
        assert result.errors[0].startswith(
            "Failed to sync tools for calendly: All methods failed to fetch tools for calendly"
        )
        assert result.tool_ids == ["new-tool-id"]
        user_call = [
            call for call in mock_composio.list_tools.call_args_list
            if call.kwargs.get("user_id")
        ]
        assert user_call[0].kwargs["user_id"] == "user-1"

    @pytest.mark.asyncio
    async def test_user_email_looked_up_once(self, sync_service, mock_supabase, mock_composio):
        mock_supabase.get_connected_integrations.return_value = [
            connection("calendly", "conn-1"),
            connection("cal", "conn-2"),
        ]
        mock_composio.list_tools.side_effect = ComposioServiceError("forbidden")

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert len(result.errors) == 2
        mock_supabase.get_user_email.assert_awaited_once_with("tenant-1", "user-1")

    @pytest.mark.asyncio
    async def test_tool_creation_failure_recorded(
        self, sync_service, mock_supabase, mock_composio, mock_elevenlabs
    ):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_composio.list_tools.return_value = [tool("CALENDLY_CANCEL_EVENT"), tool("CALENDLY_LIST_EVENTS")]
        mock_elevenlabs.create_tool.side_effect = [ElevenLabsServiceError("rejected"), "new-2"]

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.tool_ids == ["new-2"]
        assert result.errors == ["Failed to create tool CALENDLY_CANCEL_EVENT: ElevenLabs error: rejected"]

    @pytest.mark.asyncio
    async def test_unexpected_errors_before_the_loop_are_recorded(
        self, sync_service, mock_supabase, mock_elevenlabs
    ):
        mock_supabase.get_connected_integrations.side_effect = ValueError("bad row")

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == ["Failed to fetch integrations: bad row"]

        mock_supabase.get_connected_integrations.side_effect = None
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_elevenlabs.list_tools.side_effect = ValueError("bad registry entry")

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == ["Failed to list existing tools: bad registry entry"]

    @pytest.mark.asyncio
    async def test_user_strategy_recovers_without_error(
        self, sync_service, mock_supabase, mock_composio, mock_elevenlabs
    ):
        mock_supabase.get_connected_integrations.return_value = [connection("zoho")]
        mock_composio.list_tools.side_effect = [
            ComposioServiceError("paginated"),
            ComposioServiceError("unpaginated"),
            ComposioServiceError("connection"),
            make_tool_payloads(37, prefix="ZOHO_TOOL"),
        ]
        mock_elevenlabs.create_tool.side_effect = [f"new-{index}" for index in range(37)]

        result = await sync_service.sync_tools("tenant-1", "user-1")

        assert result.errors == []
        assert len(result.tool_ids) == 37
        assert result.created == 37
        assert mock_composio.list_tools.call_args_list[-1].kwargs["user_id"] == "owner@example.com"

    @pytest.mark.asyncio
    async def test_unrestricted_integration_warns_once(
        self, sync_service, mock_supabase, mock_composio
    ):
        mock_supabase.get_connected_integrations.return_value = [connection("zoho")]
        mock_composio.list_tools.return_value = make_tool_payloads(5, prefix="ZOHO_TOOL")

        with patch("toolsync.services.tool_sync.logger") as mock_logger:
            result = await sync_service.sync_tools("tenant-1", "user-1")

        assert len(result.tool_ids) == 5
        warnings = [
            call.args[0] for call in mock_logger.warning.call_args_list
            if "No whitelist found" in call.args[0]
        ]
        assert warnings == ["No whitelist found for integration: zoho, allowing all tools"]


class TestSyncToolsWithMalformedResponses:
    """Sync runs against real clients whose 2xx replies are not JSON"""

    def make_service(self, mock_supabase, mock_composio):
        from toolsync.services.elevenlabs_service import ElevenLabsService
        from toolsync.services.tool_sync import ToolSyncService

        return ToolSyncService(
            supabase=mock_supabase,
            composio=mock_composio,
            elevenlabs=ElevenLabsService(api_key="test-key")
        )

    @pytest.mark.asyncio
    @patch("toolsync.services.elevenlabs_service.httpx.AsyncClient")
    async def test_registry_html_page(self, mock_client, mock_supabase, mock_composio):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_async_client(mock_client, "request", html_response())

        result = await self.make_service(mock_supabase, mock_composio).sync_tools("tenant-1", "user-1")

        assert len(result.errors) == 1
        assert result.errors[0].startswith(
            "Failed to list existing tools: ElevenLabs error: Invalid JSON response"
        )
        mock_composio.list_tools.assert_not_awaited()

    @pytest.mark.asyncio
    @patch("toolsync.services.elevenlabs_service.httpx.AsyncClient")
    async def test_create_html_page_recorded_per_tool(self, mock_client, mock_supabase, mock_composio):
        mock_supabase.get_connected_integrations.return_value = [connection()]
        mock_composio.list_tools.return_value = [tool("CALENDLY_CANCEL_EVENT"), tool("CALENDLY_LIST_EVENTS")]
        client = mock_async_client(mock_client, "request", side_effect=[
            mock_response({"tools": []}),
            html_response(),
            mock_response({"id": "new-2"}),
        ])

        result = await self.make_service(mock_supabase, mock_composio).sync_tools("tenant-1", "user-1")

        assert result.tool_ids == ["new-2"]
        assert len(result.errors) == 1
        assert result.errors[0].startswith(
            "Failed to create tool CALENDLY_CANCEL_EVENT: ElevenLabs error: Invalid JSON response"
        )
        assert client.request.await_count == 3

    @pytest.mark.asyncio
    @patch("toolsync.services.supabase_service.httpx.AsyncClient")
    async def test_connection_store_html_page(self, mock_client, mock_composio):
        from toolsync.services.supabase_service import SupabaseService
        from toolsync.services.tool_sync import ToolSyncService

        mock_async_client(mock_client, "request", html_response())
        service = ToolSyncService(
            supabase=SupabaseService(url="https://project.supabase.test", service_role_key="service-key"),
            composio=mock_composio,
            elevenlabs=MagicMock()
        )

        result = await service.sync_tools("tenant-1", "user-1")

        assert result.tool_ids == []
        assert len(result.errors) == 1
        assert result.errors[0].startswith(
            "Failed to fetch integrations: Supabase error: Invalid JSON response"
        )


class TestSyncAllTenants:
    """Tests for the all-tenant sync"""

    @pytest.mark.asyncio
    async def test_groups_by_tenant_user(self, sync_service, mock_supabase):
        mock_supabase.list_connected_integrations.return_value = [
            connection("calendly", tenant_id="t1", user_id="u1"),
            connection("hubspot", tenant_id="t1", user_id="u1"),
            connection("calendly", tenant_id="t2", user_id="u2"),
        ]

        with patch.object(
            sync_service,
            "sync_tools",
            AsyncMock(return_value=SyncResult(tool_ids=["x"], errors=["e"]))
        ) as sync_tools:
            summaries = await sync_service.sync_all_tenants()

        assert [(s.tenant_id, s.user_id) for s in summaries] == [("t1", "u1"), ("t2", "u2")]
        assert [call.args for call in sync_tools.await_args_list] == [("t1", "u1"), ("t2", "u2")]
        assert summaries[0].model_dump(by_alias=True) == {
            "tenantId": "t1",
            "userId": "u1",
            "toolIds": ["x"],
            "errors": ["e"],
        }


class TestAgentTools:
    """Tests for agent tool attachment"""

    AGENT = {"id": "row-1", "elevenlabs_agent_id": "agent-1", "metadata": {"voice": "Rachel"}}

    @pytest.mark.asyncio
    async def test_sync_attaches_and_persists(self, sync_service, mock_supabase, mock_elevenlabs):
        mock_supabase.get_tenant_agent.return_value = dict(self.AGENT)

        with patch.object(sync_service, "sync_tools", AsyncMock(return_value=SyncResult(tool_ids=["a", "b"]))):
            result = await sync_service.sync_agent_tools("tenant-1", "user-1")

        assert result.agent_id == "agent-1"
        assert result.tool_ids == ["a", "b"]
        mock_elevenlabs.update_agent_tools.assert_awaited_once_with("agent-1", ["a", "b"])
        mock_supabase.update_agent_metadata.assert_awaited_once_with(
            "row-1",
            {"voice": "Rachel", "composio_tool_ids": ["a", "b"]}
        )

    @pytest.mark.asyncio
    async def test_attach_failure_keeps_sync_result(self, sync_service, mock_supabase, mock_elevenlabs):
        mock_supabase.get_tenant_agent.return_value = dict(self.AGENT)
        mock_elevenlabs.update_agent_tools.side_effect = ElevenLabsServiceError("agent locked")

        with patch.object(sync_service, "sync_tools", AsyncMock(return_value=SyncResult(tool_ids=["a"]))):
            result = await sync_service.sync_agent_tools("tenant-1", "user-1")

        assert result.tool_ids == ["a"]
        assert result.errors == ["Failed to attach tools to agent: ElevenLabs error: agent locked"]
        mock_supabase.update_agent_metadata.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_nothing_attached_without_tools(self, sync_service, mock_supabase, mock_elevenlabs):
        mock_supabase.get_tenant_agent.return_value = dict(self.AGENT)

        with patch.object(sync_service, "sync_tools", AsyncMock(return_value=SyncResult())):
            await sync_service.sync_agent_tools("tenant-1", "user-1")

        mock_elevenlabs.update_agent_tools.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_agent(self, sync_service):
        with pytest.raises(AgentNotFoundError):
            await sync_service.sync_agent_tools("tenant-1", "user-1")

        with pytest.raises(AgentNotFoundError):
            await sync_service.get_agent_tools("tenant-1")

    @pytest.mark.asyncio
    async def test_get_agent_tools_with_unknown_id(self, sync_service, mock_supabase, mock_elevenlabs):
        mock_supabase.get_tenant_agent.return_value = {
            "id": "row-1",
            "elevenlabs_agent_id": "agent-1",
            "metadata": {"composio_tool_ids": ["a", "gone"]},
        }
        mock_elevenlabs.get_tool.side_effect = [RegisteredTool(id="a", name="Get_user"), None]

        result = await sync_service.get_agent_tools("tenant-1")

        assert result.tool_ids == ["a", "gone"]
        assert [t.name for t in result.tools] == ["Get_user", "Unknown tool"]
        assert result.errors == []


class TestServiceFactory:
    """Tests for get_tool_sync_service"""

    def test_missing_credentials_raise(self):
        from toolsync.services import tool_sync

        with patch.object(tool_sync, "_tool_sync_service", None), \
                patch.object(tool_sync, "settings") as mock_settings:
            mock_settings.require_credentials.side_effect = ConfigurationError(["COMPOSIO_API_KEY"])

            with pytest.raises(ConfigurationError) as exc_info:
                tool_sync.get_tool_sync_service()

        assert exc_info.value.details == {"missing": ["COMPOSIO_API_KEY"]}
