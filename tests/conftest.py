"""
Pytest configuration and fixtures
"""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock

# Set test environment variables before importing toolsync modules
os.environ.setdefault("COMPOSIO_API_KEY", "test-composio-key")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-elevenlabs-key")
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SITE_URL", "https://app.example.com")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")

import httpx
from fastapi.testclient import TestClient


def make_tool_payloads(count, prefix="CALENDLY_TOOL"):
    """Composio-shaped tool payloads"""
    return [
        {
            "slug": f"{prefix}_{index}",
            "description": f"Tool {index}",
            "input_parameters": {"type": "object", "properties": {}},
        }
        for index in range(count)
    ]


def mock_async_client(mock_client, method, response=None, side_effect=None):
    """Wire a patched httpx.AsyncClient to return response from method"""
    mock_client_instance = MagicMock()
    mock_client_instance.__aenter__ = AsyncMock(return_value=mock_client_instance)
    mock_client_instance.__aexit__ = AsyncMock(return_value=False)
    setattr(mock_client_instance, method, AsyncMock(return_value=response, side_effect=side_effect))
    mock_client.return_value = mock_client_instance
    return mock_client_instance


def mock_response(data, content=b"[]"):
    """2xx response decoding to data"""
    response = MagicMock()
    response.json.return_value = data
    response.content = content
    response.raise_for_status = MagicMock()
    return response


def html_response(status_code=200):
    """Response carrying an HTML page instead of JSON, as a gateway would"""
    request = httpx.Request("GET", "https://api.test")
    return httpx.Response(status_code, text="<html>gateway</html>", request=request)


@pytest.fixture
def mock_supabase():
    """Fixture for mocked Supabase service"""
    service = MagicMock()
    service.get_connected_integrations = AsyncMock(return_value=[])
    service.list_connected_integrations = AsyncMock(return_value=[])
    service.get_user_email = AsyncMock(return_value="owner@example.com")
    service.get_tenant_agent = AsyncMock(return_value=None)
    service.update_agent_metadata = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_composio():
    """Fixture for mocked Composio service"""
    service = MagicMock()
    service.list_tools = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_elevenlabs():
    """Fixture for mocked ElevenLabs service"""
    service = MagicMock()
    service.list_tools = AsyncMock(return_value=[])
    service.get_tool = AsyncMock(return_value=None)
    service.create_tool = AsyncMock(return_value="new-tool-id")
    service.update_agent_tools = AsyncMock(return_value=None)
    return service


@pytest.fixture
def sync_service(mock_supabase, mock_composio, mock_elevenlabs):
    """ToolSyncService wired to mocked collaborators"""
    from toolsync.services.tool_sync import ToolSyncService
    return ToolSyncService(
        supabase=mock_supabase,
        composio=mock_composio,
        elevenlabs=mock_elevenlabs
    )


@pytest.fixture
def mock_sync_service():
    """Fixture for a mocked ToolSyncService used by the API routes"""
    service = MagicMock()
    service.sync_tools = AsyncMock()
    service.sync_all_tenants = AsyncMock(return_value=[])
    service.sync_agent_tools = AsyncMock()
    service.get_agent_tools = AsyncMock()
    return service


@pytest.fixture
def test_client(mock_sync_service):
    """Fixture for test client"""
    from toolsync.main import app
    from toolsync.api.routes import tools

    app.dependency_overrides[tools.get_service] = lambda: mock_sync_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_sync_request():
    """Sample sync request body"""
    return {"tenantId": "tenant-1", "userId": "user-1"}
