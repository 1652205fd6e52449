"""
Supabase Service
Reads tenant integrations, users and agents through the Supabase REST API
"""

import httpx
from typing import Optional, Dict, Any, List

from toolsync.core.config import settings
from toolsync.core.logging import get_logger
from toolsync.core.exceptions import SupabaseServiceError
from toolsync.models.integration import IntegrationConnection

logger = get_logger(__name__)


class SupabaseService:
    """
    Service-role access to the tenant tables

    Tables used:
        tenant_integrations: connection store
        tenant_users: user directory (email lookup)
        ai_agents: voice agent rows and their metadata
    """

    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        base_url = (url or settings.supabase_url or "").rstrip("/")
        self.rest_url = f"{base_url}/rest/v1"
        self.timeout = timeout or settings.http_timeout

        key = service_role_key or settings.supabase_service_role_key or ""
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json"
        }

    async def _request(
        self,
        method: str,
        table: str,
        params: Dict[str, Any],
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    f"{self.rest_url}/{table}",
                    headers={**self.headers, **(headers or {})},
                    params=params,
                    json=json
                )
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Supabase error {e.response.status_code} on {table}: {e.response.text}")
            raise SupabaseServiceError(
                e.response.text or f"HTTP {e.response.status_code}",
                supabase_status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase request failed on {table}: {e}")
            raise SupabaseServiceError(str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.error(f"Supabase returned a non-JSON body on {table}: {e}")
            raise SupabaseServiceError(f"Invalid JSON response: {e}") from e

    async def _select(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """GET rows from a table, dropping anything that is not a row object"""
        rows = await self._request("GET", table, params)
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise SupabaseServiceError(f"Expected a list of rows from {table}")
        return [row for row in rows if isinstance(row, dict)]

    async def get_connected_integrations(
        self,
        tenant_id: str,
        user_id: str
    ) -> List[IntegrationConnection]:
        """Connected integrations with a connection id for one tenant user"""
        rows = await self._select("tenant_integrations", {
            "select": "*",
            "tenant_id": f"eq.{tenant_id}",
            "user_id": f"eq.{user_id}",
            "is_connected": "eq.true",
            "connection_id": "not.is.null",
        })
        return [IntegrationConnection.from_row(row) for row in rows]

    async def list_connected_integrations(self) -> List[IntegrationConnection]:
        """Connected integrations across every tenant"""
        rows = await self._select("tenant_integrations", {
            "select": "tenant_id,user_id,integration_type,connection_id,is_connected",
            "is_connected": "eq.true",
            "connection_id": "not.is.null",
        })
        return [IntegrationConnection.from_row(row) for row in rows]

    async def get_user_email(self, tenant_id: str, user_id: str) -> Optional[str]:
        """Email of a tenant user, None when the user has none on file"""
        rows = await self._select("tenant_users", {
            "select": "email",
            "tenant_id": f"eq.{tenant_id}",
            "user_id": f"eq.{user_id}",
            "limit": 1,
        })
        if rows:
            return rows[0].get("email") or None
        return None

    async def get_tenant_agent(self, tenant_id: str) -> Optional[Dict[str, Any]]:
        """First agent of a tenant that exists on ElevenLabs"""
        rows = await self._select("ai_agents", {
            "select": "id,elevenlabs_agent_id,metadata",
            "tenant_id": f"eq.{tenant_id}",
            "elevenlabs_agent_id": "not.is.null",
            "limit": 1,
        })
        if rows:
            return rows[0]
        return None

    async def update_agent_metadata(self, agent_id: str, metadata: Dict[str, Any]) -> None:
        """Overwrite the metadata column of an agent row"""
        await self._request(
            "PATCH",
            "ai_agents",
            {"id": f"eq.{agent_id}"},
            json={"metadata": metadata},
            headers={"Prefer": "return=minimal"}
        )
