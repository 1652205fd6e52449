"""
Composio Service
Reads tool catalogues from the Composio connector aggregation API
"""

import httpx
from typing import Optional, Dict, Any

from toolsync.core.config import settings
from toolsync.core.logging import get_logger
from toolsync.core.exceptions import ComposioServiceError

logger = get_logger(__name__)


class ComposioService:
    """Service for interacting with the Composio tools API"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key or settings.composio_api_key
        self.api_base = (api_base or settings.composio_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout

        self.headers = {
            "x-api-key": self.api_key or "",
            "Content-Type": "application/json"
        }

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    f"{self.api_base}{path}",
                    headers=self.headers,
                    params=params
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.warning(f"Composio API error {e.response.status_code} for {path}: {e.response.text}")
            raise ComposioServiceError(
                e.response.text or f"HTTP {e.response.status_code}",
                composio_status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Composio request failed for {path}: {e}")
            raise ComposioServiceError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ComposioServiceError(f"Invalid JSON response: {e}") from e

    async def list_tools(
        self,
        toolkit: Optional[str] = None,
        connection_id: Optional[str] = None,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Any:
        """
        List tools, optionally filtered by toolkit and scoped to an account

        Args:
            toolkit: Toolkit slug (e.g. CALENDLY)
            connection_id: Connected account to scope the listing to
            user_id: Composio user identifier (the tenant user's email)
            limit: Page size, omitted for an unpaginated request
            offset: Page offset, omitted for an unpaginated request

        Returns:
            The decoded response body; callers unwrap the tool list
        """
        params: Dict[str, Any] = {}
        if toolkit:
            params["toolkit_slug"] = toolkit
        if connection_id:
            params["connected_account_id"] = connection_id
        if user_id:
            params["user_id"] = user_id
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        logger.debug(f"Listing Composio tools with params: {params}")
        return await self._get("/tools", params)
