"""
Tool Fetcher
Retrieves every raw tool definition for one connected integration.

Composio's listing endpoints behave differently depending on how an account
was connected, so three strategies are tried in order, each only after the
previous one raised:

1. toolkit    - bulk listing filtered by toolkit, paginated
2. connection - one call scoped to the stored connected account
3. user       - toolkit listing keyed by the tenant user's email
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from toolsync.core.config import settings
from toolsync.core.exceptions import ComposioServiceError, ConnectionFetchError
from toolsync.core.logging import get_logger
from toolsync.models.tool import RawTool
from toolsync.services.composio_service import ComposioService

logger = get_logger(__name__)

UserKeyResolver = Callable[[], Awaitable[str]]


def unwrap_tools(data: Any) -> List[Dict[str, Any]]:
    """
    Extract the tool list from a listing response

    Accepts a bare list, an object exposing data/tools/items as a list, or
    failing that the first list-valued property. Non-dict items are dropped.
    """
    items: Any = None

    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        for key in ("data", "tools", "items"):
            if isinstance(data.get(key), list):
                items = data[key]
                break
        else:
            items = next(
                (value for value in data.values() if isinstance(value, list)),
                None
            )

    if not items:
        return []
    return [item for item in items if isinstance(item, dict)]


class ToolFetcher:
    """Fetches raw tools for an integration through the strategy chain"""

    def __init__(
        self,
        composio_service: ComposioService,
        page_size: Optional[int] = None,
        max_tools: Optional[int] = None
    ):
        self.composio = composio_service
        self.page_size = page_size or settings.tool_fetch_page_size
        self.max_tools = max_tools or settings.tool_fetch_max_tools

    def _cap(self, tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if len(tools) > self.max_tools:
            logger.warning(f"Tool listing exceeded {self.max_tools} tools, truncating")
            return tools[:self.max_tools]
        return tools

    async def _fetch_pages(self, **filters: Any) -> List[Dict[str, Any]]:
        """
        Walk offset pages until a short or empty page, or the safety cap

        A failure on the first page propagates; a failure on a later page
        keeps what was already accumulated.
        """
        tools: List[Dict[str, Any]] = []
        offset = 0

        while True:
            try:
                response = await self.composio.list_tools(
                    limit=self.page_size,
                    offset=offset,
                    **filters
                )
            except ComposioServiceError as e:
                if offset == 0:
                    raise
                logger.warning(
                    f"Page at offset {offset} failed, keeping {len(tools)} tool(s): {e.message}"
                )
                break

            page = unwrap_tools(response)
            tools.extend(page)
            logger.debug(f"Fetched {len(page)} tool(s) at offset {offset} (total: {len(tools)})")

            if len(tools) >= self.max_tools:
                break
            if len(page) < self.page_size:
                break
            offset += len(page)

        return self._cap(tools)

    async def _fetch_listing(self, **filters: Any) -> List[Dict[str, Any]]:
        """Paginated listing, retried once without pagination if the first page fails"""
        try:
            return await self._fetch_pages(**filters)
        except ComposioServiceError as e:
            logger.warning(f"Paginated listing failed, retrying without pagination: {e.message}")
            response = await self.composio.list_tools(**filters)
            return self._cap(unwrap_tools(response))

    async def _fetch_by_connection(self, toolkit: str, connection_id: str) -> List[Dict[str, Any]]:
        response = await self.composio.list_tools(toolkit=toolkit, connection_id=connection_id)
        return self._cap(unwrap_tools(response))

    async def fetch_all_tools(
        self,
        toolkit: str,
        connection_id: str,
        resolve_user_key: UserKeyResolver,
        integration_type: Optional[str] = None
    ) -> List[RawTool]:
        """
        Fetch every tool available to a connected integration

        Args:
            toolkit: Composio toolkit slug
            connection_id: Stored connected account id
            resolve_user_key: Awaitable returning the Composio user key,
                only called when the user strategy is reached
            integration_type: Integration type for messages, defaults to toolkit

        Returns:
            Raw tools, possibly empty

        Raises:
            ConnectionFetchError: when every strategy failed
        """
        integration_type = integration_type or toolkit.lower()

        async def by_user() -> List[Dict[str, Any]]:
            user_key = await resolve_user_key()
            return await self._fetch_listing(toolkit=toolkit, user_id=user_key)

        strategies = (
            ("toolkit", lambda: self._fetch_listing(toolkit=toolkit)),
            ("connection", lambda: self._fetch_by_connection(toolkit, connection_id)),
            ("user", by_user),
        )

        last_error = "no strategy attempted"
        for strategy, fetch in strategies:
            try:
                payloads = await fetch()
            except ComposioServiceError as e:
                last_error = e.message
                logger.warning(f"Strategy '{strategy}' failed for {integration_type}: {e.message}")
                continue

            logger.info(
                f"Fetched {len(payloads)} tool(s) for {integration_type} "
                f"via '{strategy}' strategy"
            )
            return [RawTool.from_payload(payload) for payload in payloads]

        raise ConnectionFetchError(integration_type, toolkit, last_error)
