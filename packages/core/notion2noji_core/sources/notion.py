"""Notion content source."""

from typing import Any

import httpx

from notion2noji_core.schemas.blocks import Block, BlockKind
from notion2noji_core.sources.base import BaseContentSource
from notion2noji_core.utils.logging import get_logger, log_exceptions
from notion2noji_core.utils.retry import RateLimitError, format_exception, with_retry

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_TIMEOUT = 30.0
PAGE_SIZE = 100

# Children of these blocks are separate documents, not lesson content
_SKIP_CHILDREN = frozenset({BlockKind.CHILD_PAGE.value, "child_database"})


class NotionContentSource(BaseContentSource):
    """Fetch blocks from a Notion page through the REST API."""

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        notion_version: str = DEFAULT_NOTION_VERSION,
        fetch_children: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Notion source.

        Args:
            token: Notion integration token
            api_url: API base URL
            notion_version: Value of the Notion-Version header
            fetch_children: Also fetch nested children of container blocks
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for transient failures
            transport: Optional httpx transport (tests)
        """
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.notion_version = notion_version
        self.fetch_children = fetch_children
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Notion-Version": self.notion_version,
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _list_children_page(
        self, block_id: str, cursor: str | None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page_size": PAGE_SIZE}
        if cursor:
            params["start_cursor"] = cursor

        async def _make_request() -> dict[str, Any]:
            response = await self.client.get(
                f"/blocks/{block_id}/children", params=params
            )
            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                raise RateLimitError(
                    "Notion rate limit exceeded",
                    retry_after=float(retry_after) if retry_after else None,
                )
            response.raise_for_status()
            return response.json()

        return await with_retry(
            _make_request,
            max_attempts=self.max_retries,
            operation_name="notion_list_children",
        )

    async def _fetch_raw_children(self, block_id: str) -> list[dict[str, Any]]:
        """Fetch all child blocks of one block, following pagination."""
        results: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            page = await self._list_children_page(block_id, cursor)
            results.extend(page.get("results", []))
            logger.debug(
                f"Fetched {len(page.get('results', []))} blocks "
                f"(total: {len(results)}) under {block_id}"
            )
            cursor = page.get("next_cursor")
            if not page.get("has_more") or not cursor:
                break

        if self.fetch_children:
            for raw in results:
                if raw.get("has_children") and raw.get("type") not in _SKIP_CHILDREN:
                    await self._attach_children(raw)

        return results

    async def _attach_children(self, raw: dict[str, Any]) -> None:
        """Fetch nested children of one block.

        A failure is recorded on the block instead of raised, so only the
        lesson containing it fails when its text is converted.
        """
        try:
            raw["children"] = await self._fetch_raw_children(raw["id"])
        except (httpx.HTTPError, RateLimitError) as e:
            message = format_exception(e)
            logger.error(f"Could not fetch children of {raw['id']}: {message}")
            raw["children"] = []
            raw["children_error"] = message

    @log_exceptions(logger)
    async def fetch_all_blocks(self, root_id: str) -> list[Block]:
        logger.info(f"Fetching all blocks from page: {root_id}")
        raw_blocks = await self._fetch_raw_children(root_id)
        blocks = [Block.from_notion(raw) for raw in raw_blocks]
        logger.info(f"Fetched all {len(blocks)} blocks from page")
        return blocks
