"""Noji flashcard service client."""

from typing import Any

import httpx

from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.schemas.cards import CardDispatchError, CardDraft, DispatchResult
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import RateLimitError, format_exception, with_retry

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api-de.noji.io"
DEFAULT_TIMEOUT = 30.0
NOTE_TEMPLATE_ID = "front_to_back"


def build_note_payload(card: CardDraft, deck_id: int) -> dict[str, Any]:
    """Build the note body for one card."""
    return {
        "note": {
            "template_id": NOTE_TEMPLATE_ID,
            "fields": {
                "front_side": card.front,
                "back_side": card.back,
            },
            "deck_id": deck_id,
            "field_attachments_map": {},
            "reverse": card.reverse,
        }
    }


class NojiCardSink(BaseCardSink):
    """Send cards to a Noji deck, one note per card."""

    def __init__(
        self,
        bearer_token: str,
        deck_id: str | int,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Noji client.

        Args:
            bearer_token: Noji API bearer token
            deck_id: Target deck ID
            api_url: API base URL
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for transient failures
            transport: Optional httpx transport (tests)
        """
        self.bearer_token = bearer_token
        self.deck_id = int(deck_id)
        self.api_url = api_url.rstrip("/")
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
                    "Authorization": f"Bearer {self.bearer_token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def create_card(self, card: CardDraft) -> dict[str, Any]:
        """Create a single note in the deck."""

        async def _make_request() -> dict[str, Any]:
            response = await self.client.post(
                "/api/notes", json=build_note_payload(card, self.deck_id)
            )
            if response.status_code == 429:
                raise RateLimitError("Noji rate limit exceeded")
            response.raise_for_status()
            return response.json() if response.content else {}

        return await with_retry(
            _make_request,
            max_attempts=self.max_retries,
            operation_name="noji_create_card",
        )

    async def add_cards(self, cards: list[CardDraft]) -> DispatchResult:
        logger.info(f"Adding {len(cards)} cards to Noji deck {self.deck_id}...")
        result = DispatchResult()

        for card in cards:
            try:
                await self.create_card(card)
            except Exception as e:
                result.failed += 1
                result.errors.append(
                    CardDispatchError(front=card.front, error=format_exception(e))
                )
                continue
            result.success += 1

        logger.info(f"Successfully added {result.success} cards")
        if result.failed:
            logger.warning(f"Failed to add {result.failed} cards")
        return result

    async def test_connection(self) -> bool:
        logger.info(f"Testing access to Noji deck ID: {self.deck_id}")
        try:
            response = await self.client.get(f"/api/decks/{self.deck_id}")
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Noji API connection failed (status: {status})")
            if status == 404:
                logger.error("Deck not found. Check NOJI_DECK_ID")
            elif status in (401, 403):
                logger.error("Authentication failed. Check NOJI_BEARER_TOKEN")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Noji API connection failed: {format_exception(e)}")
            return False

        deck = response.json() if response.content else {}
        if isinstance(deck, dict) and deck.get("name"):
            logger.info(
                f'Deck found: "{deck["name"]}" '
                f"(cards: {deck.get('card_count', 'unknown')})"
            )
        return True
