"""OpenAI model adapter."""

import asyncio
from typing import Any

from notion2noji_core.model_adapters.base import BaseModelAdapter
from notion2noji_core.prompts.card_generation import (
    CARD_GENERATION_SCHEMA,
    CARD_GENERATION_SYSTEM_PROMPT,
    build_card_prompt,
    parse_cards_response,
)
from notion2noji_core.prompts.image_extraction import (
    IMAGE_EXTRACTION_SCHEMA,
    IMAGE_EXTRACTION_SYSTEM_PROMPT,
    build_image_prompt,
    parse_extraction_response,
)
from notion2noji_core.utils.logging import get_logger
from notion2noji_core.utils.retry import with_retry

logger = get_logger(__name__)

# Default timeout for API calls (seconds)
DEFAULT_TIMEOUT = 120.0


def _json_schema_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Build a strict structured-output response format."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema, "strict": True},
    }


class OpenAIAdapter(BaseModelAdapter):
    """Adapter for OpenAI chat models (vision for images, text for cards)."""

    def __init__(
        self,
        api_key: str,
        vision_model: str = "gpt-4o-mini",
        text_model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
    ):
        """Initialize the OpenAI adapter.

        Args:
            api_key: OpenAI API key
            vision_model: Model for image extraction
            text_model: Model for card generation
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for transient failures
        """
        self.api_key = api_key
        self.vision_model = vision_model
        self.text_model = text_model
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries

        self._client: Any = None
        logger.info(
            f"Initialized OpenAI adapter (vision={vision_model}, text={text_model})"
        )

    @property
    def client(self) -> Any:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def _call_api(
        self,
        model: str,
        messages: list[dict[str, Any]],
        operation_name: str,
        response_format: dict[str, Any],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Call the OpenAI API with retry logic.

        Returns:
            Response content string
        """

        async def _make_request() -> str:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    response_format=response_format,
                ),
                timeout=self.timeout,
            )
            return response.choices[0].message.content or ""

        logger.debug(f"Starting {operation_name} with model {model}")
        result = await with_retry(
            _make_request,
            max_attempts=self.max_retries,
            operation_name=operation_name,
        )
        logger.debug(f"Completed {operation_name}")
        return result

    async def extract_image_content(
        self,
        image_url: str,
        context: str = "",
    ) -> str:
        """Extract structured content from an image using the vision model."""
        logger.info(f"Extracting content from image {image_url[:50]}...")

        messages = [
            {"role": "system", "content": IMAGE_EXTRACTION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": build_image_prompt(context)},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            },
        ]

        content = await self._call_api(
            model=self.vision_model,
            messages=messages,
            operation_name="extract_image_content",
            response_format=_json_schema_format(
                "extraction_result", IMAGE_EXTRACTION_SCHEMA
            ),
            temperature=0.1,
            max_tokens=8000,
        )
        return parse_extraction_response(content)

    async def generate_cards(
        self,
        lesson_content: str,
    ) -> list[dict[str, Any]]:
        """Generate flashcards from a lesson artifact."""
        logger.info(f"Generating cards from {len(lesson_content)} characters")

        messages = [
            {"role": "system", "content": CARD_GENERATION_SYSTEM_PROMPT},
            {"role": "user", "content": build_card_prompt(lesson_content)},
        ]

        content = await self._call_api(
            model=self.text_model,
            messages=messages,
            operation_name="generate_cards",
            response_format=_json_schema_format("cards_result", CARD_GENERATION_SCHEMA),
            temperature=0.2,
            max_tokens=16384,
        )
        return parse_cards_response(content)
