"""Shared helpers for runner tasks."""

from __future__ import annotations

import logging

import structlog
from notion2noji_core.config import PipelineConfig
from notion2noji_core.exporters.base import BaseCardSink
from notion2noji_core.exporters.noji import NojiCardSink
from notion2noji_core.exporters.tsv import TsvCardSink
from notion2noji_core.model_adapters.openai import OpenAIAdapter
from notion2noji_core.sources.notion import NotionContentSource
from notion2noji_core.state import JsonFileStateBackend, ProcessingStateStore
from notion2noji_core.utils.logging import set_log_level

from runner.config import Settings


def configure_logging(level: str = "INFO") -> None:
    """Filter structlog and core package output below ``level``."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(numeric))
    set_log_level(numeric)


def build_state_store(settings: Settings) -> ProcessingStateStore:
    """Open the processing state at the configured path."""
    backend = JsonFileStateBackend(settings.state_file, strict=settings.strict_state)
    return ProcessingStateStore(backend)


def build_pipeline_config(settings: Settings) -> PipelineConfig:
    return PipelineConfig(
        min_artifact_chars=settings.min_artifact_chars,
        batch_label=settings.batch_label,
    )


def build_model_adapter(settings: Settings) -> OpenAIAdapter:
    return OpenAIAdapter(
        api_key=settings.openai_api_key or "",
        vision_model=settings.openai_model,
        text_model=settings.openai_model,
        base_url=settings.openai_base_url,
    )


def build_content_source(settings: Settings) -> NotionContentSource:
    return NotionContentSource(
        token=settings.notion_token or "",
        api_url=settings.notion_api_url,
        notion_version=settings.notion_version,
    )


def build_card_sink(settings: Settings) -> BaseCardSink:
    """Send cards to Noji, or append them to TSV_OUTPUT when it is set."""
    if settings.tsv_output:
        return TsvCardSink(settings.tsv_output)
    return NojiCardSink(
        bearer_token=settings.noji_bearer_token or "",
        deck_id=settings.noji_deck_id or 0,
        api_url=settings.noji_api_url,
    )
