"""Configuration for the lesson pipeline.

By default lessons are split at divider blocks and identified by position,
and any synthesized artifact shorter than 50 characters is treated as empty.
"""

from dataclasses import dataclass

from notion2noji_core.schemas.blocks import BlockKind
from notion2noji_core.schemas.lessons import IdentityStrategy

DEFAULT_MIN_ARTIFACT_CHARS = 50


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration values for segmentation, synthesis and batching."""

    # Segmentation
    separator_kind: BlockKind = BlockKind.DIVIDER
    identity_strategy: IdentityStrategy = IdentityStrategy.POSITION

    # Synthesis
    min_artifact_chars: int = DEFAULT_MIN_ARTIFACT_CHARS
    image_context_label: str = "Lebanese Arabic lesson"
    max_concurrent_images: int | None = None  # None: one task per image, unbounded

    # Batch bookkeeping
    batch_label: str = "Lebanese Arabic Lessons"
