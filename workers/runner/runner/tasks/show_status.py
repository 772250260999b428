"""Task for reporting processing progress."""

from __future__ import annotations

from notion2noji_core.schemas.state import StateSummary

from runner.config import Settings
from runner.tasks.helpers import build_state_store


def format_summary(summary: StateSummary) -> str:
    """Render stats and recent lessons for the console."""
    stats = summary.stats
    lines = [
        "Processing State:",
        f"  Total lessons: {stats.total_found}",
        f"  Processed: {stats.total_processed}",
        f"  Remaining: {stats.remaining}",
        f"  Progress: {stats.progress_percent}%",
        f"  Complete: {'yes' if stats.is_complete else 'no'}",
    ]
    if stats.last_batch_label:
        lines.append(f"  Last batch: {stats.last_batch_label}")
    if summary.recent_lessons:
        lines.append("Recently processed:")
        for lesson in summary.recent_lessons:
            lines.append(
                f"  - {lesson.identity}: {lesson.title} "
                f"({lesson.processed_at.isoformat()})"
            )
    return "\n".join(lines)


def show_status(settings: Settings) -> str:
    store = build_state_store(settings)
    return format_summary(store.summary())
