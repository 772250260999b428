"""Durable storage backends for the processing state."""

import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from notion2noji_core.schemas.state import ProcessingState
from notion2noji_core.utils.logging import get_logger

logger = get_logger(__name__)


class StateLoadError(Exception):
    """Raised when an existing state document cannot be read (strict mode)."""


class StateBackend(ABC):
    """Where the state aggregate lives between runs."""

    @abstractmethod
    def load(self) -> ProcessingState | None:
        """Load the stored state, or None if there is none."""
        pass

    @abstractmethod
    def save(self, state: ProcessingState) -> None:
        """Persist the full state, replacing what was stored."""
        pass


class InMemoryStateBackend(StateBackend):
    """Keeps the state in memory; used by tests and dry runs."""

    def __init__(self, initial: ProcessingState | None = None):
        self._state = initial.model_copy(deep=True) if initial else None
        self.save_count = 0

    def load(self) -> ProcessingState | None:
        return self._state.model_copy(deep=True) if self._state else None

    def save(self, state: ProcessingState) -> None:
        self._state = state.model_copy(deep=True)
        self.save_count += 1


class JsonFileStateBackend(StateBackend):
    """Stores the state as one JSON document on disk.

    Writes go to a sibling temporary file that is then renamed over the
    target, so readers never see a partially written document. Concurrent
    runs against the same file are not supported.
    """

    def __init__(self, path: str | Path, strict: bool = False):
        """Initialize the backend.

        Args:
            path: Location of the state document
            strict: Raise StateLoadError on an unreadable document instead of
                moving it aside and starting fresh
        """
        self.path = Path(path)
        self.strict = strict

    def load(self) -> ProcessingState | None:
        if not self.path.exists():
            return None

        try:
            state = ProcessingState.model_validate_json(
                self.path.read_text(encoding="utf-8")
            )
        except (OSError, ValueError, ValidationError) as e:
            if self.strict:
                raise StateLoadError(f"Cannot read state file {self.path}: {e}") from e
            backup = self._quarantine()
            logger.error(
                f"Error loading state file {self.path}: {e}. "
                f"Starting fresh; unreadable file kept at {backup}"
            )
            return None

        logger.info(
            f"Loaded state: {state.stats.total_lessons_processed} lessons processed"
        )
        return state

    def save(self, state: ProcessingState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = state.model_dump_json(by_alias=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _quarantine(self) -> Path | None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        backup = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            self.path.replace(backup)
        except OSError as e:
            logger.error(f"Could not move unreadable state file aside: {e}")
            return None
        return backup
