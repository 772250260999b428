"""Tests for the processing state store and its backends."""

import json
from pathlib import Path

import pytest
from builders import paragraph

from notion2noji_core.schemas.lessons import Lesson
from notion2noji_core.schemas.state import ProcessingRecord, ProcessingState
from notion2noji_core.state import (
    InMemoryStateBackend,
    JsonFileStateBackend,
    ProcessingStateStore,
    StateLoadError,
)


def make_lessons(count: int) -> list[Lesson]:
    return [
        Lesson(
            sequence_index=n,
            identity=f"lesson-{n}",
            blocks=[paragraph(f"p{n}", f"text {n}")],
        )
        for n in range(count)
    ]


@pytest.fixture
def store() -> ProcessingStateStore:
    return ProcessingStateStore(InMemoryStateBackend())


class TestProcessingStateStore:
    """Tests for the store contract."""

    def test_mark_is_first_write_wins(self, store: ProcessingStateStore) -> None:
        first = ProcessingRecord(title="First", cards_generated=3)
        second = ProcessingRecord(title="Second", cards_generated=9)

        assert store.mark_processed("lesson-0", first) is True
        assert store.mark_processed("lesson-0", second) is False

        assert store.stats().total_processed == 1
        assert store.get_record("lesson-0").title == "First"

    def test_every_mutation_persists(self) -> None:
        backend = InMemoryStateBackend()
        store = ProcessingStateStore(backend)

        store.start_batch("Batch", 2)
        store.mark_processed("lesson-0", ProcessingRecord())
        store.mark_processed("lesson-0", ProcessingRecord())
        store.complete_batch()

        assert backend.save_count == 3
        assert backend.load().stats.total_lessons_processed == 1

    def test_unmark(self, store: ProcessingStateStore) -> None:
        store.mark_processed("lesson-0", ProcessingRecord())

        assert store.unmark("lesson-0") is True
        assert store.unmark("lesson-0") is False
        assert not store.is_processed("lesson-0")
        assert store.stats().total_processed == 0

    def test_filter_unprocessed(self, store: ProcessingStateStore) -> None:
        lessons = make_lessons(3)
        store.mark_processed("lesson-1", ProcessingRecord())

        pending = store.filter_unprocessed(lessons)
        assert [lesson.identity for lesson in pending] == ["lesson-0", "lesson-2"]

        for lesson in pending:
            store.mark_processed(lesson.identity, ProcessingRecord())
        assert store.filter_unprocessed(lessons) == []

    def test_stats(self, store: ProcessingStateStore) -> None:
        store.start_batch("Batch", 4)
        store.mark_processed("lesson-0", ProcessingRecord())

        stats = store.stats()
        assert stats.total_found == 4
        assert stats.remaining == 3
        assert stats.progress_percent == 25.0
        assert not stats.is_complete
        assert stats.last_batch_label == "Batch"

        for n in range(1, 4):
            store.mark_processed(f"lesson-{n}", ProcessingRecord())
        assert store.stats().is_complete

    def test_remaining_is_clamped(self, store: ProcessingStateStore) -> None:
        store.start_batch("Batch", 1)
        store.mark_processed("lesson-0", ProcessingRecord())
        store.mark_processed("lesson-1", ProcessingRecord())

        assert store.stats().remaining == 0

    def test_complete_without_start(self, store: ProcessingStateStore) -> None:
        store.complete_batch()

        assert store.stats().processing_completed is not None
        assert store.stats().processing_started is None

    def test_reset(self, store: ProcessingStateStore) -> None:
        store.start_batch("Batch", 2)
        store.mark_processed("lesson-0", ProcessingRecord())

        store.reset()
        stats = store.stats()

        assert stats.remaining == 0
        assert stats.is_complete is False
        assert stats.total_found == 0
        assert store.processed_identities() == []

    def test_summary_lists_recent_lessons(self, store: ProcessingStateStore) -> None:
        for n in range(5):
            store.mark_processed(f"lesson-{n}", ProcessingRecord(title=f"Lesson {n}"))

        summary = store.summary()

        assert len(summary.recent_lessons) == 3
        assert summary.stats.total_processed == 5

    def test_state_is_a_copy(self, store: ProcessingStateStore) -> None:
        store.state.processed_lessons["lesson-9"] = ProcessingRecord()
        assert not store.is_processed("lesson-9")


class TestJsonFileStateBackend:
    """Tests for the on-disk backend."""

    def test_round_trip_uses_camel_case(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        store = ProcessingStateStore(JsonFileStateBackend(path))
        store.mark_processed("lesson-0", ProcessingRecord(title="Intro", cards_added=2))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["version"] == "1.0"
        assert document["processedLessons"]["lesson-0"]["cardsAdded"] == 2
        assert document["stats"]["totalLessonsProcessed"] == 1

        reloaded = ProcessingStateStore(JsonFileStateBackend(path))
        assert reloaded.is_processed("lesson-0")
        assert reloaded.get_record("lesson-0").title == "Intro"

    def test_missing_file_starts_fresh(self, tmp_path: Path) -> None:
        backend = JsonFileStateBackend(tmp_path / "missing.json")
        assert backend.load() is None

    def test_corrupt_file_is_moved_aside(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")

        store = ProcessingStateStore(JsonFileStateBackend(path))

        assert store.stats().total_processed == 0
        backups = list(tmp_path.glob("state.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == "{not json"
        assert not path.exists()

    def test_corrupt_file_strict(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(StateLoadError):
            ProcessingStateStore(JsonFileStateBackend(path, strict=True))
        assert path.exists()

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        backend = JsonFileStateBackend(tmp_path / "nested" / "state.json")
        backend.save(ProcessingState())
        backend.save(ProcessingState())

        assert [p.name for p in (tmp_path / "nested").iterdir()] == ["state.json"]

    def test_save_failure_is_logged_not_raised(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        store = ProcessingStateStore(JsonFileStateBackend(blocker / "state.json"))

        assert store.mark_processed("lesson-0", ProcessingRecord()) is True
        assert store.is_processed("lesson-0")
