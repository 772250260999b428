"""Tests for core logging helpers."""

import logging

import pytest

from notion2noji_core.utils.logging import (
    PACKAGE_LOGGER,
    get_logger,
    log_exceptions,
    set_log_level,
)


@pytest.fixture
def restore_level():
    package = logging.getLogger(PACKAGE_LOGGER)
    previous = package.level
    yield
    package.setLevel(previous)


class TestLogLevel:
    """Tests for the shared package level."""

    def test_module_loggers_follow_package_level(self, restore_level) -> None:
        logger = get_logger("notion2noji_core.pipeline.segment")

        set_log_level("DEBUG")
        assert logger.getEffectiveLevel() == logging.DEBUG

        set_log_level("WARNING")
        assert logger.getEffectiveLevel() == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_level) -> None:
        set_log_level("chatty")
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_foreign_names_are_nested(self) -> None:
        assert get_logger("builders").name == f"{PACKAGE_LOGGER}.builders"


class TestLogExceptions:
    """Tests for the exception logging decorator."""

    def test_logs_and_reraises(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("notion2noji_core.tests")

        @log_exceptions(logger)
        def explode() -> None:
            raise ValueError("boom")

        with caplog.at_level(logging.ERROR, logger=PACKAGE_LOGGER):
            with pytest.raises(ValueError, match="boom"):
                explode()

        assert "explode failed: boom" in caplog.text

    @pytest.mark.asyncio
    async def test_async_functions_keep_their_result(self) -> None:
        @log_exceptions(get_logger("notion2noji_core.tests"))
        async def answer() -> int:
            return 42

        assert await answer() == 42
