"""Unit tests for logging configuration."""

import logging

import pytest

from xpanel.core.logging_setup import LOG_LEVELS, configure_logging, parse_log_level
from xpanel.domain.exceptions import UnknownLogLevelError


class TestParseLogLevel:
    """Tests for parse_log_level."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warn", logging.WARNING),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            (" INFO ", logging.INFO),
        ],
    )
    def test_known_levels(self, name: str, expected: int) -> None:
        assert parse_log_level(name) == expected

    @pytest.mark.parametrize("name", ["verbose", "", "trace"])
    def test_unknown_level_raises(self, name: str) -> None:
        """Unknown names raise with the list of valid ones as hint."""
        with pytest.raises(UnknownLogLevelError) as exc_info:
            parse_log_level(name)

        assert exc_info.value.message == f"unknown log level: {name}"
        for level in LOG_LEVELS:
            assert level in exc_info.value.hint


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_package_logger_level(self) -> None:
        level = configure_logging("warn")

        assert level == logging.WARNING
        assert logging.getLogger("xpanel").level == logging.WARNING

    def test_unknown_level_leaves_logging_untouched(self) -> None:
        before = logging.getLogger("xpanel").level

        with pytest.raises(UnknownLogLevelError):
            configure_logging("loud")

        assert logging.getLogger("xpanel").level == before


    def test_unopenable_log_file_raises_without_installing_handlers(
        self, tmp_path, monkeypatch
    ) -> None:
        """A log file below a regular file fails before root is configured."""
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with pytest.raises(OSError):
            configure_logging("info", str(blocker / "xpanel.log"))

        assert root.handlers == []
