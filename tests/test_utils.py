"""Tests for text formatting and logging helpers."""

import logging

import pytest

from tabpalette.utils.logging_utils import setup_tui_logging
from tabpalette.utils.text_formatting import truncate_path, truncate_title


class TestTruncation:
    def test_short_title_unchanged(self) -> None:
        assert truncate_title("alpha") == "alpha"

    def test_long_title(self) -> None:
        result = truncate_title("x" * 60, max_len=10)
        assert result == "xxxxxxx..."
        assert len(result) == 10

    def test_long_path_keeps_innermost_folders(self) -> None:
        result = truncate_path("Archive/2023/Projects/Client/Notes", max_len=15)
        assert result == "...Client/Notes"
        assert len(result) == 15


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_loggers(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        package_level = logging.getLogger("tabpalette").level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = handlers
        root.setLevel(level)
        logging.getLogger("tabpalette").setLevel(package_level)

    def test_levels(self, config_dir) -> None:
        assert setup_tui_logging().level == logging.INFO
        assert setup_tui_logging(verbose=True).level == logging.DEBUG
        assert config_dir.is_dir()
