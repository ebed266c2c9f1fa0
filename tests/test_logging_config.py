"""Tests for logging setup."""

from __future__ import annotations

import logging
from unittest.mock import patch

from cardnav.utils.logging_config import configure_logging, get_logger


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_one_handler(self) -> None:
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            with patch("cardnav.utils.logging_config._configured", False):
                configure_logging("DEBUG")
                configure_logging("WARNING")
                added = [handler for handler in root.handlers if handler not in before]
                assert len(added) == 1
                assert root.level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
            root.setLevel(level)

    def test_get_logger_returns_named_logger(self) -> None:
        assert get_logger("cardnav.test").name == "cardnav.test"
