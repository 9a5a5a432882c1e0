"""Tests for logging setup."""

import logging

from rich.logging import RichHandler

from memsearch.utils.logging import get_console, get_logger, setup_logging


class TestLogging:
    """Tests for the logging helpers."""

    def teardown_method(self):
        setup_logging()

    def test_child_logger_names(self):
        """Test that module names map onto the memsearch logger tree."""
        assert get_logger("memsearch.index.manager").name == "memsearch.index.manager"
        assert get_logger("custom").name == "memsearch.custom"
        assert get_logger().name == "memsearch"

    def test_console_handler(self):
        """Test that console logging uses a RichHandler."""
        setup_logging(level="debug", console_enabled=True)
        root = get_logger()

        assert root.level == logging.DEBUG
        assert any(isinstance(handler, RichHandler) for handler in root.handlers)
        assert root.propagate is False

    def test_file_handler(self, tmp_path):
        """Test that file logging writes to memsearch.log."""
        setup_logging(log_dir=tmp_path, console_enabled=False, file_enabled=True)
        get_logger("tests").info("written to file")

        for handler in get_logger().handlers:
            handler.flush()
        assert "written to file" in (tmp_path / "memsearch.log").read_text()

    def test_no_handlers_enabled(self):
        """Test that disabling every output leaves only a NullHandler."""
        setup_logging(console_enabled=False, file_enabled=False)
        handlers = get_logger().handlers

        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.NullHandler)

    def test_console_writes_to_stderr(self):
        """Test that log output does not go to stdout."""
        assert get_console().stderr is True
