"""Tests for logging configuration."""

import logging
import threading

import pytest

from src.settings._paths import LOGS_DIR
from src.utils import logging_config
from src.utils.logging_config import (
    NOISY_LOGGERS,
    log_context,
    log_performance,
    set_log_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Restore root logger handlers and level after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    logging_config.reset_logger_suppression()
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_only(self):
        """log_file=None installs a single console handler."""
        setup_logging(level="DEBUG", log_file=None)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_handler_created(self, tmp_path):
        """A log file path adds a rotating file handler and creates the directory."""
        log_file = tmp_path / "nested" / "comic.log"
        setup_logging(level="INFO", log_file=str(log_file))

        logging.getLogger("src.test").info("hello file")

        assert log_file.exists()
        assert "hello file" in log_file.read_text()

    def test_default_log_file_in_logs_dir(self, tmp_path, monkeypatch):
        """log_file="default" writes to the project logs directory."""
        assert logging_config.DEFAULT_LOG_FILE.parent == LOGS_DIR
        target = tmp_path / "logs" / "infinite_comic.log"
        monkeypatch.setattr(logging_config, "DEFAULT_LOG_FILE", target)

        setup_logging(level="INFO")
        logging.getLogger("src.test").info("hello default")

        assert "hello default" in target.read_text()

    def test_invalid_level_raises(self):
        """Unknown level names are rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging(level="CHATTY", log_file=None)

    def test_noisy_loggers_pinned(self):
        """Third-party loggers stay at WARNING even under DEBUG."""
        setup_logging(level="DEBUG", log_file=None)
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_repeat_setup_does_not_duplicate_handlers(self):
        """Calling setup twice keeps one console handler."""
        setup_logging(log_file=None)
        setup_logging(log_file=None)
        assert len(logging.getLogger().handlers) == 1


class TestSetLogLevel:
    """Tests for set_log_level."""

    def test_changes_root_and_handlers(self):
        """Root logger and its handlers move to the new level."""
        setup_logging(level="INFO", log_file=None)
        set_log_level("WARNING")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert all(h.level == logging.WARNING for h in root.handlers)

    def test_invalid_level_raises(self):
        """Unknown level names are rejected."""
        with pytest.raises(ValueError):
            set_log_level("NOPE")


class TestLogContext:
    """Tests for correlation ids."""

    @staticmethod
    def _stamp() -> str:
        """Run a record through the shared filter and return its correlation id."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        logging_config._context_filter.filter(record)
        return record.correlation_id

    def test_sets_and_restores_correlation_id(self):
        """The id is active inside the block and restored afterwards."""
        with log_context("turn-start") as cid:
            assert cid == "turn-start"
            assert self._stamp() == "turn-start"
            with log_context("inner"):
                assert self._stamp() == "inner"
            assert self._stamp() == "turn-start"
        assert self._stamp() == "-"

    def test_generates_id_when_missing(self):
        """A short id is generated when none is given."""
        with log_context() as cid:
            assert len(cid) == 8

    def test_filter_stamps_records(self):
        """Records carry the active id, or '-' outside a context."""
        assert self._stamp() == "-"
        with log_context("abc"):
            assert self._stamp() == "abc"

    def test_concurrent_threads_keep_their_own_id(self):
        """Overlapping turns in worker threads never see each other's id."""
        a_entered = threading.Event()
        b_entered = threading.Event()
        a_done = threading.Event()
        seen: dict[str, str] = {}

        def turn_a() -> None:
            with log_context("turn-a"):
                a_entered.set()
                b_entered.wait(timeout=5)
                seen["a"] = self._stamp()
            a_done.set()

        def turn_b() -> None:
            a_entered.wait(timeout=5)
            with log_context("turn-b"):
                b_entered.set()
                a_done.wait(timeout=5)
                seen["b"] = self._stamp()
            seen["b_after"] = self._stamp()

        threads = [threading.Thread(target=turn_a), threading.Thread(target=turn_b)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert seen == {"a": "turn-a", "b": "turn-b", "b_after": "-"}
        assert self._stamp() == "-"


class TestLogPerformance:
    """Tests for log_performance."""

    def test_logs_start_and_completion(self, caplog):
        """Successful blocks log start and completion."""
        logger = logging.getLogger("src.test.perf")
        with caplog.at_level(logging.INFO, logger="src.test.perf"):
            with log_performance(logger, "render"):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert "render: Starting" in messages
        assert any(m.startswith("render: Completed in") for m in messages)

    def test_logs_failure_and_reraises(self, caplog):
        """Failures are logged and propagated."""
        logger = logging.getLogger("src.test.perf")
        with caplog.at_level(logging.INFO, logger="src.test.perf"):
            with pytest.raises(RuntimeError):
                with log_performance(logger, "render"):
                    raise RuntimeError("boom")

        assert any("render: Failed after" in r.getMessage() for r in caplog.records)
