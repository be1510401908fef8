"""Tests for logging infrastructure."""
import logging
import sys
from pathlib import Path

import pytest
import structlog

from calsched.utils.logging_setup import (
    TRACE,
    ColoredFormatter,
    SolverLogger,
    get_logger,
    log_constraint,
    log_function_call,
    setup_logging,
)
from calsched.utils.structured_logging import (
    bind_context,
    clear_context,
    configure_structlog,
    get_structured_logger,
)


class TestLoggingSetup:
    """Tests for logging configuration."""

    def test_setup_logging_creates_logger(self, tmp_path):
        logger = setup_logging(level="DEBUG", log_file=str(tmp_path / "calsched.log"))
        assert logger.name == "calsched"
        assert len(logger.handlers) == 2  # Console + file

    def test_setup_logging_creates_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "calsched.log"
        logger = setup_logging(level="DEBUG", log_file=str(log_file))
        logger.info("Test message")
        assert log_file.exists()
        assert "Test message" in log_file.read_text(encoding="utf-8")

    def test_setup_logging_no_file(self):
        logger = setup_logging(level="INFO", log_file=None)
        assert len(logger.handlers) == 1  # Console only

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging(level="INFO")
        logger = setup_logging(level="INFO")
        assert len(logger.handlers) == 1

    def test_console_level(self):
        logger = setup_logging(level="DEBUG", console_level="WARNING")
        assert logger.handlers[0].level == logging.WARNING

    def test_trace_level_name(self):
        logger = setup_logging(level="TRACE")
        assert logger.handlers[0].level == TRACE
        assert logging.getLevelName(TRACE) == "TRACE"

    def test_get_logger(self):
        assert get_logger("calsched.solver").name == "calsched.solver"

    def test_rotation(self, tmp_path):
        log_file = tmp_path / "calsched.log"
        logger = setup_logging(level="DEBUG", log_file=str(log_file), max_bytes=500, backup_count=2)
        for i in range(50):
            logger.info(f"Message {i}: " + "x" * 50)
        assert log_file.exists()
        assert list(Path(tmp_path).glob("calsched.log.*"))

    def test_colored_formatter_plain_when_not_tty(self):
        record = logging.LogRecord("calsched", logging.INFO, __file__, 1, "hello", None, None)
        assert "hello" in ColoredFormatter("%(message)s").format(record)

    def test_colored_formatter_follows_stderr(self, monkeypatch):
        # console handler writes to stderr, so stdout being piped must not matter
        monkeypatch.setattr(sys.stderr, "isatty", lambda: True, raising=False)
        monkeypatch.setattr(sys.stdout, "isatty", lambda: False, raising=False)
        record = logging.LogRecord("calsched", logging.WARNING, __file__, 1, "careful", None, None)
        assert ColoredFormatter("%(message)s").format(record) == "\033[33mcareful\033[0m"

    def test_colored_formatter_plain_when_stderr_redirected(self, monkeypatch):
        monkeypatch.setattr(sys.stderr, "isatty", lambda: False, raising=False)
        monkeypatch.setattr(sys.stdout, "isatty", lambda: True, raising=False)
        record = logging.LogRecord("calsched", logging.WARNING, __file__, 1, "careful", None, None)
        assert ColoredFormatter("%(message)s").format(record) == "careful"


class TestLogFunctionCall:
    """Tests for the call-tracing decorator."""

    def test_entry_exit(self, caplog):
        @log_function_call
        def add(a, b):
            return a + b

        with caplog.at_level(TRACE):
            assert add(1, 2) == 3
        assert "→ add" in caplog.text
        assert "← add returned: 3" in caplog.text

    def test_exceptions_logged_and_raised(self, caplog):
        @log_function_call
        def fail():
            raise ValueError("boom")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValueError):
                fail()
        assert "✖ fail raised: ValueError: boom" in caplog.text

    def test_preserves_metadata(self):
        @log_function_call
        def my_function():
            """Docstring."""

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "Docstring."


class TestLogConstraint:
    """Tests for constraint logging."""

    def test_satisfied(self, caplog):
        with caplog.at_level(logging.DEBUG):
            log_constraint(logging.getLogger("test"), "m0 < m1", True, "removed 1")
        assert "[✓] m0 < m1 (removed 1)" in caplog.text

    def test_violated_is_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            log_constraint(logging.getLogger("test"), "m0 == 2026-03-02", False)
        assert "[✗] m0 == 2026-03-02" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING


class TestSolverLogger:
    """Tests for SolverLogger."""

    def test_phase(self, caplog):
        with caplog.at_level(logging.INFO):
            SolverLogger("test.solver").phase("Arc consistency")
        assert "Arc consistency" in caplog.text
        assert "=" in caplog.text

    def test_step(self, caplog):
        with caplog.at_level(logging.INFO):
            SolverLogger("test.solver").step("solved")
        assert "▸ solved" in caplog.text

    def test_detail_is_debug(self, caplog):
        with caplog.at_level(logging.DEBUG):
            SolverLogger("test.solver").detail("revisions", 12)
        assert "  revisions: 12" in caplog.text
        assert caplog.records[-1].levelno == logging.DEBUG

    def test_trace(self, caplog):
        with caplog.at_level(TRACE):
            SolverLogger("test.solver").trace("revise (0 -> 1)")
        assert caplog.records[-1].levelno == TRACE


class TestStructuredLogging:
    """Tests for structlog events routed through stdlib logging."""

    def test_key_value_event(self, caplog):
        configure_structlog()
        log = get_structured_logger("calsched.test")
        with caplog.at_level(logging.INFO, logger="calsched.test"):
            log.info("solve_started", meetings=3)
        assert "event='solve_started'" in caplog.text
        assert "meetings=3" in caplog.text

    def test_json_event(self, caplog):
        configure_structlog(json_output=True)
        try:
            log = get_structured_logger("calsched.test")
            with caplog.at_level(logging.INFO, logger="calsched.test"):
                log.info("solve_finished", status="solved")
            assert '"event": "solve_finished"' in caplog.text
        finally:
            configure_structlog()

    def test_bound_context(self, caplog):
        configure_structlog()
        log = get_structured_logger("calsched.test")
        bind_context(query_id="q1")
        try:
            with caplog.at_level(logging.INFO, logger="calsched.test"):
                log.info("solve_started")
        finally:
            clear_context()
        assert "query_id='q1'" in caplog.text

    def test_filtered_below_level(self, caplog):
        configure_structlog()
        log = get_structured_logger("calsched.test")
        with caplog.at_level(logging.WARNING, logger="calsched.test"):
            log.info("solve_started")
        assert "solve_started" not in caplog.text

    def test_is_configured(self):
        get_structured_logger("calsched.test")
        assert structlog.is_configured()
