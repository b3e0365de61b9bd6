"""
Tests for logging_manager module.

Tests the PerinotesLogger file output, the safe_logger function and the
NullLogger class that provide null-safe logging throughout the codebase.
"""
import pytest
from unittest.mock import MagicMock

import click

from perinotes.core.logging_manager import (
    NullLogger,
    PerinotesLogger,
    handle_cli_error,
    safe_logger,
)


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_null_logger_calls_are_no_ops(self):
        """NullLogger logging methods should do nothing."""
        logger = NullLogger()
        logger.log_operation("reconcile", {"created": 2})
        logger.log_error(ValueError("boom"), {"context": "test"})
        logger.log_debug("debug message", {"key": "value"})
        logger.log_info("info message")
        logger.log_warning("warning message")

    def test_null_logger_log_cli_error_returns_formatted(self):
        """NullLogger.log_cli_error should return a formatted error string."""
        result = NullLogger().log_cli_error(ValueError("bad date"), {"operation": "create"})
        assert "ValueError" in result
        assert "bad date" in result


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_logger_when_provided(self):
        """safe_logger should return the same logger when not None."""
        mock_logger = MagicMock(spec=PerinotesLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_null_logger_singleton_when_none(self):
        """safe_logger should return one shared NullLogger for None."""
        first = safe_logger(None)
        assert isinstance(first, NullLogger)
        assert safe_logger(None) is first

    def test_forwards_details(self):
        """Calls through safe_logger reach the wrapped logger unchanged."""
        mock_logger = MagicMock(spec=PerinotesLogger)
        details = {"granularity": "weekly", "missing": 3}
        safe_logger(mock_logger).log_operation("list", details)
        mock_logger.log_operation.assert_called_once_with("list", details)


class TestPerinotesLogger:
    """Tests for PerinotesLogger file output."""

    def test_writes_component_and_error_logs(self, tmp_path):
        """Operations go to <component>.log, errors also to errors.log."""
        logger = PerinotesLogger(tmp_path, "view")
        logger.log_operation("reconcile", {"created": 1})
        logger.log_debug("Deferred removal of focused card", {"keys": [1]})
        logger.log_error(RuntimeError("disk full"), {"path": "Daily/2024-01-15.md"})

        component_log = (tmp_path / "view.log").read_text()
        assert "OPERATION - reconcile" in component_log
        assert "DEBUG - Deferred removal of focused card" in component_log

        errors_log = (tmp_path / "errors.log").read_text()
        assert "RuntimeError: disk full" in errors_log
        assert "path=Daily/2024-01-15.md" in errors_log


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_prints_and_exits(self, capsys):
        """The error is echoed on stderr and the process exits."""
        ctx = click.Context(click.Command("create"), obj={"logger": None, "verbose": False})
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, ValueError("bad"), "create", exit_code=2)
        assert exc_info.value.code == 2
        assert "ValueError: bad" in capsys.readouterr().err
