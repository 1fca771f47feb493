"""
Tests for logging_manager module.

Tests FolioLogger file output, the null-safe logging helpers and CLI
error formatting.
"""
import pytest
from unittest.mock import MagicMock

from folio.core.exceptions import NotFoundError, ValidationError
from folio.core.logging_manager import (
    FolioLogger,
    NullLogger,
    format_cli_error,
    handle_cli_error,
    safe_logger,
)


class TestFolioLogger:
    """Tests for FolioLogger file handlers."""

    @pytest.fixture
    def logger(self, tmp_path):
        logger = FolioLogger(tmp_path / "logs", "test")
        yield logger
        logger.close()

    def test_creates_log_directory(self, tmp_path):
        """FolioLogger should create its log directory."""
        logger = FolioLogger(tmp_path / "nested" / "logs", "test")
        try:
            assert (tmp_path / "nested" / "logs").is_dir()
        finally:
            logger.close()

    def test_operation_written_to_component_log(self, logger, tmp_path):
        """log_operation should write a JSON-encoded record."""
        logger.log_operation("article_create", {"article_id": 7})

        text = (tmp_path / "logs" / "test.log").read_text()
        assert "OPERATION - article_create" in text
        assert '"article_id": 7' in text

    def test_debug_written_to_component_log(self, logger, tmp_path):
        """log_debug records go to the component log at DEBUG level."""
        logger.log_debug("session_start")

        text = (tmp_path / "logs" / "test.log").read_text()
        assert "DEBUG - session_start" in text

    def test_error_written_to_errors_log(self, logger, tmp_path):
        """log_error should write to errors.log with context."""
        logger.log_error(ValueError("boom"), {"operation": "seed"})

        text = (tmp_path / "logs" / "errors.log").read_text()
        assert "ValueError: boom" in text
        assert "operation=seed" in text

    def test_error_includes_kind_for_folio_errors(self, logger, tmp_path):
        """Typed errors log their kind and details."""
        logger.log_error(NotFoundError("Article 3 not found", entity="article", id=3))

        text = (tmp_path / "logs" / "errors.log").read_text()
        assert "kind=not_found" in text
        assert "entity=article" in text

    def test_close_releases_handlers(self, tmp_path):
        """close() should detach every handler."""
        logger = FolioLogger(tmp_path / "logs", "closing")
        logger.close()
        assert logger.main_logger.handlers == []
        assert logger.error_logger.handlers == []


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_null_logger_methods_are_no_ops(self):
        """NullLogger methods should do nothing."""
        logger = NullLogger()
        logger.log_operation("test_op", {"key": "value"})
        logger.log_error(ValueError("test error"), {"context": "test"})
        logger.log_debug("debug message", {"key": "value"})
        logger.log_info("info message")
        logger.log_warning("warning message")

    def test_null_logger_log_cli_error_returns_formatted(self):
        """NullLogger.log_cli_error should return formatted error string."""
        result = NullLogger().log_cli_error(ValueError("test error"))
        assert result == "Error [ValueError]: test error"


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_logger_when_provided(self):
        mock_logger = MagicMock(spec=FolioLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_null_logger_when_none(self):
        assert isinstance(safe_logger(None), NullLogger)

    def test_null_logger_is_singleton(self):
        assert safe_logger(None) is safe_logger(None)

    def test_forwards_calls(self):
        mock_logger = MagicMock(spec=FolioLogger)
        safe_logger(mock_logger).log_info("message")
        mock_logger.log_info.assert_called_once_with("message")


class TestCliErrors:
    """Tests for CLI error formatting and handling."""

    def test_format_typed_error_uses_kind(self):
        error = ValidationError("Title is required", field="title")
        assert format_cli_error(error) == "Error [validation_failed]: Title is required"

    def test_format_untyped_error_uses_class_name(self):
        assert format_cli_error(KeyError("x")) == "Error [KeyError]: 'x'"

    def test_handle_cli_error_exits_nonzero(self, capsys):
        """handle_cli_error should print to stderr and exit with the code."""
        ctx = MagicMock()
        ctx.obj = {"logger": None, "verbose": False}

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, NotFoundError("Article 9 not found"), "show", exit_code=2)

        assert exc_info.value.code == 2
        assert "Error [not_found]: Article 9 not found" in capsys.readouterr().err

    def test_handle_cli_error_logs_with_context(self):
        """The context logger receives the operation and extra context."""
        mock_logger = MagicMock(spec=FolioLogger)
        mock_logger.log_cli_error.return_value = "Error [conflict]: taken"
        ctx = MagicMock()
        ctx.obj = {"logger": mock_logger, "verbose": True}

        with pytest.raises(SystemExit):
            handle_cli_error(ctx, ValueError("taken"), "seed", {"file": "a.yaml"})

        error, context = mock_logger.log_cli_error.call_args[0][:2]
        assert isinstance(error, ValueError)
        assert context == {"operation": "seed", "file": "a.yaml"}
        assert mock_logger.log_cli_error.call_args[1] == {"show_traceback": True}
