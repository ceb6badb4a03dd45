"""
Test error mapping and CLI exit code functionality.

Validates that exceptions are correctly mapped to exit codes and that
the run_and_exit wrapper handles errors appropriately for CLI commands.
"""
from __future__ import annotations

import pytest
import typer

from blocks_s3.errors import BlockNotFoundError, ConfigurationError, InvalidBlockKey, KeyPrefixMismatch
from blocks_s3.multihash import MultihashError
from blocks_s3.operations.mappers import EXIT_CODES, FALLBACK_EXIT_CODE, exit_code_for, run_and_exit
from tests.storage.fakes import client_error


class TestExitCodeMapping:
    """Test exception to exit code mapping."""

    def test_known_exceptions_mapped_correctly(self):
        """Test that store exceptions map to the documented exit codes."""
        assert exit_code_for(BlockNotFoundError("missing")) == 1
        assert exit_code_for(ConfigurationError("bad bucket")) == 2
        assert exit_code_for(InvalidBlockKey("bad key")) == 2
        assert exit_code_for(KeyPrefixMismatch("wrong prefix")) == 2
        assert exit_code_for(MultihashError("bad digest")) == 2

    def test_backend_errors_map_to_three(self):
        """Test that botocore client errors are backend failures."""
        assert exit_code_for(client_error("AccessDenied", 403, "GetObject")) == 3

    def test_standard_exceptions(self):
        """Test that standard Python exceptions use the fallback code except ValueError."""
        assert exit_code_for(ValueError("test")) == 2
        assert exit_code_for(RuntimeError("test")) == FALLBACK_EXIT_CODE
        assert exit_code_for(PermissionError("test")) == FALLBACK_EXIT_CODE

    def test_mapping_is_by_exact_class_name(self):
        """Test that subclasses without their own entry fall back."""
        class CustomValueError(ValueError):
            pass

        assert exit_code_for(CustomValueError("x")) == FALLBACK_EXIT_CODE

    def test_exit_code_completeness(self):
        """Test that every error type raised by the store is mapped."""
        assert set(EXIT_CODES) == {
            "BlockNotFoundError",
            "ConfigurationError",
            "InvalidBlockKey",
            "KeyPrefixMismatch",
            "MultihashError",
            "ValueError",
            "ClientError",
        }


class TestRunAndExit:
    """Test run_and_exit wrapper functionality."""

    def test_successful_function_returns_result(self):
        """Test that successful function execution returns result."""
        assert run_and_exit(lambda: "success result") == "success result"

    def test_function_exception_raises_typer_exit(self):
        """Test that function exceptions are converted to typer.Exit."""
        def failing_func():
            raise BlockNotFoundError("Block not found: 11040123abcd")

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)

        assert exc_info.value.exit_code == 1

    def test_exception_chaining_preserved(self):
        """Test that original exception is preserved as cause."""
        original_error = ConfigurationError("original error")

        def failing_func():
            raise original_error

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)

        assert exc_info.value.__cause__ is original_error

    def test_error_message_written_to_stderr(self, capsys):
        """Test that the error message is reported on stderr."""
        def failing_func():
            raise ConfigurationError("BLOCKS_S3_BUCKET environment variable is required")

        with pytest.raises(typer.Exit):
            run_and_exit(failing_func)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: BLOCKS_S3_BUCKET environment variable is required" in captured.err

    def test_typer_exit_passes_through(self):
        """Test that an explicit typer.Exit keeps its own code."""
        def exiting_func():
            raise typer.Exit(code=0)

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(exiting_func)

        assert exc_info.value.exit_code == 0

    def test_error_boundary_isolation(self):
        """Test that errors don't leak between command invocations."""
        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(lambda: (_ for _ in ()).throw(RuntimeError("boom")))
        assert exc_info.value.exit_code == 3

        assert run_and_exit(lambda: "success") == "success"
