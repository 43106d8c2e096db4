"""Tests for standardized CLI exit codes.

Validates that:
- Exit code constants have correct values
- Custom exceptions carry the right exit codes
- Each failure class surfaces through the CLI with its code
"""

from __future__ import annotations

import click
import pytest

# ===========================================================================
# Test exit code constants
# ===========================================================================


class TestExitCodeConstants:
    """Verify exit code integer values match the documented scheme."""

    def test_values(self):
        from llmifier.exit_codes import (
            EXIT_CONFIG_EXISTS,
            EXIT_ERROR,
            EXIT_PROJECT_MISSING,
            EXIT_SUCCESS,
            EXIT_USAGE,
        )

        assert EXIT_SUCCESS == 0
        assert EXIT_ERROR == 1
        assert EXIT_USAGE == 2
        assert EXIT_PROJECT_MISSING == 3
        assert EXIT_CONFIG_EXISTS == 4

    def test_descriptions_cover_all_codes(self):
        from llmifier.exit_codes import DESCRIPTIONS

        assert sorted(DESCRIPTIONS) == [0, 1, 2, 3, 4]
        for code, text in DESCRIPTIONS.items():
            assert isinstance(text, str) and text, f"Missing description for exit code {code}"


# ===========================================================================
# Test custom exceptions
# ===========================================================================


class TestCustomExceptions:
    """Verify custom exception classes carry the right exit codes."""

    def test_llmifier_error_default(self):
        from llmifier.exit_codes import EXIT_ERROR, LlmifierError

        err = LlmifierError("something broke")
        assert err.exit_code == EXIT_ERROR
        assert err.format_message() == "something broke"

    def test_llmifier_error_custom_code(self):
        from llmifier.exit_codes import LlmifierError

        err = LlmifierError("custom", exit_code=42)
        assert err.exit_code == 42

    def test_project_not_found(self):
        from llmifier.exit_codes import EXIT_PROJECT_MISSING, ProjectNotFoundError

        err = ProjectNotFoundError("some/dir")
        assert err.exit_code == EXIT_PROJECT_MISSING
        assert err.project_path == "some/dir"
        assert "some/dir" in err.format_message()

    def test_config_exists(self):
        from llmifier.exit_codes import EXIT_CONFIG_EXISTS, ConfigExistsError

        err = ConfigExistsError("llmifierrc.yaml")
        assert err.exit_code == EXIT_CONFIG_EXISTS
        assert "not overwritten" in err.format_message()

    @pytest.mark.parametrize("name", ["LlmifierError", "ProjectNotFoundError", "ConfigExistsError"])
    def test_exceptions_inherit_click_exception(self, name):
        import llmifier.exit_codes as exit_codes

        assert issubclass(getattr(exit_codes, name), click.ClickException)


# ===========================================================================
# Exit codes through the CLI
# ===========================================================================


class TestCLIExitCodes:
    def test_success(self, invoke_cli, dart_project):
        assert invoke_cli(["files"], cwd=dart_project).exit_code == 0

    def test_usage_error(self, invoke_cli):
        assert invoke_cli(["build", "--no-such-flag"]).exit_code == 2

    def test_project_missing(self, invoke_cli, tmp_path):
        assert invoke_cli(["build", "-p", str(tmp_path / "gone")]).exit_code == 3

    def test_config_exists(self, invoke_cli, tmp_path):
        invoke_cli(["init"], cwd=tmp_path)
        assert invoke_cli(["init"], cwd=tmp_path).exit_code == 4

    def test_parse_failure_in_build_is_not_an_error(self, invoke_cli, dart_project):
        assert invoke_cli(["build", "-m", "api"], cwd=dart_project).exit_code == 0

    def test_write_failure_is_general_error(self, invoke_cli, dart_project):
        (dart_project / "blocked").write_text("a file, not a directory", encoding="utf-8")
        result = invoke_cli(["build", "-o", "blocked/llms.txt"], cwd=dart_project)
        assert result.exit_code == 1
        assert "Could not write" in result.output
