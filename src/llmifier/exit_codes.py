"""Standardized CLI exit codes for llmifier.

Exit code scheme:

    0  SUCCESS            -- output written (files that failed API extraction
                             are included verbatim and do not change the code)
    1  GENERAL_ERROR      -- unexpected failure, I/O error while writing
    2  USAGE_ERROR        -- invalid arguments, bad flags (Click default)
    3  PROJECT_MISSING    -- the project directory does not exist
    4  CONFIG_EXISTS      -- `llmifier init` refused to overwrite llmifierrc.yaml
"""

from __future__ import annotations

import click

# ---------------------------------------------------------------------------
# Exit code constants
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1
EXIT_USAGE: int = 2
EXIT_PROJECT_MISSING: int = 3
EXIT_CONFIG_EXISTS: int = 4

DESCRIPTIONS: dict[int, str] = {
    EXIT_SUCCESS: "success",
    EXIT_ERROR: "unexpected error",
    EXIT_USAGE: "invalid usage (bad arguments or flags)",
    EXIT_PROJECT_MISSING: "project directory not found",
    EXIT_CONFIG_EXISTS: "configuration file already exists",
}

# ---------------------------------------------------------------------------
# Custom exceptions (caught by the Click error handler)
# ---------------------------------------------------------------------------


class LlmifierError(click.ClickException):
    """Base class for llmifier errors with exit codes."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code

    def format_message(self) -> str:
        return self.message


class ProjectNotFoundError(LlmifierError):
    """Raised when the configured project directory does not exist."""

    def __init__(self, project_path: str):
        super().__init__(f"Project directory not found: {project_path}", EXIT_PROJECT_MISSING)
        self.project_path = project_path


class ConfigExistsError(LlmifierError):
    """Raised by `init` when a configuration file is already present."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file already exists: {config_path} (not overwritten)",
            EXIT_CONFIG_EXISTS,
        )
        self.config_path = config_path
