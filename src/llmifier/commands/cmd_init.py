"""Generate a default llmifierrc.yaml in the project directory."""

from __future__ import annotations

from pathlib import Path

import click

from llmifier.config.settings import (
    CONFIG_FILE_NAME,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_OUTPUT_PATH,
)
from llmifier.exit_codes import ConfigExistsError, ProjectNotFoundError
from llmifier.output.formatter import json_envelope, to_json

_CONFIG_TEMPLATE = """\
# llmifier configuration
#
# Values given on the command line override the values in this file.

# Output file, relative to the working directory.
output: {output}

# Project root to scan.
project: .

# dart or flutter
projectType: dart

# full: every selected file verbatim
# api:  Dart files reduced to their public declarations, bodies removed
mode: full

verbose: false

# Glob patterns, matched against paths relative to the project root.
# '*' stays within one directory, '**' crosses directories.
include:
{include}

exclude:
{exclude}

# Optional: replace the built-in output ordering with custom groups.
# Files go to the first group whose patterns match; unmatched files come last.
# fileOrdering:
#   groups:
#     - name: Docs
#       patterns: ["README.md", "doc/**"]
#       order: ["README.md"]
#     - name: Library
#       patterns: ["lib/**"]
#       sortBy: depthFirst      # or: alphabetical
"""


def _yaml_list(items) -> str:
    return "\n".join(f'  - "{item}"' for item in items)


def render_default_config() -> str:
    return _CONFIG_TEMPLATE.format(
        output=DEFAULT_OUTPUT_PATH,
        include=_yaml_list(DEFAULT_INCLUDE_PATTERNS),
        exclude=_yaml_list(DEFAULT_EXCLUDE_PATTERNS),
    )


@click.command("init")
@click.option("-p", "--project", default=".", help="Project directory")
@click.pass_context
def init(ctx, project):
    """Write a commented default llmifierrc.yaml."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    project_dir = Path(project)
    if not project_dir.is_dir():
        raise ProjectNotFoundError(project)
    config_path = project_dir / CONFIG_FILE_NAME
    if config_path.exists():
        raise ConfigExistsError(str(config_path))

    config_path.write_text(render_default_config(), encoding="utf-8")

    if json_mode:
        click.echo(to_json(json_envelope(
            "init",
            summary={"created": str(config_path)},
            created=[str(config_path)],
        )))
        return
    click.echo(f"Created {config_path}")
    click.echo("Edit it, then run `llmifier build`.")
