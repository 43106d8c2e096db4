"""Assemble the project into the output document."""

from __future__ import annotations

import logging

import click

from llmifier.cli import configure_logging
from llmifier.config.loader import load_configuration
from llmifier.exit_codes import LlmifierError
from llmifier.index.discovery import discover_files
from llmifier.output.formatter import estimate_tokens, json_envelope, to_json
from llmifier.output.writer import TextOutputWriter
from llmifier.processing.project import ProjectProcessor

log = logging.getLogger(__name__)


@click.command("build")
@click.option("-o", "--output", default=None, help="Output file path (default: llms.txt)")
@click.option("-p", "--project", default=None, help="Project directory (default: .)")
@click.option("-m", "--mode", type=click.Choice(["full", "api"]), default=None,
              help="full: files verbatim; api: public declarations of Dart files only")
@click.option("-t", "--project-type", type=click.Choice(["dart", "flutter"]), default=None,
              help="Project type")
@click.option("--include", multiple=True, help="Include glob (repeatable, replaces defaults)")
@click.option("--exclude", multiple=True, help="Exclude glob (repeatable, replaces defaults)")
@click.option("-l", "--verbose", is_flag=True, help="Log progress details to stderr")
@click.pass_context
def build(ctx, output, project, mode, project_type, include, exclude, verbose):
    """Assemble project files into a single document."""
    obj = ctx.obj or {}
    json_mode = obj.get("json", False)
    verbose = verbose or obj.get("verbose", False)
    if verbose:
        configure_logging(True)

    config = load_configuration({
        "output": output,
        "project": project,
        "mode": mode,
        "project_type": project_type,
        "include": include,
        "exclude": exclude,
        "verbose": verbose,
    })
    if config.verbose:
        configure_logging(True)
    log.debug("effective configuration: %s", config.to_dict())

    files = discover_files(config)
    context = ProjectProcessor(config).process(files)
    try:
        path = TextOutputWriter().write(context, config)
    except OSError as exc:
        raise LlmifierError(f"Could not write {config.output_path}: {exc}")

    tokens = sum(estimate_tokens(f.content) for f in context.files)
    if json_mode:
        click.echo(to_json(json_envelope(
            "build",
            summary={
                "files": len(context.files),
                "mode": config.mode.value,
                "output": str(path),
                "tokens": tokens,
                "fallbacks": len(context.fallbacks),
            },
            package={"name": context.package_name, "version": context.package_version},
            files=[f.relative_path for f in context.files],
            fallbacks=context.fallbacks,
        )))
        return

    click.echo(f"Output generated successfully at: {path}")
    click.echo(f"  {len(context.files)} files, ~{tokens} tokens ({config.mode.value} mode)")
