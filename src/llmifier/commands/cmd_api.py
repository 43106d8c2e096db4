"""Show the public API surface of a single source file."""

from __future__ import annotations

from pathlib import Path

import click

from llmifier.exit_codes import LlmifierError
from llmifier.languages.base import ExtractionError
from llmifier.languages.registry import get_extractor_for_file, get_supported_extensions
from llmifier.output.formatter import estimate_tokens, json_envelope, to_json


@click.command("api")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def api_cmd(ctx, path):
    """Print the public declarations of PATH with bodies removed."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    extractor = get_extractor_for_file(path)
    if extractor is None:
        raise LlmifierError(
            f"Unsupported file type: {path} (supported: {', '.join(get_supported_extensions())})"
        )
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LlmifierError(f"Could not read {path}: {exc}")

    try:
        surface = extractor.extract_api(source, path)
    except ExtractionError as exc:
        details = "\n".join(f"  {d}" for d in exc.diagnostics[:5])
        raise LlmifierError(f"Could not parse {path}: {exc}\n{details}".rstrip())

    if json_mode:
        click.echo(to_json(json_envelope(
            "api",
            summary={
                "file": path,
                "language": extractor.language_name,
                "source_tokens": estimate_tokens(source),
                "api_tokens": estimate_tokens(surface),
            },
            api=surface,
        )))
        return
    click.echo(surface, nl=False)
