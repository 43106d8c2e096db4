"""List the files a build would include, in output order."""

from __future__ import annotations

import click

from llmifier.config.loader import load_configuration
from llmifier.index.discovery import discover_files
from llmifier.index.ordering import FileOrderingStrategy
from llmifier.output.formatter import estimate_tokens, format_table, json_envelope, to_json


@click.command("files")
@click.option("-p", "--project", default=None, help="Project directory (default: .)")
@click.option("--include", multiple=True, help="Include glob (repeatable, replaces defaults)")
@click.option("--exclude", multiple=True, help="Exclude glob (repeatable, replaces defaults)")
@click.pass_context
def files_cmd(ctx, project, include, exclude):
    """Show the selected files grouped and ordered as in the output."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    config = load_configuration({"project": project, "include": include, "exclude": exclude})
    entries = discover_files(config)
    groups = FileOrderingStrategy(config.file_groups).grouped(entries)

    rows = []
    for group_name, group_files in groups:
        for entry in group_files:
            rows.append([
                group_name,
                entry.relative_path,
                str(entry.metadata.depth),
                str(estimate_tokens(entry.content)),
            ])

    if json_mode:
        click.echo(to_json(json_envelope(
            "files",
            summary={"files": len(rows), "groups": len(groups)},
            files=[
                {"group": r[0], "path": r[1], "depth": int(r[2]), "tokens": int(r[3])}
                for r in rows
            ],
        )))
        return

    click.echo(f"Files ({len(rows)}):")
    click.echo(format_table(["group", "path", "depth", "tokens"], rows))
