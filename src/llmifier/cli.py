"""Click CLI entry point with lazy-loaded subcommands."""

import logging
import os
import sys

# Fix Unicode output on Windows consoles (cp1253, cp1252, etc.)
if sys.platform == "win32" and not os.environ.get("PYTHONIOENCODING"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import click

from llmifier.exit_codes import DESCRIPTIONS

# Lazy-loading command group: imports command modules only when invoked.
_COMMANDS = {
    "build": ("llmifier.commands.cmd_build", "build"),
    "init":  ("llmifier.commands.cmd_init",  "init"),
    "api":   ("llmifier.commands.cmd_api",   "api_cmd"),
    "files": ("llmifier.commands.cmd_files", "files_cmd"),
}


class LazyGroup(click.Group):
    """A Click group that lazy-loads command modules on first access."""

    def list_commands(self, ctx):
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx, cmd_name):
        if cmd_name not in _COMMANDS:
            return None
        module_path, attr_name = _COMMANDS[cmd_name]
        import importlib
        mod = importlib.import_module(module_path)
        return getattr(mod, attr_name)

    def format_epilog(self, ctx, formatter):
        formatter.write("\nExit codes:\n")
        for code, text in sorted(DESCRIPTIONS.items()):
            formatter.write(f"  {code}  {text}\n")


class _EchoHandler(logging.Handler):
    """Routes log records through click so CliRunner captures them."""

    def emit(self, record):
        click.echo(self.format(record), err=True)


def configure_logging(verbose: bool) -> None:
    """Warnings always reach stderr; ``verbose`` adds debug detail."""
    logger = logging.getLogger("llmifier")
    if not any(isinstance(h, _EchoHandler) for h in logger.handlers):
        handler = _EchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group(cls=LazyGroup)
@click.version_option(package_name="llmifier")
@click.option('--json', 'json_mode', is_flag=True, help='Output in JSON format')
@click.option('-l', '--verbose', is_flag=True, help='Log progress details to stderr')
@click.pass_context
def cli(ctx, json_mode, verbose):
    """llmifier: turn a Dart project into one LLM-ready text file."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = json_mode
    ctx.obj['verbose'] = verbose
    configure_logging(verbose)
