"""Shared test fixtures and helpers for llmifier tests.

Provides:
- CliRunner fixtures: cli_runner, invoke_cli
- Factory fixture: project_factory for custom file layouts
- A small Dart package fixture: dart_project
- JSON validation helpers: parse_json, check_envelope
"""

from __future__ import annotations

import json
import logging
import os

import pytest
from click.testing import CliRunner

# ===========================================================================
# CliRunner helpers
# ===========================================================================


@pytest.fixture
def cli_runner():
    """Provide a Click CliRunner for in-process CLI testing."""
    return CliRunner()


@pytest.fixture
def invoke_cli(cli_runner):
    """Invoke the llmifier CLI in-process.

    Usage::

        result = invoke_cli(["build", "-m", "api"], cwd=project, json_mode=True)
    """
    from llmifier.cli import cli

    def _invoke(args, cwd=None, json_mode=False):
        full_args = []
        if json_mode:
            full_args.append("--json")
        full_args.extend(args)

        old_cwd = os.getcwd()
        try:
            if cwd:
                os.chdir(str(cwd))
            result = cli_runner.invoke(cli, full_args, catch_exceptions=False)
        finally:
            os.chdir(old_cwd)
        return result

    return _invoke


@pytest.fixture(autouse=True)
def _reset_llmifier_logger():
    """The CLI adjusts the package logger level; restore it between tests."""
    logger = logging.getLogger("llmifier")
    level = logger.level
    yield
    logger.setLevel(level)


# ===========================================================================
# JSON validation helpers
# ===========================================================================


@pytest.fixture
def parse_json():
    def _parse(result, command=None):
        assert result.exit_code == 0, (
            f"Command {command or '?'} failed (exit {result.exit_code}):\n{result.output}"
        )
        try:
            return json.loads(result.output)
        except json.JSONDecodeError as e:
            pytest.fail(f"Invalid JSON from {command or '?'}: {e}\nOutput was:\n{result.output[:500]}")

    return _parse


@pytest.fixture
def check_envelope():
    def _check(data, command=None):
        assert isinstance(data, dict), f"Expected dict, got {type(data)}"
        for key in ("schema", "command", "version", "summary"):
            assert key in data, f"Missing '{key}' key in envelope"
        assert "timestamp" in data.get("_meta", {}), "Missing '_meta.timestamp'"
        if command:
            assert data["command"] == command
        assert isinstance(data["summary"], dict)

    return _check


# ===========================================================================
# Project fixtures
# ===========================================================================


@pytest.fixture
def project_factory(tmp_path_factory):
    """Factory fixture for creating custom project layouts.

    Usage::

        def test_something(project_factory):
            proj = project_factory({
                "pubspec.yaml": "name: demo\\n",
                "lib/demo.dart": "void main() {}\\n",
            })
    """

    def _create(files):
        root = tmp_path_factory.mktemp("proj")
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _create


DART_PROJECT_FILES = {
    "README.md": "# demo\n\nA small demo package.\n",
    "CHANGELOG.md": "## 1.2.0\n\n- Initial release.\n",
    "pubspec.yaml": "name: demo\nversion: 1.2.0\nenvironment:\n  sdk: ^3.0.0\n",
    "analysis_options.yaml": "include: package:lints/recommended.yaml\n",
    "lib/demo.dart": "library demo;\n\nexport 'src/counter.dart';\n",
    "lib/src/counter.dart": (
        "/// Counts things.\n"
        "class Counter {\n"
        "  int _count = 0;\n"
        "\n"
        "  /// Current count.\n"
        "  int get count => _count;\n"
        "\n"
        "  /// Adds one.\n"
        "  void increment() {\n"
        "    _count++;\n"
        "  }\n"
        "\n"
        "  void _reset() => _count = 0;\n"
        "}\n"
    ),
    "lib/src/broken.dart": "class Broken {\n  void oops() {\n",
    "lib/src/counter.g.dart": "// generated\n",
    "bin/demo.dart": "void main(List<String> args) {\n  print(args);\n}\n",
    "test/counter_test.dart": "void main() {\n  // tests\n}\n",
    "example/main.dart": "void main() {}\n",
    "tool/notes.txt": "not included by default\n",
    ".hidden/secret.dart": "void hidden() {}\n",
    "build/out.dart": "void built() {}\n",
}


@pytest.fixture
def dart_project(project_factory):
    """A Dart package with docs, metadata, library, bin, test and example files."""
    return project_factory(DART_PROJECT_FILES)
