"""Tests for the output document writer, project processing and formatting helpers."""

from __future__ import annotations

from datetime import datetime

import pytest

from llmifier import PACKAGE_URL, REPOSITORY_URL, __version__
from llmifier.config.settings import Configuration, ExtractionMode, ProjectType
from llmifier.index.discovery import discover_files
from llmifier.index.models import FileEntry, FileMetadata
from llmifier.output.formatter import (
    ENVELOPE_SCHEMA_NAME,
    estimate_tokens,
    format_table,
    json_envelope,
    to_json,
)
from llmifier.output.writer import RULE, TextOutputWriter
from llmifier.processing.project import ProjectContext, ProjectProcessor, read_pubspec


def make_context(files, **kwargs):
    defaults = dict(
        type=ProjectType.DART,
        files=files,
        extraction_time=datetime(2026, 1, 2, 3, 4, 5, 678),
    )
    defaults.update(kwargs)
    return ProjectContext(**defaults)


def entry(path, content):
    return FileEntry(path, content, FileMetadata.from_relative_path(path))


# ===========================================================================
# Formatter
# ===========================================================================


class TestFormatter:
    def test_estimate_tokens(self):
        assert estimate_tokens("") == 0
        assert estimate_tokens("abc") == 1
        assert estimate_tokens("a" * 40) == 10

    def test_format_table(self):
        table = format_table(["name", "n"], [["alpha", "1"], ["b", "22"]])
        lines = table.splitlines()
        assert lines[0].rstrip() == "name   n"
        assert lines[1] == "-----  --"
        assert lines[2] == "alpha  1"

    def test_format_table_empty_and_budget(self):
        assert format_table(["a"], []) == "(none)"
        table = format_table(["a"], [["1"], ["2"], ["3"]], budget=2)
        assert table.splitlines()[-1] == "(+1 more)"

    def test_json_envelope(self):
        data = json_envelope("build", summary={"files": 1}, files=["a"])
        assert data["schema"] == ENVELOPE_SCHEMA_NAME
        assert data["command"] == "build"
        assert data["summary"] == {"files": 1}
        assert data["files"] == ["a"]
        assert data["_meta"]["timestamp"].endswith("Z")

    def test_to_json_is_sorted(self):
        assert to_json({"b": 1, "a": 2}).index('"a"') < to_json({"b": 1, "a": 2}).index('"b"')


# ===========================================================================
# pubspec.yaml
# ===========================================================================


class TestReadPubspec:
    @pytest.mark.parametrize("content,expected", [
        ("name: demo\nversion: 1.2.3\n", ("demo", "1.2.3")),
        ("name: demo\nversion: 2.0\n", ("demo", "2.0")),
        ("name: demo\nversion: 3\n", ("demo", "3")),
        ("name: demo\n", ("demo", None)),
        ("version: 1.0.0\n", (None, "1.0.0")),
        ("- not a mapping\n", (None, None)),
        ("", (None, None)),
        ("name: [unclosed\n", (None, None)),
        ("name: 7\nversion: true\n", (None, None)),
    ])
    def test_read_pubspec(self, content, expected):
        assert read_pubspec(content) == expected


# ===========================================================================
# ProjectProcessor
# ===========================================================================


class TestProjectProcessor:
    def test_full_mode_keeps_content_and_orders(self, dart_project):
        config = Configuration(project_path=str(dart_project))
        context = ProjectProcessor(config).process(discover_files(config))
        assert [f.relative_path for f in context.files] == [
            "README.md",
            "CHANGELOG.md",
            "pubspec.yaml",
            "bin/demo.dart",
            "lib/demo.dart",
            "lib/src/broken.dart",
            "lib/src/counter.dart",
            "example/main.dart",
            "test/counter_test.dart",
        ]
        assert context.package_name == "demo"
        assert context.package_version == "1.2.0"
        assert context.fallbacks == []
        counter = next(f for f in context.files if f.relative_path == "lib/src/counter.dart")
        assert "_count++" in counter.content

    def test_api_mode_extracts_and_falls_back(self, dart_project):
        config = Configuration(project_path=str(dart_project), mode=ExtractionMode.API)
        context = ProjectProcessor(config).process(discover_files(config))
        by_path = {f.relative_path: f.content for f in context.files}
        assert by_path["lib/src/counter.dart"] == (
            "/// Counts things.\n"
            "class Counter {\n"
            "  /// Current count.\n"
            "  int get count;\n"
            "\n"
            "  /// Adds one.\n"
            "  void increment();\n"
            "}\n"
        )
        assert by_path["lib/demo.dart"] == ""
        assert by_path["lib/src/broken.dart"] == "class Broken {\n  void oops() {\n"
        assert by_path["README.md"].startswith("# demo")
        assert context.fallbacks == ["lib/src/broken.dart"]

    def test_nested_pubspec_is_not_metadata(self, project_factory):
        root = project_factory({"example/pubspec.yaml": "name: example_app\n"})
        config = Configuration(project_path=str(root))
        context = ProjectProcessor(config).process(discover_files(config))
        assert context.package_name is None


# ===========================================================================
# TextOutputWriter
# ===========================================================================


class TestTextOutputWriter:
    def test_header_sections_footer(self):
        context = make_context(
            [entry("README.md", "# Title\n"), entry("lib/a.dart", "void f();")],
            package_name="demo",
            package_version="1.0.0",
        )
        text = TextOutputWriter().render(context, Configuration())
        lines = text.splitlines()
        assert lines[0] == "# Project: demo"
        assert lines[1] == "# Version: 1.0.0"
        assert lines[2] == "# Type: dart"
        assert lines[3] == "# Mode: full"
        assert lines[4] == "# Files: 2"
        assert lines[6] == "# Generated: 2026-01-02T03:04:05"
        assert f"{RULE}\nFile: README.md\n{RULE}\n# Title\n" in text
        assert f"{RULE}\nFile: lib/a.dart\n{RULE}\nvoid f();\n" in text
        assert text.index("File: README.md") < text.index("File: lib/a.dart")
        assert text.endswith(
            f"{RULE}\nGenerated by llmifier {__version__}\n"
            f"Source: {REPOSITORY_URL}\nPackage: {PACKAGE_URL}\n"
        )

    def test_missing_package_info(self, tmp_path):
        project = tmp_path / "my_pkg"
        project.mkdir()
        context = make_context([])
        text = TextOutputWriter().render(context, Configuration(project_path=str(project)))
        assert "# Project: my_pkg" in text
        assert "# Version: unknown" in text
        assert "File:" not in text

    def test_fallbacks_are_listed(self):
        context = make_context([entry("lib/b.dart", "class B {")], fallbacks=["lib/b.dart"])
        text = TextOutputWriter().render(context, Configuration(mode=ExtractionMode.API))
        assert "# Mode: api" in text
        assert "# Included verbatim (could not be parsed): lib/b.dart" in text

    def test_empty_content_section(self):
        context = make_context([entry("lib/empty.dart", "")])
        text = TextOutputWriter().render(context, Configuration())
        assert f"File: lib/empty.dart\n{RULE}\n" in text

    def test_write_creates_parent_directories(self, tmp_path):
        output = tmp_path / "out" / "nested" / "llms.txt"
        context = make_context([entry("README.md", "hi\n")])
        path = TextOutputWriter().write(context, Configuration(output_path=str(output)))
        assert path == output
        assert output.read_text(encoding="utf-8").startswith("# Project:")
