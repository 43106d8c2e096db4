"""Tests for language detection and the extractor registry."""

from __future__ import annotations

import pytest

from llmifier.languages.base import ApiExtractor, ExtractionError
from llmifier.languages.dart_lang import DartApiExtractor
from llmifier.languages.registry import (
    get_extractor,
    get_extractor_for_file,
    get_language_for_file,
    get_supported_extensions,
    get_supported_languages,
)


class TestLanguageDetection:
    @pytest.mark.parametrize("path,language", [
        ("lib/a.dart", "dart"),
        ("lib/A.DART", "dart"),
        ("README.md", None),
        ("pubspec.yaml", None),
        ("Makefile", None),
    ])
    def test_get_language_for_file(self, path, language):
        assert get_language_for_file(path) == language

    def test_supported(self):
        assert get_supported_extensions() == [".dart"]
        assert get_supported_languages() == ["dart"]


class TestExtractors:
    def test_extractor_is_cached(self):
        first = get_extractor("dart")
        assert isinstance(first, DartApiExtractor)
        assert get_extractor_for_file("bin/main.dart") is first

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            get_extractor("cobol")

    def test_unsupported_file(self):
        assert get_extractor_for_file("notes.txt") is None

    def test_dart_extractor_metadata(self):
        extractor = get_extractor("dart")
        assert isinstance(extractor, ApiExtractor)
        assert extractor.language_name == "dart"
        assert extractor.file_extensions == [".dart"]

    def test_extraction_error_carries_diagnostics(self):
        with pytest.raises(ExtractionError) as excinfo:
            get_extractor("dart").extract_api("class A {", "lib/a.dart")
        assert excinfo.value.diagnostics
        assert "syntax error" in str(excinfo.value)


class TestSourceSpan:
    def test_slice_is_right_trimmed(self):
        assert DartApiExtractor().source_span("int x;   \n", 0, 10) == "int x;"

    @pytest.mark.parametrize("start,end", [(-1, 3), (2, 1), (0, 99)])
    def test_invalid_range_placeholder(self, start, end):
        text = DartApiExtractor().source_span("abc", start, end)
        assert text == f"/* Error: Invalid source range ({start}..{end}) */"
