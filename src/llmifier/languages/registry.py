"""Language detection and extractor registry."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import ApiExtractor

# Extensions whose content can be reduced to a public surface.
_EXTENSION_MAP: dict[str, str] = {
    ".dart": "dart",
}

_SUPPORTED_LANGUAGES = frozenset(_EXTENSION_MAP.values())


def get_language_for_file(path: str) -> str | None:
    """Determine the language for a file based on its extension.

    Returns the language name string, or None if unsupported.
    """
    _, ext = os.path.splitext(path)
    return _EXTENSION_MAP.get(ext.lower())


@lru_cache(maxsize=None)
def _create_extractor(language: str) -> "ApiExtractor":
    """Create and cache an extractor instance for a language."""
    if language == "dart":
        from .dart_lang import DartApiExtractor

        return DartApiExtractor()
    raise ValueError(f"Unsupported language: {language}")


def get_extractor(language: str) -> "ApiExtractor":
    """Get an extractor instance for a language.

    Raises:
        ValueError: If the language is not supported.
    """
    if language not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")
    return _create_extractor(language)


def get_extractor_for_file(path: str) -> "ApiExtractor | None":
    """Get an extractor instance for a file based on its extension.

    Returns None if the file type is not supported.
    """
    language = get_language_for_file(path)
    if language is None:
        return None
    return _create_extractor(language)


def get_supported_extensions() -> list[str]:
    """Return all supported file extensions."""
    return sorted(_EXTENSION_MAP)


def get_supported_languages() -> list[str]:
    """Return all supported language names."""
    return sorted(_SUPPORTED_LANGUAGES)
