from __future__ import annotations

from abc import ABC, abstractmethod


class ExtractionError(Exception):
    """Raised when a source file cannot be reduced to its public surface."""

    def __init__(self, message: str, diagnostics: list | None = None):
        super().__init__(message)
        self.diagnostics = diagnostics or []


class ApiExtractor(ABC):
    """Base class for language-specific public surface extraction."""

    @property
    @abstractmethod
    def language_name(self) -> str: ...

    @property
    @abstractmethod
    def file_extensions(self) -> list[str]: ...

    @abstractmethod
    def extract_api(self, source: str, file_path: str = "") -> str:
        """Return the public declarations of *source* with bodies elided.

        Raises ExtractionError when the source does not parse cleanly; the
        caller decides whether to fall back to the original content.
        """
        ...

    def source_span(self, source: str, start: int, end: int) -> str:
        """Right-trimmed slice of *source*; a placeholder for a bad range."""
        if start < 0 or end > len(source) or start > end:
            return f"/* Error: Invalid source range ({start}..{end}) */"
        return source[start:end].rstrip()
