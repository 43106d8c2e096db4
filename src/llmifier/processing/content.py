"""Per-file content transformation: verbatim or reduced to the public API."""

from __future__ import annotations

import logging

from llmifier.config.settings import ExtractionMode
from llmifier.languages.base import ApiExtractor, ExtractionError
from llmifier.languages.registry import get_extractor_for_file

log = logging.getLogger(__name__)


class ContentProcessor:
    """Chooses between passthrough and API extraction for one file at a time.

    API extraction never fails a run: if a file cannot be parsed, or the
    extractor raises, the original content is used and a warning logged.
    """

    def __init__(self, mode: ExtractionMode):
        self.mode = mode
        self.fallbacks: list[str] = []

    def supports(self, relative_path: str) -> bool:
        return get_extractor_for_file(relative_path) is not None

    def process(self, relative_path: str, content: str) -> str:
        if self.mode == ExtractionMode.FULL:
            return content
        extractor = get_extractor_for_file(relative_path)
        if extractor is None:
            return content
        return self._extract(extractor, relative_path, content)

    def _extract(self, extractor: ApiExtractor, relative_path: str, content: str) -> str:
        try:
            return extractor.extract_api(content, relative_path)
        except ExtractionError as exc:
            log.warning(
                "Could not fully parse '%s' for API extraction (%s). "
                "Falling back to original content.",
                relative_path, exc,
            )
        except Exception as exc:
            log.warning(
                "Error extracting API from '%s': %s. Falling back to original content.",
                relative_path, exc,
            )
            log.debug("extraction failure in %s", relative_path, exc_info=True)
        self.fallbacks.append(relative_path)
        return content
