"""Project-level processing: content transformation, metadata, ordering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

import yaml

from llmifier.config.settings import Configuration, ProjectType
from llmifier.index.models import FileEntry
from llmifier.index.ordering import FileOrderingStrategy
from llmifier.processing.content import ContentProcessor

log = logging.getLogger(__name__)

PUBSPEC = "pubspec.yaml"


@dataclass
class ProjectContext:
    type: ProjectType
    files: list[FileEntry]
    extraction_time: datetime
    package_name: str | None = None
    package_version: str | None = None
    fallbacks: list[str] = field(default_factory=list)


def read_pubspec(content: str) -> tuple[str | None, str | None]:
    """Return ``(name, version)`` from pubspec.yaml text; a numeric version is stringified."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        log.warning("Could not parse pubspec.yaml: %s", exc)
        return None, None
    if not isinstance(data, dict):
        return None, None
    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str):
        name = None
    if isinstance(version, bool) or not isinstance(version, (str, int, float)):
        version = None
    elif not isinstance(version, str):
        version = str(version)
    return name, version


class ProjectProcessor:
    def __init__(self, config: Configuration):
        self.config = config
        self.content = ContentProcessor(config.mode)
        self.ordering = FileOrderingStrategy(config.file_groups)

    def process_file(self, entry: FileEntry) -> FileEntry:
        if not self.content.supports(entry.relative_path):
            return entry
        log.debug("processing %s (mode: %s)", entry.relative_path, self.config.mode.value)
        processed = self.content.process(entry.relative_path, entry.content)
        if processed == entry.content:
            return entry
        return entry.with_content(processed)

    def process(self, files: list[FileEntry]) -> ProjectContext:
        processed = []
        name = version = None
        for entry in files:
            if entry.relative_path == PUBSPEC:
                name, version = read_pubspec(entry.content)
                log.debug("pubspec.yaml: name=%s version=%s", name, version)
                processed.append(entry)
                continue
            processed.append(self.process_file(entry))

        ordered = self.ordering.organize(processed)
        return ProjectContext(
            type=self.config.project_type,
            files=ordered,
            extraction_time=datetime.now(),
            package_name=name,
            package_version=version,
            fallbacks=list(self.content.fallbacks),
        )
