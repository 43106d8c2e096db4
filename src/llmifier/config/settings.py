"""Effective configuration of one llmifier run and its defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

CONFIG_FILE_NAME = "llmifierrc.yaml"
DEFAULT_OUTPUT_PATH = "llms.txt"

DEFAULT_INCLUDE_PATTERNS: tuple[str, ...] = (
    "**README.md",
    "**CHANGELOG.md",
    "**LICENSE",
    "**CONTRIBUTING.md",
    "**pubspec.yaml",
    "**lib/**.dart",
    "**bin/**.dart",
    "**test/**.dart",
    "**example/**.dart",
)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # generated code
    "*.g.dart",
    "**/*.g.dart",
    "*.freezed.dart",
    "**/*.freezed.dart",
    # build output, tooling and platform folders
    "**build",
    "**.dart_tool",
    "**.git",
    "**.github",
    "**.idea",
    "**.vscode",
    "**node_modules",
    "**ios",
    "**android",
    "**web",
    "**macos",
    "**linux",
    "**windows",
    # hidden files and previous outputs
    ".*",
    "**/.*",
    "llms*.txt",
    "**/llms*.txt",
)


class ExtractionMode(str, Enum):
    FULL = "full"
    API = "api"


class ProjectType(str, Enum):
    DART = "dart"
    FLUTTER = "flutter"


class SortBy(str, Enum):
    ALPHABETICAL = "alphabetical"
    DEPTH_FIRST = "depthFirst"


@dataclass(frozen=True)
class FileGroup:
    """Named bucket of files in the output, matched by glob patterns."""

    name: str
    patterns: tuple[str, ...]
    order: tuple[str, ...] = ()
    sort_by: SortBy = SortBy.ALPHABETICAL

    def __post_init__(self):
        if not self.name:
            raise ValueError("File group name must not be empty")
        if not self.patterns:
            raise ValueError(f"File group '{self.name}' needs at least one pattern")


@dataclass
class Configuration:
    output_path: str = DEFAULT_OUTPUT_PATH
    project_path: str = "."
    project_type: ProjectType = ProjectType.DART
    mode: ExtractionMode = ExtractionMode.FULL
    include_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS))
    exclude_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    verbose: bool = False
    file_groups: list[FileGroup] | None = None

    def to_dict(self) -> dict:
        return {
            "output": self.output_path,
            "project": self.project_path,
            "projectType": self.project_type.value,
            "mode": self.mode.value,
            "include": list(self.include_patterns),
            "exclude": list(self.exclude_patterns),
            "verbose": self.verbose,
            "fileGroups": [g.name for g in self.file_groups] if self.file_groups else None,
        }
