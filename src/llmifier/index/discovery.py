"""File discovery: recursive walk with glob include/exclude filtering."""

from __future__ import annotations

import logging
import os
import re
from functools import lru_cache
from pathlib import Path

from llmifier.config.settings import Configuration
from llmifier.exit_codes import ProjectNotFoundError
from llmifier.index.models import FileEntry, FileMetadata

log = logging.getLogger(__name__)


@lru_cache(maxsize=512)
def glob_to_regex(pattern: str) -> re.Pattern:
    """Compile a glob into a regex anchored on the whole relative path.

    ``*`` and ``?`` never cross ``/``; ``**`` does, and ``**/`` also
    matches zero directories.
    """
    pat = pattern.replace("\\", "/")
    parts: list[str] = []
    i = 0
    while i < len(pat):
        c = pat[i]
        if c == "*":
            if i + 1 < len(pat) and pat[i + 1] == "*":
                if i + 2 < len(pat) and pat[i + 2] == "/":
                    parts.append("(?:.+/)?")
                    i += 3
                    continue
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(c))
        i += 1
    return re.compile("^" + "".join(parts) + "$")


def matches_glob(file_path: str, pattern: str) -> bool:
    """Check if a relative path (forward slashes) matches a glob pattern."""
    norm = file_path.replace("\\", "/")
    return glob_to_regex(pattern).match(norm) is not None


def matches_any(file_path: str, patterns: list[str]) -> bool:
    return any(matches_glob(file_path, p) for p in patterns)


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    """Directories first, then files; each alphabetical by name."""
    with os.scandir(directory) as it:
        entries = list(it)
    return sorted(entries, key=lambda e: (not e.is_dir(follow_symlinks=False), e.name))


def _read_entry(full_path: Path, rel_path: str) -> FileEntry | None:
    try:
        content = full_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Could not read file %s: %s", rel_path, exc)
        return None
    return FileEntry(rel_path, content, FileMetadata.from_relative_path(rel_path))


def _walk(root: Path, directory: Path, config: Configuration, results: list[FileEntry]) -> None:
    try:
        entries = _sorted_entries(directory)
    except OSError as exc:
        log.warning("Could not list directory %s: %s", directory, exc)
        return

    for entry in entries:
        if entry.name.startswith(".") or entry.is_symlink():
            log.debug("skipping hidden entry or link: %s", entry.name)
            continue
        rel_path = os.path.relpath(entry.path, root).replace("\\", "/")
        is_dir = entry.is_dir(follow_symlinks=False)
        if matches_any(rel_path, config.exclude_patterns):
            log.debug("excluded %s: %s", "directory" if is_dir else "file", rel_path)
            continue
        if is_dir:
            _walk(root, Path(entry.path), config, results)
            continue
        if config.include_patterns and not matches_any(rel_path, config.include_patterns):
            log.debug("not included: %s", rel_path)
            continue
        file_entry = _read_entry(Path(entry.path), rel_path)
        if file_entry is not None:
            log.debug("added %s (depth %d)", rel_path, file_entry.metadata.depth)
            results.append(file_entry)


def discover_files(config: Configuration) -> list[FileEntry]:
    """Collect the project files selected by the configuration's glob patterns.

    Hidden entries and symlinks are never followed. The result is in walk
    order; final ordering happens in :mod:`llmifier.index.ordering`.

    Raises ProjectNotFoundError if the project directory does not exist.
    """
    root = Path(config.project_path)
    if not root.is_dir():
        raise ProjectNotFoundError(config.project_path)
    log.debug("include patterns: %s", config.include_patterns)
    log.debug("exclude patterns: %s", config.exclude_patterns)
    results: list[FileEntry] = []
    _walk(root, root, config, results)
    log.debug("discovered %d files under %s", len(results), root.resolve())
    return results
