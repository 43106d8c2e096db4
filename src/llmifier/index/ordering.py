"""Output ordering: files are bucketed into groups, each group sorted on its own."""

from __future__ import annotations

from functools import cmp_to_key

from llmifier.config.settings import FileGroup, SortBy
from llmifier.index.discovery import matches_any
from llmifier.index.models import FileEntry

OTHER_GROUP = "Other"

DOCUMENTATION_FILES = ("README.md", "CHANGELOG.md", "LICENSE", "CONTRIBUTING.md")
METADATA_FILES = ("pubspec.yaml", "analysis_options.yaml", "build.yaml")

DEFAULT_FILE_GROUPS: tuple[FileGroup, ...] = (
    FileGroup("Documentation", DOCUMENTATION_FILES, order=DOCUMENTATION_FILES),
    FileGroup("Metadata", METADATA_FILES, order=METADATA_FILES),
    FileGroup("Executable", ("bin/**",), sort_by=SortBy.DEPTH_FIRST),
    FileGroup("API", ("lib/**",), sort_by=SortBy.DEPTH_FIRST),
    FileGroup("Packages", ("packages/**",)),
    FileGroup("Example", ("example/**",)),
    FileGroup("Test", ("test/**",), sort_by=SortBy.DEPTH_FIRST),
)

_DIGITS = "0123456789"


def compare_natural(a: str, b: str) -> int:
    """Compare strings character-wise, but runs of digits by numeric value."""
    i = j = 0
    while i < len(a) and j < len(b):
        ca, cb = a[i], b[j]
        if ca in _DIGITS and cb in _DIGITS:
            si, sj = i, j
            while i < len(a) and a[i] in _DIGITS:
                i += 1
            while j < len(b) and b[j] in _DIGITS:
                j += 1
            na, nb = int(a[si:i]), int(b[sj:j])
            if na != nb:
                return -1 if na < nb else 1
            # same value: fewer leading zeros first
            if i - si != j - sj:
                return -1 if i - si < j - sj else 1
            continue
        if ca != cb:
            return -1 if ca < cb else 1
        i += 1
        j += 1
    rest_a, rest_b = len(a) - i, len(b) - j
    return (rest_a > rest_b) - (rest_a < rest_b)


natural_key = cmp_to_key(compare_natural)


def _sort_group(group: FileGroup | None, files: list[FileEntry]) -> list[FileEntry]:
    order = {name: index for index, name in enumerate(group.order)} if group else {}
    depth_first = group is not None and group.sort_by == SortBy.DEPTH_FIRST

    def key(entry: FileEntry):
        fixed = order.get(entry.basename)
        return (
            0 if fixed is not None else 1,
            fixed if fixed is not None else 0,
            entry.metadata.depth if depth_first else 0,
            natural_key(entry.relative_path),
        )

    return sorted(files, key=key)


class FileOrderingStrategy:
    """Assigns every file to the first matching group and sorts group by group.

    Files matching no group land in a trailing ``Other`` group sorted in
    natural order.
    """

    def __init__(self, groups: list[FileGroup] | None = None):
        self.groups = list(groups) if groups else list(DEFAULT_FILE_GROUPS)

    def group_of(self, relative_path: str) -> FileGroup | None:
        if not relative_path:
            return None
        for group in self.groups:
            if matches_any(relative_path, list(group.patterns)):
                return group
        return None

    def grouped(self, files: list[FileEntry]) -> list[tuple[str, list[FileEntry]]]:
        """Non-empty groups in output order, each already sorted."""
        buckets: dict[str, list[FileEntry]] = {g.name: [] for g in self.groups}
        buckets.setdefault(OTHER_GROUP, [])
        for entry in files:
            group = self.group_of(entry.relative_path)
            buckets[group.name if group else OTHER_GROUP].append(entry)

        by_name = {g.name: g for g in self.groups}
        result = []
        for name, entries in buckets.items():
            if entries:
                result.append((name, _sort_group(by_name.get(name), entries)))
        return result

    def organize(self, files: list[FileEntry]) -> list[FileEntry]:
        ordered = []
        for _, entries in self.grouped(files):
            ordered.extend(entries)
        return ordered
