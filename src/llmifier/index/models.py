from __future__ import annotations

import os
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class FileMetadata:
    depth: int
    extension: str

    @classmethod
    def from_relative_path(cls, relative_path: str) -> FileMetadata:
        """Depth is the number of directories above the file (``lib/a.dart`` -> 1)."""
        norm = relative_path.replace("\\", "/")
        if norm.startswith("./"):
            norm = norm[2:]
        directory = os.path.dirname(norm)
        depth = len([part for part in directory.split("/") if part]) if directory else 0
        _, ext = os.path.splitext(norm)
        return cls(depth=depth, extension=ext.lower())


@dataclass(frozen=True)
class FileEntry:
    relative_path: str
    content: str
    metadata: FileMetadata

    @property
    def basename(self) -> str:
        return os.path.basename(self.relative_path)

    def with_content(self, content: str) -> FileEntry:
        return replace(self, content=content)
