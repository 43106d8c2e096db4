"""Assemble the processed project into the single output document."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from llmifier import PACKAGE_URL, REPOSITORY_URL, __version__
from llmifier.config.settings import Configuration
from llmifier.output.formatter import estimate_tokens
from llmifier.processing.project import ProjectContext

log = logging.getLogger(__name__)

RULE = "=" * 80


def _project_name(context: ProjectContext, config: Configuration) -> str:
    if context.package_name:
        return context.package_name
    return os.path.basename(os.path.abspath(config.project_path)) or config.project_path


def _file_section(relative_path: str, content: str) -> str:
    body = content if content.endswith("\n") or not content else content + "\n"
    return f"{RULE}\nFile: {relative_path}\n{RULE}\n{body}"


class TextOutputWriter:
    """Plain-text document: header, one framed section per file, footer."""

    def render(self, context: ProjectContext, config: Configuration) -> str:
        sections = [_file_section(f.relative_path, f.content) for f in context.files]
        body = "\n".join(sections)
        tokens = sum(estimate_tokens(f.content) for f in context.files)

        header = [
            f"# Project: {_project_name(context, config)}",
            f"# Version: {context.package_version or 'unknown'}",
            f"# Type: {context.type.value}",
            f"# Mode: {config.mode.value}",
            f"# Files: {len(context.files)}",
            f"# Estimated tokens: {tokens}",
            f"# Generated: {context.extraction_time.replace(microsecond=0).isoformat()}",
        ]
        if context.fallbacks:
            header.append(f"# Included verbatim (could not be parsed): {', '.join(context.fallbacks)}")
        footer = [
            RULE,
            f"Generated by llmifier {__version__}",
            f"Source: {REPOSITORY_URL}",
            f"Package: {PACKAGE_URL}",
        ]
        parts = ["\n".join(header) + "\n"]
        if body:
            parts.append(body)
        parts.append("\n".join(footer) + "\n")
        return "\n".join(parts)

    def write(self, context: ProjectContext, config: Configuration) -> Path:
        """Render and write to ``config.output_path``; returns the written path."""
        path = Path(config.output_path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        text = self.render(context, config)
        path.write_text(text, encoding="utf-8")
        log.debug("wrote %d characters to %s", len(text), path)
        return path
