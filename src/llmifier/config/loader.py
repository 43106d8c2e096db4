"""Configuration loading: defaults, then llmifierrc.yaml, then CLI options.

Later sources win. Values of the wrong type in the YAML file are ignored
(the previous value stays) so a partially broken file still applies
whatever it gets right.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from llmifier.config.settings import (
    CONFIG_FILE_NAME,
    Configuration,
    ExtractionMode,
    FileGroup,
    ProjectType,
    SortBy,
)

log = logging.getLogger(__name__)


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse *path* as YAML. An empty file is an empty mapping.

    Raises ValueError when the document is not a mapping.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("configuration file content must be a YAML mapping")
    return {k: v for k, v in data.items() if isinstance(k, str)}


def _get_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    log.debug("config: invalid type for '%s' (expected str, got %s), ignored",
              key, type(value).__name__)
    return None


def _get_str_list(data: dict, key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        log.debug("config: invalid type for '%s' (expected list, got %s), ignored",
                  key, type(value).__name__)
        return None
    if not all(isinstance(item, str) for item in value):
        log.debug("config: list '%s' contains non-string items, ignored", key)
        return None
    return list(value)


def _parse_enum(enum_cls, raw: str | None, key: str):
    if raw is None:
        return None
    for member in enum_cls:
        if member.value.lower() == raw.lower():
            return member
    log.debug("config: invalid value '%s' for '%s', ignored", raw, key)
    return None


def parse_file_groups(raw: Any) -> list[FileGroup] | None:
    """Build custom ordering groups from the ``fileOrdering.groups`` list.

    Returns None (use the built-in groups) when the section is absent or
    invalid.
    """
    if raw is None:
        return None
    if not isinstance(raw, list):
        log.warning("fileOrdering.groups must be a list, using default file ordering")
        return None
    groups = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            log.warning("fileOrdering.groups[%d] is not a mapping, using default file ordering", index)
            return None
        patterns = _get_str_list(entry, "patterns") or []
        order = _get_str_list(entry, "order") or []
        sort_by = _parse_enum(SortBy, _get_str(entry, "sortBy"), "sortBy") or SortBy.ALPHABETICAL
        try:
            groups.append(FileGroup(
                name=_get_str(entry, "name") or "",
                patterns=tuple(patterns),
                order=tuple(order),
                sort_by=sort_by,
            ))
        except ValueError as exc:
            log.warning("invalid file group #%d: %s, using default file ordering", index, exc)
            return None
    return groups or None


def merge_yaml(config: Configuration, data: dict[str, Any]) -> Configuration:
    changes: dict[str, Any] = {}
    output = _get_str(data, "output")
    if output is not None:
        changes["output_path"] = output
    project = _get_str(data, "project")
    if project is not None:
        changes["project_path"] = project
    project_type = _parse_enum(ProjectType, _get_str(data, "projectType"), "projectType")
    if project_type is not None:
        changes["project_type"] = project_type
    mode = _parse_enum(ExtractionMode, _get_str(data, "mode"), "mode")
    if mode is not None:
        changes["mode"] = mode
    include = _get_str_list(data, "include")
    if include is not None:
        changes["include_patterns"] = include
    exclude = _get_str_list(data, "exclude")
    if exclude is not None:
        changes["exclude_patterns"] = exclude
    verbose = data.get("verbose")
    if isinstance(verbose, bool):
        changes["verbose"] = verbose
    elif verbose is not None:
        log.debug("config: invalid type for 'verbose' (expected bool), ignored")
    ordering = data.get("fileOrdering")
    if isinstance(ordering, dict):
        groups = parse_file_groups(ordering.get("groups"))
        if groups is not None:
            changes["file_groups"] = groups
    return dataclasses.replace(config, **changes)


def merge_cli(config: Configuration, options: dict[str, Any]) -> Configuration:
    """Apply CLI options. Include/exclude lists replace earlier ones when given."""
    changes: dict[str, Any] = {}
    if options.get("output"):
        changes["output_path"] = options["output"]
    if options.get("project"):
        changes["project_path"] = options["project"]
    if options.get("project_type"):
        changes["project_type"] = ProjectType(options["project_type"])
    if options.get("mode"):
        changes["mode"] = ExtractionMode(options["mode"])
    if options.get("include"):
        changes["include_patterns"] = list(options["include"])
    if options.get("exclude"):
        changes["exclude_patterns"] = list(options["exclude"])
    if options.get("verbose"):
        changes["verbose"] = True
    return dataclasses.replace(config, **changes)


def load_configuration(options: dict[str, Any] | None = None) -> Configuration:
    """Merge defaults, the project's llmifierrc.yaml and *options* (CLI values).

    The output file name is always added to the exclude patterns so a run
    never reads its own previous output.
    """
    options = options or {}
    config = Configuration()
    project_path = options.get("project") or config.project_path
    config_file = Path(project_path) / CONFIG_FILE_NAME
    log.debug("looking for configuration file at %s", config_file)

    if config_file.is_file():
        try:
            data = read_config_file(config_file)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            log.warning("Could not load or parse configuration file %s: %s", config_file, exc)
            log.warning("Continuing with default settings and CLI arguments.")
        else:
            config = merge_yaml(config, data)
            log.debug("merged configuration from %s", config_file)
    else:
        log.debug("no configuration file, using defaults and CLI arguments")

    config = merge_cli(config, options)

    output_name = os.path.basename(config.output_path)
    if output_name and output_name not in config.exclude_patterns:
        config.exclude_patterns = [*config.exclude_patterns, output_name]
    return config
