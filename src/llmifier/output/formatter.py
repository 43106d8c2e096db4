"""Plain-text and JSON formatting helpers for CLI output."""

from __future__ import annotations

import json as _json
from datetime import datetime, timezone

# Envelope schema versioning (semver: major.minor.patch)
ENVELOPE_SCHEMA_VERSION = "1.0.0"
ENVELOPE_SCHEMA_NAME = "llmifier-envelope-v1"

# Conservative heuristic: 1 token ~ 4 characters (works for English + code).
_CHARS_PER_TOKEN = 4


def format_table(headers: list[str], rows: list[list[str]], budget: int = 0) -> str:
    if not rows:
        return "(none)"
    widths = [len(h) for h in headers]
    num_cols = len(widths)
    for row in rows:
        for i, cell in enumerate(row):
            if i < num_cols:
                widths[i] = max(widths[i], len(str(cell)))
    lines = []
    lines.append("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    lines.append("  ".join("-" * w for w in widths))
    display_rows = rows
    if budget and len(rows) > budget:
        display_rows = rows[:budget]
    for row in display_rows:
        lines.append("  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    if budget and len(rows) > budget:
        lines.append(f"(+{len(rows) - budget} more)")
    return "\n".join(lines)


def to_json(data) -> str:
    """Serialize data to a JSON string with deterministic key ordering."""
    return _json.dumps(data, indent=2, default=str, sort_keys=True)


def estimate_tokens(text: str) -> int:
    """Estimate token count from character length (1 token ~ 4 chars)."""
    if not text:
        return 0
    return max(1, len(text) // _CHARS_PER_TOKEN)


def _get_version() -> str:
    from llmifier import __version__

    return __version__


def json_envelope(command: str, summary: dict | None = None, **payload) -> dict:
    """Wrap command output in a self-describing envelope.

    Non-deterministic metadata (``timestamp``) lives in ``_meta`` so the
    remaining keys are stable across invocations::

        {
            "schema": "llmifier-envelope-v1",
            "command": "build",
            "version": "<current>",
            "summary": { ... },
            "_meta": {"timestamp": "2026-02-12T14:30:00Z"},
            ...payload
        }
    """
    ts = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
    return {
        "schema": ENVELOPE_SCHEMA_NAME,
        "schema_version": ENVELOPE_SCHEMA_VERSION,
        "command": command,
        "version": _get_version(),
        "summary": summary or {},
        "_meta": {"timestamp": ts},
        **payload,
    }
