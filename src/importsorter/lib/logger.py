"""logger — JSONL telemetry for sort runs.

With ``logging.enabled`` set, every call to the engine appends one JSON line
to ``importsorter.jsonl`` inside ``logging.directory``.  A line records which
file was sorted, whether it changed, how many imports and groups were
involved, a short hash of the input and how long the sort took.  Nothing is
written when the directory is empty.
"""

from __future__ import annotations

import datetime
import hashlib
import json
from pathlib import Path
from typing import Any

from importsorter.lib import config


def _utc_now() -> str:
    stamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
    return stamp.replace(
        config.get_str("formatting.utc_offset_source"),
        config.get_str("formatting.utc_offset_replacement"),
    )


def source_hash(source: str) -> str:
    """Return the truncated, prefixed SHA-256 of ``source``."""
    digest = hashlib.sha256(source.encode("utf-8")).hexdigest()
    keep = config.get_int("defaults.hash_truncation_length")
    return config.get_str("formatting.hash_prefix") + digest[:keep]


def build_entry(
    filepath: str,
    status: str,
    import_count: int,
    group_count: int,
    source: str,
    sort_ms: int,
) -> dict[str, Any]:
    """Assemble one telemetry record.

    Args:
        filepath: Path of the sorted file.
        status: ``sorted`` or ``unchanged``.
        import_count: Import statements found.
        group_count: Groups written back.
        source: The input source text.
        sort_ms: Duration in milliseconds.

    Returns:
        JSON-ready mapping.
    """
    return {
        "timestamp": _utc_now(),
        "event": "sort",
        "file": filepath,
        "status": status,
        "imports": import_count,
        "groups": group_count,
        "code_length_lines": len(source.splitlines()),
        "code_hash": source_hash(source),
        "sort_ms": sort_ms,
    }


def log_sort(
    log_dir: str,
    filepath: str,
    status: str,
    import_count: int,
    group_count: int,
    source: str,
    sort_ms: int,
) -> None:
    """Append a record for one sort to the JSONL log in ``log_dir``.

    The directory is created when missing; an empty ``log_dir`` is a no-op.
    Arguments after ``log_dir`` are those of :func:`build_entry`.
    """
    if not log_dir:
        return
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    entry = build_entry(filepath, status, import_count, group_count, source, sort_ms)
    line = json.dumps(entry, separators=tuple(config.get_list("formatting.json_separators")))
    with open(directory / config.get_str("filenames.sort_log"), "a", encoding="utf-8") as fh:
        fh.write(line + "\n")
