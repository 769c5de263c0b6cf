"""formatter — human and JSON rendering of sort results.

Text output is one status line per file plus a summary line, colourised
through :mod:`importsorter.lib.theme`.  JSON output is a single document
with one entry per file and the same summary counts.  Labels and templates
come from ``config/defaults.yaml``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Optional, Sequence

from importsorter.lib import config
from importsorter.lib.theme import colorize

if TYPE_CHECKING:
    from importsorter.engine import SortResult


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def status_role(result: SortResult, *, check: bool = False) -> str:
    """Return the label/theme role for a result.

    In check mode a result that would change is reported as ``would_sort``.
    """
    if result.changed and check:
        return "would_sort"
    return result.status


def format_result_line(
    filepath: str, result: SortResult, *, check: bool = False, stream: Any = None
) -> str:
    """Format one per-file status line.

    Args:
        filepath: Display path of the file.
        result: The sort result.
        check: Whether the run is in check mode.
        stream: Stream used for the TTY check.

    Returns:
        A single line without trailing newline.
    """
    role = status_role(result, check=check)
    label = config.get_str(f"labels.{role}")
    template = config.get_str("formatting.status_line_template")
    line = template.format(label=label, filepath=filepath)
    if result.reason:
        line += config.get_str("formatting.reason_template").format(reason=result.reason)
    return colorize(line, role, stream=stream)


def format_error_line(filepath: str, message: str, *, stream: Any = None) -> str:
    """Format a per-file failure line."""
    template = config.get_str("formatting.status_line_template")
    line = template.format(label=config.get_str("labels.error"), filepath=filepath)
    line += config.get_str("formatting.reason_template").format(reason=message)
    return colorize(line, "error", stream=stream)


def summarize(results: Sequence[SortResult], errors: int = 0) -> dict[str, int]:
    """Count results by outcome.

    Returns:
        Mapping with ``changed``, ``unchanged``, ``skipped`` and ``errors``.
    """
    skipped = config.get_str("statuses.skipped")
    return {
        "changed": sum(1 for r in results if r.changed),
        "unchanged": sum(1 for r in results if not r.changed and r.status != skipped),
        "skipped": sum(1 for r in results if r.status == skipped),
        "errors": errors,
    }


def format_summary(summary: dict[str, int], *, stream: Any = None) -> str:
    """Format the closing summary line."""
    line = config.get_str("labels.summary").format(**summary)
    return colorize(line, "summary", stream=stream)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def result_to_dict(
    filepath: str, result: Optional[SortResult], *, error: str = "", check: bool = False
) -> dict[str, Any]:
    """Convert one file outcome to a JSON-ready dict."""
    if result is None:
        return {"file": filepath, "status": config.get_str("labels.error"), "error": error}
    return {
        "file": filepath,
        "status": result.status,
        "changed": result.changed,
        "written": result.changed and not check,
        "imports": result.import_count,
        "groups": result.group_count,
        "sort_ms": result.sort_ms,
        "reason": result.reason,
    }


def format_report_json(entries: Sequence[dict[str, Any]], summary: dict[str, int]) -> str:
    """Render the full JSON report.

    Args:
        entries: Per-file dicts from :func:`result_to_dict`.
        summary: Counts from :func:`summarize`.

    Returns:
        Indented JSON text.
    """
    indent = config.get_int("defaults.json_indent")
    return json.dumps({"files": list(entries), "summary": summary}, indent=indent)
