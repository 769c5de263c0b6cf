"""importsorter CLI entry point.

Sorts imports in place, checks whether files are sorted, or filters stdin to
stdout.  Options come from ``--config`` or from the nearest
``.importsorter.yaml`` above each file.  Status lines, warnings and the JSON
report are written to stderr; stdout only ever carries sorted source
(``--stdin``).

Usage::

    importsorter src/app.ts src/index.tsx
    importsorter --check src/*.ts
    importsorter --stdin --filename src/app.ts < src/app.ts
    importsorter --format json --config .importsorter.yaml src/app.ts

Exit codes (from defaults.yaml): 0 ok, 1 files would change (``--check``),
2 errors.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from importsorter import __version__
from importsorter.engine import SortResult, sort_imports
from importsorter.exceptions import ConfigFileError, SourceParseError
from importsorter.lib import config
from importsorter.lib.discovery import find_options_file, load_options_file
from importsorter.lib.formatter import (
    format_error_line,
    format_report_json,
    format_result_line,
    format_summary,
    result_to_dict,
    summarize,
)
from importsorter.lib.models import validate_options


class OptionsCache:
    """Load each options file once and report its problems once."""

    def __init__(self, explicit: Optional[str] = None) -> None:
        self.explicit = explicit
        self._loaded: dict[str, dict[str, Any]] = {}

    def for_file(self, filepath: str) -> dict[str, Any]:
        """Return the options mapping that applies to ``filepath``.

        Raises:
            ConfigFileError: If the options file cannot be loaded.
        """
        path = Path(self.explicit) if self.explicit else find_options_file(filepath or ".")
        if path is None:
            return {}
        key = str(path)
        if key not in self._loaded:
            data = load_options_file(path)
            warning = config.get_str("messages.option_warning")
            for problem in validate_options(data):
                sys.stderr.write(warning.format(source=key, problem=problem) + "\n")
            self._loaded[key] = data
        return self._loaded[key]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    prog = config.get_str("cli.prog_name")
    fmt_text = config.get_str("formats.text")
    fmt_json = config.get_str("formats.json")

    parser = argparse.ArgumentParser(prog=prog, description=config.get_str("cli.description"))
    parser.add_argument("files", nargs="*", help="Files to sort in place")
    parser.add_argument("--stdin", action="store_true", help="Read source from stdin, write to stdout")
    parser.add_argument("--filename", help="Path to assume for stdin input")
    parser.add_argument("--config", help="Options file (default: nearest .importsorter.yaml)")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Report files that would change without writing them",
    )
    parser.add_argument(
        "--format",
        choices=[fmt_text, fmt_json],
        default=fmt_text,
        help="Report format",
    )
    parser.add_argument("--version", action="version", version=f"{prog} {__version__}")
    return parser


def _run_stdin(args: argparse.Namespace, options: OptionsCache) -> tuple[str, Optional[SortResult], str]:
    filepath = args.filename or config.get_str("defaults.stdin_filename")
    source = sys.stdin.read()
    try:
        result = sort_imports(source, args.filename or "", options.for_file(args.filename or ""))
    except (ConfigFileError, SourceParseError) as exc:
        return filepath, None, str(exc)
    sys.stdout.write(result.source)
    return filepath, result, ""


def _run_file(
    filepath: str, options: OptionsCache, check: bool
) -> tuple[str, Optional[SortResult], str]:
    try:
        with open(filepath, "r", encoding="utf-8", newline="") as fh:
            source = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        return filepath, None, config.get_str("messages.read_error").format(path=filepath, error=exc)
    try:
        result = sort_imports(source, filepath, options.for_file(filepath))
    except (ConfigFileError, SourceParseError) as exc:
        return filepath, None, str(exc)
    if result.changed and not check:
        try:
            with open(filepath, "w", encoding="utf-8", newline="") as fh:
                fh.write(result.source)
        except OSError as exc:
            msg = config.get_str("messages.write_error").format(path=filepath, error=exc)
            return filepath, None, msg
    return filepath, result, ""


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command line and return the exit code."""
    exit_ok = config.get_int("exit_codes.ok")
    exit_changed = config.get_int("exit_codes.changed")
    exit_error = config.get_int("exit_codes.error")
    fmt_json = config.get_str("formats.json")

    options = OptionsCache(args.config)
    if args.config:
        try:
            options.for_file("")
        except ConfigFileError as exc:
            sys.stderr.write(f"{exc}\n")
            return exit_error

    if args.stdin:
        outcomes = [_run_stdin(args, options)]
    else:
        outcomes = [_run_file(path, options, args.check) for path in args.files]

    results = [result for _, result, _ in outcomes if result is not None]
    errors = sum(1 for _, result, _ in outcomes if result is None)
    summary = summarize(results, errors)

    if args.format == fmt_json:
        entries = [
            result_to_dict(path, result, error=error, check=args.check or args.stdin)
            for path, result, error in outcomes
        ]
        sys.stderr.write(format_report_json(entries, summary) + "\n")
    else:
        for path, result, error in outcomes:
            if result is None:
                sys.stderr.write(format_error_line(path, error) + "\n")
            else:
                sys.stderr.write(format_result_line(path, result, check=args.check) + "\n")
        if not args.stdin:
            sys.stderr.write(format_summary(summary) + "\n")

    if errors:
        return exit_error
    if args.check and summary["changed"]:
        return exit_changed
    return exit_ok


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``importsorter`` and ``python -m importsorter.cli.main``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.stdin and not args.files:
        parser.error(config.get_str("messages.no_input"))
    sys.exit(run(args))


if __name__ == "__main__":
    main()
