"""Custom exceptions for importsorter.

All exceptions are importable from the top-level ``importsorter`` package.

Exceptions:
    ImportSorterError — Common base class.
    SourceParseError — Raised when tree-sitter reports syntax errors in
        the source being sorted. Wraps the underlying error.
    ConfigFileError — Raised when a tsconfig.json, package.json or options
        file cannot be found, read or decoded.
"""

from __future__ import annotations

from importsorter.lib import config


class ImportSorterError(Exception):
    """Base class for importsorter errors."""


class SourceParseError(ImportSorterError):
    """Raised when a source file cannot be parsed.

    Imports are never moved in a file that does not parse cleanly, since
    the statement boundaries cannot be trusted.
    """

    def __init__(self, filepath: str, original_error: Exception) -> None:
        """Initialize with parse error details.

        Args:
            filepath: Path to the file that failed parsing.
            original_error: The underlying parse exception.
        """
        self.filepath = filepath
        self.original_error = original_error
        msg = config.get_str("messages.parse_error")
        super().__init__(msg.format(filepath=filepath, error=original_error))


class ConfigFileError(ImportSorterError):
    """Raised when a project configuration file cannot be used."""

    def __init__(self, path: str, original_error: Exception) -> None:
        """Initialize with config error details.

        Args:
            path: Path (or file name) of the offending config file.
            original_error: The underlying exception.
        """
        self.path = path
        self.original_error = original_error
        msg = config.get_str("messages.config_error")
        super().__init__(msg.format(path=path, error=original_error))
