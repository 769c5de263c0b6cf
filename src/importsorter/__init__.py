"""importsorter — reorder and group import statements in TypeScript and JavaScript.

Stable public API:
    sort_imports: Sort the imports of a source string.
    sort_file: Sort the imports of a file on disk, rewriting it in place.
    SortResult: Dataclass returned by sort_imports and sort_file.
    SortOptions: Effective options, built from a camelCase mapping.
    ImportSorterError: Base class of the package's exceptions.
    SourceParseError: Raised when the source does not parse.
    ConfigFileError: Raised when a project config file cannot be used.
"""

__version__ = "0.1.0"

from importsorter.engine import SortResult, sort_file, sort_imports
from importsorter.exceptions import ConfigFileError, ImportSorterError, SourceParseError
from importsorter.lib.models import SortOptions

__all__ = [
    "__version__",
    "sort_imports",
    "sort_file",
    "SortResult",
    "SortOptions",
    "ImportSorterError",
    "SourceParseError",
    "ConfigFileError",
]
