"""importsorter engine — thin orchestrator for one sort.

Composes the library modules to reorder the imports of a source string and
return a structured result.  This is the main entry point for programmatic
usage.

The engine never parses or edits text itself: discovery builds the
classifier, the span extractor owns the text, and the sorter decides the
order.  A missing or broken project config is not an error; the source comes
back unchanged with ``status="skipped"`` and the reason attached.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional, Union

from importsorter.exceptions import ConfigFileError
from importsorter.lib import config
from importsorter.lib.classifier import FSPathClassifier, PackagePathClassifier, PathClassifier
from importsorter.lib.discovery import (
    find_config_file,
    load_dependencies,
    load_tsconfig,
    resolver_params,
)
from importsorter.lib.extractor import SpanExtractor
from importsorter.lib.logger import log_sort
from importsorter.lib.models import SortOptions
from importsorter.lib.sorter import Sorter


@dataclass
class SortResult:
    """Result of sorting one source text."""

    status: str
    source: str
    changed: bool = False
    import_count: int = 0
    group_count: int = 0
    sort_ms: int = 0
    reason: str = ""


def _missing(name: str, search_path: str) -> ConfigFileError:
    msg = config.get_str("messages.config_not_found").format(name=name, path=search_path)
    return ConfigFileError(name, FileNotFoundError(msg))


def build_classifier(options: SortOptions, filepath: str = "") -> PathClassifier:
    """Create the path classifier selected by ``options.resolver``.

    The project file is searched upward from the directory of ``filepath``
    (or the working directory when no path is given).

    Args:
        options: Effective sort options.
        filepath: Path of the file being sorted.

    Returns:
        A configured classifier.

    Raises:
        ConfigFileError: If the project file is missing or unusable, or the
            resolver type is unknown.
    """
    resolver = options.resolver
    search_path = filepath or "."

    if resolver.type == config.get_str("resolver_types.fs"):
        path = find_config_file(resolver.config_name, search_path)
        if path is None:
            raise _missing(resolver.config_name, search_path)
        tsconfig = load_tsconfig(path)
        compiler_options = tsconfig.get(config.get_str("tsconfig.compiler_options")) or {}
        return FSPathClassifier(str(path.parent), **resolver_params(compiler_options, path.parent))

    if resolver.type == config.get_str("resolver_types.package"):
        name = config.get_str("filenames.package_manifest")
        path = find_config_file(name, search_path)
        if path is None:
            raise _missing(name, search_path)
        return PackagePathClassifier(load_dependencies(path))

    msg = config.get_str("messages.unknown_resolver").format(type=resolver.type)
    raise ConfigFileError("", ValueError(msg))


def sort_imports(
    source: str,
    filepath: str = "",
    options: Union[SortOptions, dict[str, Any], None] = None,
) -> SortResult:
    """Reorder the import statements of ``source``.

    Args:
        source: TypeScript or JavaScript source.
        filepath: Path of the file; drives config discovery and grammar choice.
        options: SortOptions, a camelCase options mapping, or None for defaults.

    Returns:
        SortResult carrying the (possibly) rewritten source.

    Raises:
        SourceParseError: If the source does not parse.
    """
    status_sorted = config.get_str("statuses.sorted")
    status_unchanged = config.get_str("statuses.unchanged")
    status_skipped = config.get_str("statuses.skipped")

    opts = options if isinstance(options, SortOptions) else SortOptions.from_dict(options)
    start = time.time()

    # 1. Classifier from project config
    try:
        classifier = build_classifier(opts, filepath)
    except ConfigFileError as exc:
        return SortResult(status=status_skipped, source=source, reason=str(exc))

    # 2. Locate imports
    extractor = SpanExtractor(
        source,
        import_comment_mode=opts.import_comment_mode,
        end_of_line=opts.end_of_line,
        filepath=filepath,
    )
    descriptors = extractor.find_import_nodes()
    if not descriptors:
        return SortResult(status=status_unchanged, source=source)

    # 3. Cut, sort, splice
    extractor.remove_nodes(*descriptors)
    groups = Sorter(classifier).process(descriptors, opts)
    extractor.insert_imports(groups, opts.import_location)
    output = extractor.compile()

    changed = output != source
    result = SortResult(
        status=status_sorted if changed else status_unchanged,
        source=output,
        changed=changed,
        import_count=len(descriptors),
        group_count=len(groups),
        sort_ms=int((time.time() - start) * 1000),
    )

    if opts.logging.enabled:
        log_sort(
            opts.logging.directory,
            filepath,
            result.status,
            result.import_count,
            result.group_count,
            source,
            result.sort_ms,
        )
    return result


def sort_file(path: str, options: Optional[Union[SortOptions, dict[str, Any]]] = None) -> SortResult:
    """Sort the imports of a file on disk and rewrite it when it changes.

    Args:
        path: File to sort.
        options: As for :func:`sort_imports`.

    Returns:
        The SortResult; the file is only written for ``status="sorted"``.
    """
    with open(path, "r", encoding="utf-8", newline="") as fh:
        source = fh.read()
    result = sort_imports(source, path, options)
    if result.changed:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(result.source)
    return result
