"""classifier — decide whether an import specifier refers to project code.

Two interchangeable classifiers satisfy the :class:`PathClassifier` protocol:

* :class:`FSPathClassifier` probes the file system using the ``baseUrl`` and
  ``paths`` settings of a ``tsconfig.json``.
* :class:`PackagePathClassifier` treats every specifier that is not one of
  the dependencies listed in ``package.json`` as local.

Neither raises; missing configuration degrades to "not local".
"""

from __future__ import annotations

import os
from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

from importsorter.lib import config


@runtime_checkable
class PathClassifier(Protocol):
    """Capability required by the sorter."""

    def is_local(self, path: str) -> bool:
        """Return True when ``path`` resolves inside the project."""
        ...

    def get_extension(self, path: str) -> str:
        """Return the file extension of ``path`` without the dot."""
        ...


def get_extension(path: str) -> str:
    """Return the extension of the last path segment, without the dot.

    ``.``, ``..``, ``./``, ``../../``, extensionless names and dot-files all
    yield an empty string.

    Args:
        path: Module specifier or file path.

    Returns:
        Extension such as ``"css"``, or ``""``.
    """
    return os.path.splitext(path)[1][1:]


def _is_relative(path: str) -> bool:
    return path.startswith(config.get_str("paths.local_marker"))


# ---------------------------------------------------------------------------
# File-system classifier
# ---------------------------------------------------------------------------


class FSPathClassifier:
    """Classify specifiers by probing files under the project root.

    Attributes:
        root_path: Directory that holds the tsconfig.json.
        base_url: Absolute or root-relative ``baseUrl``; None when unset.
        aliases: Alias prefix to list of target directories (wildcards
            already stripped), relative to ``root_path``.
        extensions: Extensions tried for extensionless specifiers.
    """

    def __init__(
        self,
        root_path: str,
        *,
        base_url: Optional[str] = None,
        aliases: Optional[dict[str, list[str]]] = None,
        extensions: Optional[Sequence[str]] = None,
        file_exists: Callable[[str], bool] = os.path.isfile,
    ) -> None:
        """Initialize the classifier.

        Args:
            root_path: Project root used to resolve alias targets.
            base_url: Directory non-relative specifiers are resolved against.
            aliases: Alias prefix to target directories.
            extensions: Extensions to try, in order. Defaults to the list in
                defaults.yaml.
            file_exists: Existence probe; replaceable in tests.
        """
        self.root_path = root_path
        self.base_url = base_url
        self.aliases = dict(aliases or {})
        self.extensions = (
            list(extensions) if extensions is not None else config.get_list("extensions")
        )
        self._file_exists = file_exists
        self._index = config.get_str("paths.index_basename")

    def is_local(self, path: str) -> bool:
        """Return True for relative, aliased or baseUrl-resolvable specifiers."""
        if _is_relative(path):
            return True
        if self.is_aliased(path):
            return True
        if self.base_url:
            return self.file_exists(os.path.normpath(os.path.join(self.base_url, path)))
        return False

    def is_aliased(self, path: str) -> bool:
        """Return True when ``path`` matches an alias with an existing target.

        Args:
            path: Module specifier.

        Returns:
            True if any ``root/target/<rest>`` candidate exists.
        """
        for alias, targets in self.aliases.items():
            if not path.startswith(alias):
                continue
            rest = path[len(alias):].lstrip("/")
            for target in targets:
                candidate = os.path.normpath(os.path.join(self.root_path, target, rest))
                if self.file_exists(candidate):
                    return True
        return False

    def file_exists(self, path: str) -> bool:
        """Probe ``path`` the way the TypeScript module resolver would.

        The raw path is tried first.  An extensionless path is then tried as
        ``path/index.<ext>`` and ``path.<ext>`` for each configured extension.

        Args:
            path: Candidate file path.

        Returns:
            True on the first existing candidate.
        """
        if self._file_exists(path):
            return True
        if get_extension(path) or not self.extensions:
            return False
        for ext in self.extensions:
            if self._file_exists(os.path.join(path, f"{self._index}.{ext}")):
                return True
            if self._file_exists(f"{path}.{ext}"):
                return True
        return False

    def get_extension(self, path: str) -> str:
        """Return the extension of ``path`` without the dot."""
        return get_extension(path)


# ---------------------------------------------------------------------------
# Manifest classifier
# ---------------------------------------------------------------------------


class PackagePathClassifier:
    """Classify specifiers against the dependency names of a package.json.

    Attributes:
        dependencies: Declared package names; empty means everything is local.
    """

    def __init__(self, dependencies: Optional[Sequence[str]] = None) -> None:
        self.dependencies = list(dependencies or [])

    def is_local(self, path: str) -> bool:
        """Return True unless ``path`` names a declared dependency or a subpath of one."""
        if _is_relative(path):
            return True
        if not self.dependencies:
            return True
        return not any(path == dep or path.startswith(f"{dep}/") for dep in self.dependencies)

    def get_extension(self, path: str) -> str:
        """Return the extension of ``path`` without the dot."""
        return get_extension(path)
