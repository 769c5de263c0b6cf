"""discovery — locate and load project configuration files.

Finds ``tsconfig.json``, ``package.json`` and ``.importsorter.yaml`` by
walking upward from the file being sorted, and turns their contents into
classifier parameters and option mappings.

tsconfig files are JSON with comments and trailing commas allowed; those are
stripped before handing the text to :mod:`json`.  Relative ``extends`` chains
are followed recursively, child ``compilerOptions`` overriding the parent's.
Every loader raises :class:`~importsorter.exceptions.ConfigFileError` for
files that are missing, unreadable or malformed.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from importsorter.exceptions import ConfigFileError
from importsorter.lib import config


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def find_config_file(name: str, search_path: Union[str, Path]) -> Optional[Path]:
    """Search ``search_path`` and its ancestors for a file called ``name``.

    Args:
        name: File name to look for (e.g. ``"tsconfig.json"``).
        search_path: A directory, or a file whose directory starts the search.
            The file itself need not exist.

    Returns:
        Path of the nearest match, or None.
    """
    start = Path(search_path or ".").resolve()
    if not start.is_dir():
        start = start.parent
    for directory in (start, *start.parents):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def find_options_file(search_path: Union[str, Path]) -> Optional[Path]:
    """Return the nearest ``.importsorter.yaml`` above ``search_path``."""
    return find_config_file(config.get_str("filenames.options"), search_path)


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas from JSON text.

    String literals are left untouched.

    Args:
        text: JSON-with-comments source.

    Returns:
        Plain JSON text.
    """
    return _strip_trailing_commas(_strip_comments(text))


def _string_end(text: str, start: int) -> int:
    """Return the offset just past the string literal opening at ``start``."""
    j = start + 1
    while j < len(text) and text[j] != '"':
        j += 2 if text[j] == "\\" else 1
    return j + 1


def _strip_comments(text: str) -> str:
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] == '"':
            j = _string_end(text, i)
            out.append(text[i:j])
            i = j
        elif text.startswith("//", i):
            while i < n and text[i] not in "\r\n":
                i += 1
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end < 0 else end + 2
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            j = _string_end(text, i)
            out.append(text[i:j])
            i = j
            continue
        if ch == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            # trailing comma before a closing bracket
            if j < n and text[j] in "}]":
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def load_json(path: Union[str, Path], *, allow_comments: bool = False) -> Any:
    """Read and decode a JSON file.

    Args:
        path: File to read.
        allow_comments: Strip comments and trailing commas first.

    Returns:
        The decoded JSON value.

    Raises:
        ConfigFileError: If the file is unreadable or not valid JSON.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
        if allow_comments:
            text = strip_json_comments(text)
        return json.loads(text)
    except (OSError, ValueError) as exc:
        raise ConfigFileError(str(path), exc) from exc


def _require_mapping(path: Union[str, Path], data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        msg = config.get_str("messages.config_not_mapping").format(type=type(data).__name__)
        raise ConfigFileError(str(path), ValueError(msg))
    return data


# ---------------------------------------------------------------------------
# tsconfig.json
# ---------------------------------------------------------------------------


def _extends_path(base_dir: Path, target: str) -> Optional[Path]:
    # Package-name extends (e.g. "@tsconfig/node18") are not followed
    if not target.startswith(config.get_str("paths.local_marker")):
        return None
    path = (base_dir / target).resolve()
    suffix = config.get_str("tsconfig.suffix")
    if not path.is_file() and path.suffix != suffix:
        path = path.with_name(path.name + suffix)
    return path


def load_tsconfig(path: Union[str, Path], _seen: Optional[set[Path]] = None) -> dict[str, Any]:
    """Load a tsconfig.json, resolving relative ``extends`` chains.

    ``baseUrl`` values are made absolute against the directory of the file
    that declares them, so inherited values keep pointing at the right place.

    Args:
        path: Path to the tsconfig file.

    Returns:
        The tsconfig mapping with merged ``compilerOptions``.

    Raises:
        ConfigFileError: On unreadable or malformed files, or an extends cycle.
    """
    path = Path(path).resolve()
    seen = _seen if _seen is not None else set()
    if path in seen:
        msg = config.get_str("messages.extends_cycle").format(path=path)
        raise ConfigFileError(str(path), ValueError(msg))
    seen.add(path)

    data = _require_mapping(path, load_json(path, allow_comments=True))
    key_options = config.get_str("tsconfig.compiler_options")
    key_base_url = config.get_str("tsconfig.base_url")
    key_extends = config.get_str("tsconfig.extends")

    own_options = dict(data.get(key_options) or {})
    if isinstance(own_options.get(key_base_url), str):
        own_options[key_base_url] = str((path.parent / own_options[key_base_url]).resolve())

    parents = data.get(key_extends) or []
    if isinstance(parents, str):
        parents = [parents]

    merged: dict[str, Any] = {}
    for target in parents:
        if not isinstance(target, str):
            continue
        parent_path = _extends_path(path.parent, target)
        if parent_path is None:
            continue
        parent = load_tsconfig(parent_path, seen)
        merged.update(parent.get(key_options) or {})
    merged.update(own_options)

    result = dict(data)
    result[key_options] = merged
    return result


def resolver_params(compiler_options: dict[str, Any], config_dir: Union[str, Path]) -> dict[str, Any]:
    """Derive FSPathClassifier arguments from tsconfig compiler options.

    Args:
        compiler_options: The ``compilerOptions`` mapping.
        config_dir: Directory of the tsconfig file.

    Returns:
        Mapping with ``base_url``, ``aliases`` and ``extensions`` keys.
    """
    base_url = compiler_options.get(config.get_str("tsconfig.base_url"))
    if isinstance(base_url, str):
        base_url = os.path.normpath(os.path.join(str(config_dir), base_url))
    else:
        base_url = None

    wildcard = config.get_str("paths.alias_wildcard")
    aliases: dict[str, list[str]] = {}
    raw_paths = compiler_options.get(config.get_str("tsconfig.paths"))
    if isinstance(raw_paths, dict):
        for pattern, targets in raw_paths.items():
            prefix = pattern.rstrip(wildcard)
            if not prefix or not isinstance(targets, list):
                continue
            aliases[prefix] = [t.rstrip(wildcard) for t in targets if isinstance(t, str)]

    return {
        "base_url": base_url,
        "aliases": aliases,
        "extensions": config.get_list("extensions"),
    }


# ---------------------------------------------------------------------------
# package.json
# ---------------------------------------------------------------------------


def load_dependencies(path: Union[str, Path]) -> list[str]:
    """Return the declared dependency names of a package.json.

    Names from ``dependencies``, ``devDependencies`` and ``peerDependencies``
    are concatenated in that order.

    Raises:
        ConfigFileError: If the manifest cannot be read or decoded.
    """
    data = _require_mapping(path, load_json(path))
    names: list[str] = []
    for section in config.get_list("manifest_sections"):
        deps = data.get(section)
        if isinstance(deps, dict):
            names.extend(deps.keys())
    return names


# ---------------------------------------------------------------------------
# .importsorter.yaml
# ---------------------------------------------------------------------------


def load_options_file(path: Union[str, Path]) -> dict[str, Any]:
    """Load a YAML options file.

    Args:
        path: Path to the options file.

    Returns:
        The options mapping (empty for an empty file).

    Raises:
        ConfigFileError: If the file is unreadable, invalid YAML or not a mapping.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(str(path), exc) from exc
    if data is None:
        return {}
    return _require_mapping(path, data)
