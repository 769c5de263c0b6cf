"""config — shared access to the packaged ``defaults.yaml``.

Every constant importsorter uses (option defaults, enumerations, node type
names, messages, labels, exit codes, colours) is looked up here by a dotted
key such as ``"options.groups"``.  The YAML file is parsed on the first
lookup and the parsed tree is shared by all callers until :func:`reset`.

Typed lookups fail with ``TypeError`` at the call that reads a mistyped
value; booleans and integers are kept apart even though ``bool`` subclasses
``int``.
"""

from __future__ import annotations

from typing import Any

import yaml

from importsorter._paths import defaults_path

_DEFAULTS: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_defaults() -> dict[str, Any]:
    """Return the parsed defaults, reading the file on first use.

    Raises:
        FileNotFoundError: If the defaults file is missing.
        yaml.YAMLError: If it is not valid YAML.
        TypeError: If its top level is not a mapping.
    """
    global _DEFAULTS  # noqa: PLW0603
    if _DEFAULTS is not None:
        return _DEFAULTS
    path = defaults_path()
    with open(path, encoding="utf-8") as fh:
        tree = yaml.safe_load(fh)
    if not isinstance(tree, dict):
        raise TypeError(f"{path} must hold a mapping at the top level, not {type(tree).__name__}")
    _DEFAULTS = tree
    return tree


def reset() -> None:
    """Forget the parsed defaults so the next lookup rereads the file."""
    global _DEFAULTS  # noqa: PLW0603
    _DEFAULTS = None


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get(dotted_key: str) -> Any:
    """Walk the defaults tree along ``dotted_key``.

    Raises:
        KeyError: If a segment is absent or the walk reaches a scalar early.
    """
    value: Any = load_defaults()
    walked: list[str] = []
    for segment in dotted_key.split("."):
        walked.append(segment)
        if not isinstance(value, dict) or segment not in value:
            raise KeyError(f"no config value at {'.'.join(walked)!r} (looking up {dotted_key!r})")
        value = value[segment]
    return value


def _expect(dotted_key: str, kind: type) -> Any:
    value = get(dotted_key)
    if type(value) is bool and kind is not bool:
        ok = False
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise TypeError(f"config value {dotted_key!r} is {type(value).__name__}, wanted {kind.__name__}")
    return value


def get_str(dotted_key: str) -> str:
    """String lookup; ``TypeError`` for any other type."""
    return _expect(dotted_key, str)


def get_int(dotted_key: str) -> int:
    """Integer lookup; booleans are rejected."""
    return _expect(dotted_key, int)


def get_bool(dotted_key: str) -> bool:
    return _expect(dotted_key, bool)


def get_list(dotted_key: str) -> list[Any]:
    """List lookup, e.g. ``get_list("extensions")``."""
    return _expect(dotted_key, list)


def get_dict(dotted_key: str) -> dict[str, Any]:
    """Mapping lookup; the caller receives the shared dict, not a copy."""
    return _expect(dotted_key, dict)
