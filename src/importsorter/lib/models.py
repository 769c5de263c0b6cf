"""Data models for parsed imports, their spans, and sort options.

Frozen dataclasses shared by the parser adapter, the span extractor, the
sorter and the engine.  Parser records (``CommentNode``, ``ImportNode``)
carry code-point offsets into the Python source string and 1-based line
numbers.  ``SortOptions`` is built from the camelCase option mapping found
in ``.importsorter.yaml``; absent keys take their values from
``config/defaults.yaml``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from importsorter.lib import config

# (bucket, algorithm)
Group = tuple[str, str]


# ---------------------------------------------------------------------------
# Spans and parser records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Bounds:
    """A half-open ``[start, end)`` range of string offsets.

    Raises:
        ValueError: If start is negative or end < start.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            msg = f"Invalid bounds: start={self.start}, end={self.end}"
            raise ValueError(msg)

    @property
    def length(self) -> int:
        """Number of characters covered."""
        return self.end - self.start


@dataclass(frozen=True)
class CommentNode:
    """A comment located by the parser.

    Attributes:
        start: Offset of the first character of the comment.
        end: Offset one past the last character.
        start_line: 1-based line the comment starts on.
        end_line: 1-based line the comment ends on.
    """

    start: int
    end: int
    start_line: int
    end_line: int

    @property
    def key(self) -> tuple[int, int]:
        """Identity of the comment within one source text."""
        return (self.start, self.end)


@dataclass(frozen=True)
class ImportNode:
    """A top-level import declaration located by the parser.

    Attributes:
        start: Offset of the ``import`` keyword.
        end: Offset one past the statement (including ``;`` when present).
        start_line: 1-based first line of the statement.
        end_line: 1-based last line of the statement.
        module: Imported module specifier without quotes.
        leading_comments: Comments between the previous statement and this one.
        trailing_comments: Comments between this statement and the next one.
    """

    start: int
    end: int
    start_line: int
    end_line: int
    module: str
    leading_comments: tuple[CommentNode, ...] = ()
    trailing_comments: tuple[CommentNode, ...] = ()


@dataclass(frozen=True, eq=False)
class ImportDescriptor:
    """One import statement together with its resolved spans.

    Descriptors compare by identity: the sorter regroups the same objects
    it was given, it never copies them.

    Attributes:
        target: The parsed import node.
        value: Source text covered by ``outer_bounds``, taken from the
            original (unmodified) input.
        inner_bounds: The statement alone.
        outer_bounds: The statement plus its attached comments.
    """

    target: ImportNode
    value: str
    inner_bounds: Bounds
    outer_bounds: Bounds

    @property
    def module(self) -> str:
        """The imported module specifier."""
        return self.target.module


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


def _option_key(name: str) -> str:
    return config.get_str(f"option_keys.{name}")


def _pick(data: dict[str, Any], name: str, expected: type, default: Any) -> Any:
    value = data.get(_option_key(name), default)
    return value if isinstance(value, expected) else default


def parse_groups(raw: Any) -> tuple[Group, ...]:
    """Normalize a raw ``groups`` option into ``(bucket, algorithm)`` pairs.

    A bare bucket name is shorthand for ``[bucket, persist]``.  Malformed
    entries are dropped; :func:`validate_options` reports them.

    Args:
        raw: The ``groups`` value from an options mapping.

    Returns:
        Tuple of groups in declaration order.
    """
    persist = config.get_str("algorithms.persist")
    groups: list[Group] = []
    for entry in raw if isinstance(raw, (list, tuple)) else []:
        if isinstance(entry, str):
            groups.append((entry, persist))
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            groups.append((str(entry[0]), str(entry[1])))
    return tuple(groups)


@dataclass(frozen=True)
class ResolverOptions:
    """Which project file drives local/global classification.

    Attributes:
        type: ``fs`` (tsconfig.json probing) or ``package`` (package.json).
        config_name: File name searched for by the ``fs`` resolver.
    """

    type: str
    config_name: str

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> ResolverOptions:
        """Build from the raw ``resolver`` option mapping."""
        data = data if isinstance(data, dict) else {}
        default_type = config.get_str("options.resolver.type")
        default_name = config.get_str("options.resolver.config_name")
        value_type = data.get(_option_key("resolver_type"), default_type)
        value_name = data.get(_option_key("resolver_config_name"), default_name)
        return cls(
            type=value_type if isinstance(value_type, str) else default_type,
            config_name=value_name if isinstance(value_name, str) else default_name,
        )


@dataclass(frozen=True)
class LoggingOptions:
    """JSONL telemetry settings.

    Attributes:
        enabled: Whether to append a log entry per transform.
        directory: Directory holding ``importsorter.jsonl``.
    """

    enabled: bool = False
    directory: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> LoggingOptions:
        """Build from the raw ``logging`` option mapping."""
        data = data if isinstance(data, dict) else {}
        enabled = data.get(
            _option_key("logging_enabled"), config.get_bool("options.logging.enabled")
        )
        directory = data.get(
            _option_key("logging_directory"), config.get_str("options.logging.directory")
        )
        return cls(
            enabled=enabled if isinstance(enabled, bool) else False,
            directory=directory if isinstance(directory, str) else "",
        )


@dataclass(frozen=True)
class SortOptions:
    """Effective options for one sort.

    Attributes:
        import_comment_mode: ``none``, ``same-line`` or ``prev-line``.
        import_location: ``leading`` or ``auto``.
        groups: Ordered ``(bucket, algorithm)`` pairs.
        split_relative_groups: Split the relative bucket by depth.
        relative_sort_alg: ``shallow-first`` or ``deepest-first``.
        end_of_line: ``auto``, ``lf``, ``cr`` or ``crlf``.
        resolver: Classifier selection.
        split_local_pattern: Regex whose last capture group splits the
            local bucket; empty disables splitting.
        logging: Telemetry settings.
    """

    import_comment_mode: str
    import_location: str
    groups: tuple[Group, ...]
    split_relative_groups: bool
    relative_sort_alg: str
    end_of_line: str
    resolver: ResolverOptions
    split_local_pattern: str = ""
    logging: LoggingOptions = field(default_factory=LoggingOptions)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]] = None) -> SortOptions:
        """Build from a camelCase options mapping.

        Args:
            data: Parsed ``.importsorter.yaml`` content, or None for defaults.

        Returns:
            SortOptions with defaults filled in for absent or mistyped keys.
        """
        data = data if isinstance(data, dict) else {}
        raw_groups = data.get(_option_key("groups"))
        if not isinstance(raw_groups, (list, tuple)):
            raw_groups = config.get_list("options.groups")
        return cls(
            import_comment_mode=_pick(
                data, "import_comment_mode", str,
                config.get_str("options.import_comment_mode"),
            ),
            import_location=_pick(
                data, "import_location", str, config.get_str("options.import_location")
            ),
            groups=parse_groups(raw_groups),
            split_relative_groups=_pick(
                data, "split_relative_groups", bool,
                config.get_bool("options.split_relative_groups"),
            ),
            relative_sort_alg=_pick(
                data, "relative_sort_alg", str, config.get_str("options.relative_sort_alg")
            ),
            end_of_line=_pick(data, "end_of_line", str, config.get_str("options.end_of_line")),
            resolver=ResolverOptions.from_dict(data.get(_option_key("resolver"))),
            split_local_pattern=_pick(
                data, "split_local_pattern", str,
                config.get_str("options.split_local_pattern"),
            ),
            logging=LoggingOptions.from_dict(data.get(_option_key("logging"))),
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _choices(section: str) -> list[str]:
    return list(config.get_dict(section).values())


def validate_options(data: Any) -> list[str]:
    """Validate the structure of a raw options mapping.

    Returns a list of human-readable problems (empty = valid).  Unknown
    buckets and algorithms are reported but remain usable: the sorter sends
    their imports to ``rest`` or keeps them in input order.

    Args:
        data: The parsed YAML content (None is treated as empty).

    Returns:
        List of validation messages. Empty if valid.
    """
    msgs = config.get_dict("messages.invalid")
    errors: list[str] = []

    if data is None:
        return errors
    if not isinstance(data, dict):
        errors.append(msgs["not_mapping"].format(type=type(data).__name__))
        return errors

    known = {
        _option_key(name)
        for name in (
            "import_comment_mode", "import_location", "groups",
            "split_relative_groups", "relative_sort_alg", "split_local_pattern",
            "end_of_line", "resolver", "logging",
        )
    }
    for key in data:
        if key not in known:
            errors.append(msgs["unknown_key"].format(key=key))

    choice_checks = (
        ("import_comment_mode", _choices("comment_modes")),
        ("import_location", _choices("locations")),
        ("relative_sort_alg", _choices("relative_sort")),
        ("end_of_line", list(config.get_dict("line_terminators"))),
    )
    for name, choices in choice_checks:
        key = _option_key(name)
        if key in data and data[key] not in choices:
            errors.append(
                msgs["not_choice"].format(key=key, choices=", ".join(choices), value=data[key])
            )

    key = _option_key("split_relative_groups")
    if key in data and not isinstance(data[key], bool):
        errors.append(msgs["not_bool"].format(key=key, value=data[key]))

    key = _option_key("split_local_pattern")
    if key in data:
        pattern = data[key]
        if not isinstance(pattern, str):
            errors.append(msgs["not_string"].format(key=key, value=pattern))
        else:
            try:
                re.compile(pattern)
            except re.error as exc:
                errors.append(msgs["bad_pattern"].format(key=key, error=exc))

    errors.extend(_validate_groups(data.get(_option_key("groups")), msgs))
    errors.extend(_validate_resolver(data.get(_option_key("resolver")), msgs))
    errors.extend(_validate_logging(data.get(_option_key("logging")), msgs))
    return errors


def _validate_groups(raw: Any, msgs: dict[str, str]) -> list[str]:
    errors: list[str] = []
    if raw is None:
        return errors
    if not isinstance(raw, list):
        errors.append(msgs["not_list"].format(key=_option_key("groups"), value=raw))
        return errors
    buckets = _choices("buckets")
    algorithms = _choices("algorithms")
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        if isinstance(entry, str):
            bucket, algorithm = entry, config.get_str("algorithms.persist")
        elif isinstance(entry, list) and len(entry) == 2:
            bucket, algorithm = entry
        else:
            errors.append(msgs["bad_group"].format(index=index, value=entry))
            continue
        if bucket not in buckets:
            errors.append(msgs["unknown_bucket"].format(index=index, value=bucket))
        if algorithm not in algorithms:
            errors.append(msgs["unknown_algorithm"].format(index=index, value=algorithm))
        if not isinstance(bucket, str):
            continue
        if bucket in seen:
            errors.append(msgs["duplicate_bucket"].format(index=index, value=bucket))
        seen.add(bucket)
    return errors


def _validate_resolver(raw: Any, msgs: dict[str, str]) -> list[str]:
    errors: list[str] = []
    if raw is None:
        return errors
    name = _option_key("resolver")
    if not isinstance(raw, dict):
        errors.append(msgs["not_mapping_key"].format(key=name, value=raw))
        return errors
    type_key = _option_key("resolver_type")
    if type_key in raw and raw[type_key] not in _choices("resolver_types"):
        errors.append(
            msgs["not_choice"].format(
                key=f"{name}.{type_key}",
                choices=", ".join(_choices("resolver_types")),
                value=raw[type_key],
            )
        )
    config_key = _option_key("resolver_config_name")
    if config_key in raw and not isinstance(raw[config_key], str):
        errors.append(msgs["not_string"].format(key=f"{name}.{config_key}", value=raw[config_key]))
    return errors


def _validate_logging(raw: Any, msgs: dict[str, str]) -> list[str]:
    errors: list[str] = []
    if raw is None:
        return errors
    name = _option_key("logging")
    if not isinstance(raw, dict):
        errors.append(msgs["not_mapping_key"].format(key=name, value=raw))
        return errors
    enabled_key = _option_key("logging_enabled")
    if enabled_key in raw and not isinstance(raw[enabled_key], bool):
        errors.append(msgs["not_bool"].format(key=f"{name}.{enabled_key}", value=raw[enabled_key]))
    dir_key = _option_key("logging_directory")
    if dir_key in raw and not isinstance(raw[dir_key], str):
        errors.append(msgs["not_string"].format(key=f"{name}.{dir_key}", value=raw[dir_key]))
    return errors
