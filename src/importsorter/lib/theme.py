"""theme — ANSI colour roles for CLI output.

Status lines name a role (``sorted``, ``would_sort``, ``error``...) rather
than a colour; ``theme.roles`` in ``config/defaults.yaml`` maps each role to
one of the escape codes under ``theme.ansi``.  Text is only wrapped when the
stream it is headed for is a terminal.
"""

from __future__ import annotations

import sys
from typing import Any, Optional

from importsorter.lib import config


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Theme:
    """Role-to-escape-code table, built from config on first use."""

    def __init__(self) -> None:
        self._resolved: Optional[dict[str, str]] = None

    @property
    def resolved(self) -> dict[str, str]:
        """Escape code per role, plus ``reset``."""
        if self._resolved is None:
            codes = config.get_dict("theme.ansi")
            table = {role: codes.get(name, "") for role, name in config.get_dict("theme.roles").items()}
            table["reset"] = codes.get("reset", "")
            self._resolved = table
        return self._resolved

    def colorize(self, text: str, role: str, *, stream: Any = None) -> str:
        """Wrap ``text`` in the escape codes of ``role``.

        Args:
            text: Text to wrap.
            role: Role name from ``theme.roles``; unknown roles stay plain.
            stream: Destination checked for a TTY (``sys.stderr`` if None).

        Returns:
            The wrapped text, or ``text`` unchanged off-terminal.
        """
        start = self.resolved.get(role, "") if _is_tty(stream or sys.stderr) else ""
        if not start:
            return text
        return start + text + self.resolved["reset"]


_theme = Theme()


def colorize(text: str, role: str, *, stream: Any = None) -> str:
    """:meth:`Theme.colorize` on the shared theme."""
    return _theme.colorize(text, role, stream=stream)
