"""buffer — owned text buffer supporting span removal and insertion.

:class:`TextBuffer` is the only mutable text in a transform.  ``remove``
takes offsets relative to the buffer state before the call, so callers can
pass spans computed against the original source in any order.
"""

from __future__ import annotations

from typing import Iterable

from importsorter.lib import config
from importsorter.lib.models import Bounds


class TextBuffer:
    """Mutable string buffer with line-aware removal."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._final_break_removed = False

    @property
    def text(self) -> str:
        """Current buffer contents."""
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    # -----------------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------------

    def remove(self, spans: Iterable[Bounds]) -> int:
        """Delete ``spans`` from the buffer.

        Spans separated only by whitespace are merged.  A merged region that
        begins a line and is followed on that line only by blanks also takes
        the blanks and the line terminator, so removing whole-line statements
        leaves no empty line behind.  Partial-line regions are removed
        exactly.

        Args:
            spans: Ranges relative to the current buffer; order is irrelevant.

        Returns:
            The new buffer length.

        Raises:
            ValueError: If a span falls outside the buffer.
        """
        regions = [self._extend_to_line_end(start, end) for start, end in self._merge(spans)]
        if not regions:
            return len(self._text)
        last_start, last_end = regions[-1]
        self._final_break_removed = (
            last_start < last_end == len(self._text)
            and self._text.endswith(tuple(config.get_list("line_breaks")))
        )
        parts: list[str] = []
        cursor = 0
        for start, end in regions:
            parts.append(self._text[cursor:start])
            cursor = end
        parts.append(self._text[cursor:])
        self._text = "".join(parts)
        return len(self._text)

    def insert_at(self, offset: int, text: str) -> int:
        """Insert ``text`` at ``offset``.

        Returns:
            The new buffer length.

        Raises:
            ValueError: If the offset is outside the buffer.
        """
        if not 0 <= offset <= len(self._text):
            msg = f"Insert offset {offset} outside buffer of length {len(self._text)}"
            raise ValueError(msg)
        self._text = self._text[:offset] + text + self._text[offset:]
        return len(self._text)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def starts_with_line_break(self, offset: int) -> bool:
        """Return True when a line terminator begins at ``offset``."""
        return self._text.startswith(tuple(config.get_list("line_breaks")), offset)

    def at_removed_final_break(self, offset: int) -> bool:
        """Return True when ``offset`` is the buffer end and the last removal
        took the line terminator that used to end the buffer.
        """
        return offset == len(self._text) and self._final_break_removed

    def at_line_start(self, offset: int) -> bool:
        """Return True when ``offset`` is the first position of a line."""
        return offset == 0 or self._text[offset - 1] in "".join(config.get_list("line_breaks"))

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _merge(self, spans: Iterable[Bounds]) -> list[tuple[int, int]]:
        merged: list[list[int]] = []
        for span in sorted(spans, key=lambda b: (b.start, b.end)):
            if span.end > len(self._text):
                msg = f"Span {span.start}..{span.end} outside buffer of length {len(self._text)}"
                raise ValueError(msg)
            if merged and not self._text[merged[-1][1]:span.start].strip():
                merged[-1][1] = max(merged[-1][1], span.end)
            else:
                merged.append([span.start, span.end])
        return [(start, end) for start, end in merged]

    def _extend_to_line_end(self, start: int, end: int) -> tuple[int, int]:
        if not self.at_line_start(start):
            return start, end
        blanks = config.get_str("inline_whitespace")
        cursor = end
        while cursor < len(self._text) and self._text[cursor] in blanks:
            cursor += 1
        if cursor == len(self._text):
            return start, cursor
        for brk in config.get_list("line_breaks"):
            if self._text.startswith(brk, cursor):
                return start, cursor + len(brk)
        return start, end
