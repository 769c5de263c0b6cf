"""extractor — span extraction, removal and re-insertion of import statements.

:class:`SpanExtractor` owns the working buffer for one transform.  It asks
the parser for import nodes, widens each node over the comments the
configured attachment mode allows, cuts the resulting spans out of the
buffer, and later splices sorted groups back in with the configured line
terminator.

Comment attachment modes:
    none: the statement alone.
    same-line: leading comments ending on the statement's first line, and
        trailing comments starting on its last line.
    prev-line: like same-line, but a leading comment may also end on the
        line just above the statement.

A comment is claimed by at most one statement.  Unknown modes behave like
``prev-line``.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from importsorter.lib import config
from importsorter.lib.buffer import TextBuffer
from importsorter.lib.models import Bounds, ImportDescriptor, ImportNode
from importsorter.lib.parser import parse_imports


def resolve_line_terminator(end_of_line: str) -> str:
    """Map an ``endOfLine`` option to the terminator it stands for.

    Args:
        end_of_line: ``auto``, ``lf``, ``cr`` or ``crlf``.

    Returns:
        The terminator string; unknown values give the default ``"\\n"``.
    """
    table = config.get_dict("line_terminators")
    return table.get(end_of_line, config.get_str("defaults.line_terminator"))


class SpanExtractor:
    """Extract import spans from a source text and rebuild it.

    Attributes:
        source: The original, unmodified input.
        filepath: Path used for grammar selection and error messages.
        import_comment_mode: Active comment attachment mode.
        line_terminator: Terminator written after every inserted statement.
    """

    def __init__(
        self,
        source: str,
        *,
        import_comment_mode: str = "",
        end_of_line: str = "",
        filepath: str = "",
        parse: Callable[[str, str], list[ImportNode]] = parse_imports,
    ) -> None:
        """Initialize the extractor.

        Args:
            source: Program text to transform.
            import_comment_mode: Attachment mode; defaults to defaults.yaml.
            end_of_line: Terminator option; defaults to defaults.yaml.
            filepath: Path of the file, if any.
            parse: Parser callable returning import nodes.
        """
        self.source = source
        self.filepath = filepath
        self.import_comment_mode = import_comment_mode or config.get_str(
            "options.import_comment_mode"
        )
        self.line_terminator = resolve_line_terminator(
            end_of_line or config.get_str("options.end_of_line")
        )
        self._buffer = TextBuffer(source)
        self._parse = parse
        self._claimed: set[tuple[int, int]] = set()

    # -----------------------------------------------------------------------
    # Extraction
    # -----------------------------------------------------------------------

    def find_import_nodes(self) -> list[ImportDescriptor]:
        """Locate every import and resolve its inner and outer bounds.

        Returns:
            Descriptors in source order.

        Raises:
            SourceParseError: If the source does not parse.
        """
        self._claimed.clear()
        descriptors: list[ImportDescriptor] = []
        for node in self._parse(self.source, self.filepath):
            if not 0 <= node.start <= node.end <= len(self.source):
                continue
            start = self._leading_start(node)
            end = self._trailing_end(node)
            descriptors.append(
                ImportDescriptor(
                    target=node,
                    value=self.source[start:end],
                    inner_bounds=Bounds(node.start, node.end),
                    outer_bounds=Bounds(start, end),
                )
            )
        return descriptors

    def _leading_start(self, node: ImportNode) -> int:
        modes = config.get_dict("comment_modes")
        if self.import_comment_mode == modes["none"]:
            return node.start
        same_line = self.import_comment_mode == modes["same_line"]
        start = node.start
        for comment in node.leading_comments:
            if comment.key in self._claimed:
                continue
            if same_line and comment.end_line != node.start_line:
                continue
            if not same_line and comment.end_line < node.start_line - 1:
                continue
            if comment.start >= start:
                continue
            self._claimed.add(comment.key)
            start = comment.start
        return start

    def _trailing_end(self, node: ImportNode) -> int:
        if self.import_comment_mode == config.get_str("comment_modes.none"):
            return node.end
        end = node.end
        for comment in node.trailing_comments:
            if comment.start_line != node.end_line:
                continue
            self._claimed.add(comment.key)
            end = max(end, comment.end)
        return end

    # -----------------------------------------------------------------------
    # Mutation
    # -----------------------------------------------------------------------

    def remove_nodes(self, *descriptors: ImportDescriptor) -> None:
        """Cut the outer spans of ``descriptors`` out of the working buffer.

        Spans must be relative to the original source; whole-line
        statements take their line terminator with them.  Calling with no
        descriptors leaves the buffer untouched.
        """
        if not descriptors:
            return
        self._buffer.remove(d.outer_bounds for d in descriptors)

    def insert_nodes(
        self,
        nodes: Iterable[ImportDescriptor],
        insert_index: int,
        separate: bool = True,
    ) -> int:
        """Splice one group of statements into the working buffer.

        Args:
            nodes: Descriptors to write, one per line.
            insert_index: Buffer offset to insert at.
            separate: Follow the group with an empty line.

        Returns:
            The offset just past the inserted text.
        """
        eol = self.line_terminator
        block = "".join(node.value + eol for node in nodes)
        if separate:
            block += eol
        self._buffer.insert_at(insert_index, block)
        return insert_index + len(block)

    def insert_imports(
        self, groups: Sequence[Sequence[ImportDescriptor]], location: str
    ) -> None:
        """Insert sorted groups at the top of the file or where imports began.

        With ``auto`` the groups go where the earliest removed statement
        started; any other location inserts at offset 0.  Groups are
        separated by an empty line; the last group gets one only when the
        following text does not already begin with a line break, and not when
        it lands at the end of a file whose final line terminator was removed
        with the imports.

        Args:
            groups: Sorted groups of descriptors.
            location: ``leading`` or ``auto``.
        """
        groups = [group for group in groups if group]
        if not groups:
            return
        insert_index = 0
        if location == config.get_str("locations.auto"):
            insert_index = min(
                descriptor.outer_bounds.start for group in groups for descriptor in group
            )
        for position, group in enumerate(groups):
            is_last = position == len(groups) - 1
            ends_line = self._buffer.starts_with_line_break(insert_index) or (
                self._buffer.at_removed_final_break(insert_index)
            )
            separate = not (is_last and ends_line)
            insert_index = self.insert_nodes(group, insert_index, separate=separate)

    def compile(self) -> str:
        """Return the current buffer text."""
        return self._buffer.text
