"""parser — tree-sitter adapter that locates top-level import declarations.

Parses TypeScript or JavaScript with the ``tree-sitter-typescript`` grammars
and lifts every top-level ``import ... from "x"`` / ``import "x"`` statement
into an :class:`~importsorter.lib.models.ImportNode`.  Comments are attached
the way a JavaScript parser would report them: a comment sitting between two
statements is trailing for the first and leading for the second, and the
span extractor decides which one claims it.

Tree-sitter reports UTF-8 byte offsets; every offset handed out by this
module is converted to a code-point offset into the Python string.
"""

from __future__ import annotations

import os
from typing import Optional

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from importsorter.exceptions import SourceParseError
from importsorter.lib import config
from importsorter.lib.models import CommentNode, ImportNode


def get_language(filepath: str) -> Language:
    """Pick the grammar for a file by extension.

    JSX-capable files (and plain JavaScript) use the TSX grammar, everything
    else the TypeScript grammar.

    Args:
        filepath: Path of the file being parsed; may be empty.

    Returns:
        tree-sitter Language instance.
    """
    ext = os.path.splitext(filepath)[1].lower()
    if ext in config.get_list("grammars.tsx_extensions"):
        return Language(tsts.language_tsx())
    return Language(tsts.language_typescript())


class SourceDocument:
    """A parsed source file with byte/char offset conversion.

    Attributes:
        text: The source string.
        filepath: Path used for grammar selection and error messages.
        tree: The tree-sitter parse tree.
    """

    def __init__(self, text: str, filepath: str = "") -> None:
        self.text = text
        self.filepath = filepath
        self._text_bytes = text.encode("utf-8")
        self._ascii = len(self._text_bytes) == len(text)
        self.tree: Tree = Parser(get_language(filepath)).parse(self._text_bytes)
        self._comment_types = set(config.get_list("tree_sitter.comment_types"))

    @property
    def root_node(self) -> Node:
        """Root ``program`` node."""
        return self.tree.root_node

    def char_offset(self, byte_pos: int) -> int:
        """Convert a UTF-8 byte offset to a string offset."""
        if self._ascii:
            return byte_pos
        return len(self._text_bytes[:byte_pos].decode("utf-8", errors="ignore"))

    def node_text(self, node: Node) -> str:
        """Return the source text covered by ``node``."""
        return self._text_bytes[node.start_byte:node.end_byte].decode("utf-8")

    def is_comment(self, node: Node) -> bool:
        return node.type in self._comment_types

    # -----------------------------------------------------------------------
    # Error reporting
    # -----------------------------------------------------------------------

    def first_error(self) -> Optional[Node]:
        """Return the first ERROR or MISSING node in document order."""
        error_type = config.get_str("tree_sitter.error_type")
        stack = [self.root_node]
        while stack:
            node = stack.pop()
            if node.type == error_type or node.is_missing:
                return node
            if node.has_error:
                stack.extend(reversed(node.children))
        return None

    def check_syntax(self) -> None:
        """Raise when tree-sitter could not parse the document cleanly.

        Raises:
            SourceParseError: If the tree contains error nodes.
        """
        if not self.root_node.has_error:
            return
        node = self.first_error() or self.root_node
        row, column = node.start_point
        detail = config.get_str("messages.syntax_error").format(line=row + 1, column=column + 1)
        raise SourceParseError(self.filepath, SyntaxError(detail))

    # -----------------------------------------------------------------------
    # Import extraction
    # -----------------------------------------------------------------------

    def comment_node(self, node: Node) -> CommentNode:
        return CommentNode(
            start=self.char_offset(node.start_byte),
            end=self.char_offset(node.end_byte),
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

    def module_name(self, node: Node) -> Optional[str]:
        """Return the unquoted module specifier of an import statement.

        ``import x = require("y")`` has no ``source`` field and yields None.
        """
        source = node.child_by_field_name(config.get_str("tree_sitter.source_field"))
        if source is None:
            return None
        return self.node_text(source)[1:-1]

    def import_nodes(self) -> list[ImportNode]:
        """Collect the top-level import declarations in source order.

        Returns:
            One ImportNode per ``import`` statement with a module source.
        """
        import_type = config.get_str("tree_sitter.import_statement")
        children = self.root_node.children
        nodes: list[ImportNode] = []

        for index, child in enumerate(children):
            if child.type != import_type:
                continue
            module = self.module_name(child)
            if module is None:
                continue

            leading: list[Node] = []
            cursor = index - 1
            while cursor >= 0 and self.is_comment(children[cursor]):
                leading.insert(0, children[cursor])
                cursor -= 1
            trailing: list[Node] = []
            cursor = index + 1
            while cursor < len(children) and self.is_comment(children[cursor]):
                trailing.append(children[cursor])
                cursor += 1

            # Comments that ended up inside the statement node at its edges
            body = [c for c in child.children if not self.is_comment(c)]
            if not body:
                continue
            first, last = body[0], body[-1]
            for inner in child.children:
                if not self.is_comment(inner):
                    continue
                if inner.end_byte <= first.start_byte:
                    leading.append(inner)
                elif inner.start_byte >= last.end_byte:
                    trailing.insert(0, inner)

            nodes.append(
                ImportNode(
                    start=self.char_offset(first.start_byte),
                    end=self.char_offset(last.end_byte),
                    start_line=first.start_point[0] + 1,
                    end_line=last.end_point[0] + 1,
                    module=module,
                    leading_comments=tuple(self.comment_node(c) for c in leading),
                    trailing_comments=tuple(self.comment_node(c) for c in trailing),
                )
            )
        return nodes


def parse_imports(source: str, filepath: str = "") -> list[ImportNode]:
    """Parse ``source`` and return its top-level import declarations.

    Args:
        source: TypeScript or JavaScript source.
        filepath: Path used to pick the grammar and label errors.

    Returns:
        ImportNodes in source order.

    Raises:
        SourceParseError: If the source contains syntax errors.
    """
    document = SourceDocument(source, filepath)
    document.check_syntax()
    return document.import_nodes()
