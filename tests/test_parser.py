"""Tests for the tree-sitter adapter in importsorter.lib.parser."""

from __future__ import annotations

import pytest

from importsorter.exceptions import SourceParseError
from importsorter.lib.parser import SourceDocument, parse_imports


class TestParseImports:
    """Tests for top-level import discovery."""

    def test_single_import(self) -> None:
        """A default import yields one node with unquoted module and 1-based lines."""
        [node] = parse_imports('import React from "react"')
        assert node.module == "react"
        assert (node.start, node.end) == (0, 25)
        assert (node.start_line, node.end_line) == (1, 1)

    def test_side_effect_import_includes_semicolon(self) -> None:
        """Bare imports are found and the semicolon is part of the span."""
        source = "import './polyfill';"
        [node] = parse_imports(source)
        assert node.module == "./polyfill"
        assert node.end == len(source)

    def test_source_order(self) -> None:
        """Nodes come back in source order."""
        source = 'import b from "b";\nfoo();\nimport a from "a";\n'
        assert [n.module for n in parse_imports(source)] == ["b", "a"]

    def test_multiline_import(self) -> None:
        """A statement spanning lines reports both lines."""
        source = 'import {\n  a,\n  b,\n} from "mod";\n'
        [node] = parse_imports(source)
        assert (node.start_line, node.end_line) == (1, 4)

    def test_exports_and_dynamic_imports_ignored(self) -> None:
        """Re-exports and import() calls are not import declarations."""
        source = 'export { a } from "./a";\nconst m = import("lazy");\nimport b from "b";\n'
        assert [n.module for n in parse_imports(source)] == ["b"]

    def test_nested_code_ignored(self) -> None:
        """Only top-level statements are collected."""
        source = 'function f() {\n  return 1;\n}\nimport a from "a";\n'
        assert [n.module for n in parse_imports(source)] == ["a"]

    def test_empty_source(self) -> None:
        """Empty input has no imports."""
        assert parse_imports("") == []

    def test_offsets_are_characters(self) -> None:
        """Offsets index the Python string even after non-ASCII text."""
        source = 'const s = "héllo wörld";\nimport a from "a";\n'
        [node] = parse_imports(source)
        assert source[node.start:node.end] == 'import a from "a";'

    def test_tsx_grammar_for_tsx_files(self) -> None:
        """JSX parses when the file name says .tsx."""
        source = 'import React from "react";\nconst el = <div className="x" />;\n'
        [node] = parse_imports(source, "app.tsx")
        assert node.module == "react"

    def test_syntax_error_raises(self) -> None:
        """Broken source raises SourceParseError carrying the path."""
        with pytest.raises(SourceParseError) as excinfo:
            parse_imports('import { from "a"\nconst = ;', "broken.ts")
        assert excinfo.value.filepath == "broken.ts"
        assert isinstance(excinfo.value.original_error, SyntaxError)


class TestComments:
    """Tests for comment attachment reported by the parser."""

    def test_leading_and_trailing(self) -> None:
        """Comments between statements are reported on both neighbours."""
        source = "\n".join(
            [
                "// one",
                '/* two */ import a from "a"; // three',
                "// four",
                "foo();",
            ]
        )
        [node] = parse_imports(source)
        assert [(c.start_line, c.end_line) for c in node.leading_comments] == [(1, 1), (2, 2)]
        assert [(c.start_line, c.end_line) for c in node.trailing_comments] == [(2, 2), (3, 3)]

    def test_comment_between_imports_shared(self) -> None:
        """A comment between two imports is trailing for one and leading for the other."""
        source = 'import a from "a";\n// between\nimport b from "b";\n'
        first, second = parse_imports(source)
        assert [c.key for c in first.trailing_comments] == [c.key for c in second.leading_comments]

    def test_comment_offsets(self) -> None:
        """Comment offsets slice the comment text."""
        source = '/* c */ import a from "a";'
        [node] = parse_imports(source)
        [comment] = node.leading_comments
        assert source[comment.start:comment.end] == "/* c */"

    def test_block_comment_lines(self) -> None:
        """Multi-line block comments span several lines."""
        source = '/*\n * header\n */\nimport a from "a";\n'
        [node] = parse_imports(source)
        [comment] = node.leading_comments
        assert (comment.start_line, comment.end_line) == (1, 3)


class TestSourceDocument:
    """Tests for the document wrapper."""

    def test_char_offset_ascii(self) -> None:
        """ASCII byte offsets equal character offsets."""
        doc = SourceDocument("abc")
        assert doc.char_offset(2) == 2

    def test_char_offset_multibyte(self) -> None:
        """Multi-byte characters count once."""
        doc = SourceDocument('"é";')
        assert doc.char_offset(len('"é"'.encode("utf-8"))) == 3

    def test_clean_source_has_no_error(self) -> None:
        """check_syntax() passes for valid code."""
        SourceDocument("const a = 1;\n").check_syntax()
