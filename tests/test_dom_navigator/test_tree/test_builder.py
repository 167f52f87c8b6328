"""Tests for building document trees from markup blocks."""

import io
from typing import List

import pytest

from dom_navigator.shared import (
    BuilderConfig,
    DiagnosticSeverity,
    MalformedDocumentError,
)
from dom_navigator.tree import (
    BuildResult,
    Direction,
    DocumentBuilder,
    DocumentTree,
    extract_value,
)


def markup(*lines: str) -> io.StringIO:
    """Create a stream holding a counted markup block."""
    return io.StringIO(f"{len(lines)}\n" + "".join(f"{line}\n" for line in lines))


def build(*lines: str) -> BuildResult:
    return DocumentBuilder().build(markup(*lines))


class TestExtractValue:
    """Test quoted value extraction from opening lines."""

    def test_extracts_text_between_quotes(self) -> None:
        """Test value is the text strictly between the quotes."""
        assert extract_value("<n value = 'parent'>") == "parent"

    def test_uses_first_and_last_quote(self) -> None:
        """Test inner quotes are kept as part of the value."""
        assert extract_value("<n value = 'it's here'>") == "it's here"

    def test_empty_value(self) -> None:
        """Test two adjacent quotes give an empty value."""
        assert extract_value("<n value = ''>") == ""

    def test_custom_quote_character(self) -> None:
        """Test a configured quote character is honoured."""
        assert extract_value('<n value = "x">', quote_char='"') == "x"

    @pytest.mark.parametrize("line", ["<n value = parent>", "<n value = 'parent>", ""])
    def test_missing_quotes_raise(self, line: str) -> None:
        """Test lines without two quotes are rejected."""
        with pytest.raises(MalformedDocumentError):
            extract_value(line)


class TestDocumentBuilder:
    """Test tree construction, link wiring and failure conditions."""

    def test_sample_document(self) -> None:
        """Test the parent/child sample builds the expected tree."""
        result = build("<n value = 'parent'>", "<n value = 'child'>", "</n>", "</n>")

        root = result.root
        assert root is not None
        assert root.value == "parent"
        assert root.first_child.value == "child"
        assert root.first_child.parent is root
        assert root.parent is None
        assert root.next_sibling is None
        assert result.node_count == 2
        assert result.tree.max_depth == 2

    def test_three_siblings_chain_in_open_order(self) -> None:
        """Test siblings link both ways and only the first is first_child."""
        result = build(
            "<n value = 'p'>",
            "<n value = 'a'>", "</n>",
            "<n value = 'b'>", "</n>",
            "<n value = 'c'>", "</n>",
            "</n>",
        )
        root = result.root
        a, b, c = DocumentTree.children_of(root)

        assert [a.value, b.value, c.value] == ["a", "b", "c"]
        assert root.first_child is a
        assert a.previous_sibling is None
        assert a.next_sibling is b
        assert b.previous_sibling is a
        assert b.next_sibling is c
        assert c.previous_sibling is b
        assert c.next_sibling is None
        for child in (a, b, c):
            assert child.parent is root

    def test_first_child_links_back_to_last_closed_node(self) -> None:
        """Test a first child takes the most recently closed node as previous sibling."""
        result = build(
            "<n value = 'root'>",
            "<n value = 'b'>", "</n>",
            "<n value = 'c'>",
            "<n value = 'd'>", "</n>",
            "</n>",
            "</n>",
        )
        tree = result.tree
        b = tree.find("b")
        c = tree.find("c")
        d = tree.find("d")

        assert c.first_child is d
        assert d.previous_sibling is b
        assert b.next_sibling is c
        assert c.previous_sibling is b
        assert DocumentTree.children_of(c) == [d]

    def test_every_direction_is_set_once_on_built_nodes(self) -> None:
        """Test parent and previous sibling are recorded on every built node."""
        result = build("<n value = 'a'>", "<n value = 'b'>", "</n>", "</n>")

        for node in result.tree.nodes:
            assert node.has_link(Direction.PARENT)
            assert node.has_link(Direction.PREVIOUS_SIBLING)

    def test_top_level_siblings(self) -> None:
        """Test nodes opened after the root closes become its siblings."""
        result = build("<n value = 'a'>", "</n>", "<n value = 'b'>", "</n>")

        assert result.root.value == "a"
        assert result.root.next_sibling.value == "b"
        assert [node.value for node in result.tree.top_level_nodes()] == ["a", "b"]

    def test_empty_document(self) -> None:
        """Test a zero-line block yields no root and an info diagnostic."""
        result = DocumentBuilder().build(io.StringIO("0\n"))

        assert result.root is None
        assert result.tree.is_empty
        infos = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert len(infos) == 1
        assert "no nodes" in infos[0].message

    def test_builder_leaves_instructions_unread(self) -> None:
        """Test only the announced number of lines is consumed."""
        stream = io.StringIO("2\n<n value = 'a'>\n</n>\n1\nparent\n0\n")

        DocumentBuilder().build(stream)

        assert stream.read() == "1\nparent\n0\n"

    def test_closing_marker_tolerates_surrounding_whitespace(self) -> None:
        """Test closing lines with CRLF or padding still close the node."""
        stream = io.StringIO("2\r\n<n value = 'a'>\r\n  </n>  \r\n")

        result = DocumentBuilder().build(stream)

        assert result.root.value == "a"

    def test_custom_closing_marker(self) -> None:
        """Test a configured closing marker replaces the default."""
        builder = DocumentBuilder(BuilderConfig(closing_marker="</node>"))

        result = builder.build(markup("<node v='x'>", "</node>"))

        assert result.root.value == "x"

    def test_metrics_are_recorded(self) -> None:
        """Test build metrics count lines and nodes."""
        result = build("<n value = 'a'>", "<n value = 'b'>", "</n>", "</n>")

        assert result.performance.lines_processed == 4
        assert result.performance.nodes_created == 2
        assert result.performance.processing_time_ms >= 0.0

    def test_unclosed_nodes_raise(self) -> None:
        """Test opens exceeding closes are fatal."""
        with pytest.raises(MalformedDocumentError, match="unclosed"):
            build("<n value = 'a'>", "<n value = 'b'>", "</n>")

    def test_excess_closing_marker_raises(self) -> None:
        """Test closes exceeding opens are fatal."""
        with pytest.raises(MalformedDocumentError, match="without an open node") as excinfo:
            build("<n value = 'a'>", "</n>", "</n>")
        assert excinfo.value.line_number == 4

    def test_malformed_opening_line_raises_with_line_number(self) -> None:
        """Test an opening line without a quoted value is fatal."""
        with pytest.raises(MalformedDocumentError) as excinfo:
            build("<n value = 'a'>", "<n value = b>", "</n>", "</n>")
        assert excinfo.value.line_number == 3

    def test_truncated_block_raises(self) -> None:
        """Test input ending before the announced line count is fatal."""
        with pytest.raises(MalformedDocumentError, match="Unexpected end of input"):
            DocumentBuilder().build(io.StringIO("3\n<n value = 'a'>\n</n>\n"))

    @pytest.mark.parametrize("first_line", ["four\n", "-1\n", ""])
    def test_bad_line_count_raises(self, first_line: str) -> None:
        """Test a missing, negative or non-numeric count is fatal."""
        with pytest.raises(MalformedDocumentError):
            DocumentBuilder().build(io.StringIO(first_line))

    def test_depth_limit(self) -> None:
        """Test nesting beyond max_depth is fatal."""
        builder = DocumentBuilder(BuilderConfig(max_depth=1))

        with pytest.raises(MalformedDocumentError, match="exceeds limit"):
            builder.build(markup("<n v='a'>", "<n v='b'>", "</n>", "</n>"))

    def test_builder_is_reusable(self) -> None:
        """Test state from a failed build does not leak into the next one."""
        builder = DocumentBuilder()
        with pytest.raises(MalformedDocumentError):
            builder.build(markup("<n v='a'>"))

        result = builder.build(markup("<n v='b'>", "</n>"))

        assert result.root.value == "b"
        assert result.root.previous_sibling is None


class TestDocumentTree:
    """Test tree traversal and rendering helpers."""

    @pytest.fixture
    def tree(self) -> DocumentTree:
        return build(
            "<n v='html'>",
            "<n v='head'>", "</n>",
            "<n v='body'>",
            "<n v='p'>", "</n>",
            "</n>",
            "</n>",
        ).tree

    def test_iter_nodes_in_document_order(self, tree: DocumentTree) -> None:
        """Test depth-first traversal follows document order."""
        values: List[str] = [node.value for node in tree.iter_nodes()]
        assert values == ["html", "head", "body", "p"]
        assert values == [node.value for node in tree.nodes]

    def test_find(self, tree: DocumentTree) -> None:
        """Test lookup by value."""
        assert tree.find("p").parent.value == "body"
        assert tree.find("missing") is None

    def test_to_dict(self, tree: DocumentTree) -> None:
        """Test nested dictionary form."""
        assert tree.to_dict() == {
            "node_count": 4,
            "max_depth": 3,
            "roots": [
                {
                    "value": "html",
                    "children": [
                        {"value": "head", "children": []},
                        {"value": "body", "children": [{"value": "p", "children": []}]},
                    ],
                }
            ],
        }

    def test_render(self, tree: DocumentTree) -> None:
        """Test indented outline rendering."""
        assert tree.render() == "html\n  head\n  body\n    p"
