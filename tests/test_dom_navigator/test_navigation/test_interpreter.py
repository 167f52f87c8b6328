"""Tests for the cursor-driven command interpreter."""

import io

import pytest

from dom_navigator.navigation import CommandInterpreter, InstructionReader
from dom_navigator.shared import EmptyDocumentError, InterpreterConfig
from dom_navigator.tree import Direction, DocNode, DocumentBuilder


@pytest.fixture
def family() -> DocNode:
    """Root 'p' with children 'a', 'b', 'c'; 'b' has a child 'x'."""
    stream = io.StringIO(
        "10\n"
        "<n value = 'p'>\n"
        "<n value = 'a'>\n</n>\n"
        "<n value = 'b'>\n<n value = 'x'>\n</n>\n</n>\n"
        "<n value = 'c'>\n</n>\n"
        "</n>\n"
    )
    return DocumentBuilder().build(stream).root


class TestCommandInterpreter:
    """Test cursor movement and Case block output."""

    def test_cursor_starts_at_root(self, family: DocNode) -> None:
        """Test the cursor is initialised to the root."""
        assert CommandInterpreter(family).cursor is family

    def test_step_moves_along_existing_link(self, family: DocNode) -> None:
        """Test a step follows the link when one is set."""
        interpreter = CommandInterpreter(family)

        assert interpreter.step(Direction.FIRST_CHILD).value == "a"
        assert interpreter.step(Direction.NEXT_SIBLING).value == "b"
        assert interpreter.step(Direction.FIRST_CHILD).value == "x"
        assert interpreter.step(Direction.PARENT).value == "b"
        assert interpreter.step(Direction.PREVIOUS_SIBLING).value == "a"

    def test_step_without_link_is_a_no_op(self, family: DocNode) -> None:
        """Test moving into a missing link keeps the cursor and emits its value."""
        interpreter = CommandInterpreter(family)

        assert interpreter.run_batch(
            [Direction.PARENT, Direction.NEXT_SIBLING, Direction.PREVIOUS_SIBLING]
        ) == ["p", "p", "p"]
        assert interpreter.cursor is family

    def test_last_child_has_no_next_sibling(self, family: DocNode) -> None:
        """Test the end of a sibling chain is a no-op."""
        interpreter = CommandInterpreter(family)

        values = interpreter.run_batch(
            [Direction.FIRST_CHILD, Direction.NEXT_SIBLING, Direction.NEXT_SIBLING,
             Direction.NEXT_SIBLING, Direction.PARENT]
        )

        assert values == ["a", "b", "c", "c", "p"]

    def test_parent_of_later_sibling(self, family: DocNode) -> None:
        """Test every child links back to the parent, not just the first."""
        interpreter = CommandInterpreter(family)

        values = interpreter.run_batch(
            [Direction.FIRST_CHILD, Direction.NEXT_SIBLING, Direction.NEXT_SIBLING,
             Direction.PARENT, Direction.FIRST_CHILD]
        )

        assert values == ["a", "b", "c", "p", "a"]

    def test_run_writes_numbered_cases(self, family: DocNode) -> None:
        """Test each batch produces a Case header and one line per instruction."""
        interpreter = CommandInterpreter(family)
        reader = InstructionReader(
            io.StringIO("2\nfirst_child\nnext_sibling\n1\nfirst_child\n0\n")
        )
        output = io.StringIO()

        result = interpreter.run(reader, output)

        assert output.getvalue() == "Case 1:\na\nb\nCase 2:\nx\n"
        assert result.cases == 2
        assert result.instructions_executed == 3
        assert result.moves == 3
        assert result.no_op_moves == 0
        assert result.final_value == "x"

    def test_cursor_is_shared_across_batches(self, family: DocNode) -> None:
        """Test a batch continues from where the previous one stopped."""
        interpreter = CommandInterpreter(family)
        output = io.StringIO()

        interpreter.run(InstructionReader(io.StringIO("1 first_child 1 parent 1 parent 0")), output)

        assert output.getvalue() == "Case 1:\na\nCase 2:\np\nCase 3:\np\n"

    def test_run_counts_no_op_moves(self, family: DocNode) -> None:
        """Test no-op moves are counted separately."""
        interpreter = CommandInterpreter(family)

        result = interpreter.run(
            InstructionReader(io.StringIO("2 parent first_child 0")), io.StringIO()
        )

        assert result.moves == 1
        assert result.no_op_moves == 1
        assert result.performance.instructions_executed == 2

    def test_custom_case_header(self, family: DocNode) -> None:
        """Test the Case header format is configurable."""
        interpreter = CommandInterpreter(family, InterpreterConfig(case_header="# {number}"))
        output = io.StringIO()

        interpreter.run(InstructionReader(io.StringIO("1 first_child 0")), output)

        assert output.getvalue() == "# 1\na\n"

    def test_empty_document_without_instructions(self) -> None:
        """Test an empty document is fine when no batch is executed."""
        output = io.StringIO()

        result = CommandInterpreter(None).run(InstructionReader(io.StringIO("0\n")), output)

        assert output.getvalue() == ""
        assert result.cases == 0
        assert result.final_value is None

    def test_empty_document_with_instructions_raises(self) -> None:
        """Test navigating with no root is fatal."""
        interpreter = CommandInterpreter(None)

        with pytest.raises(EmptyDocumentError):
            interpreter.run(InstructionReader(io.StringIO("1 parent 0")), io.StringIO())
