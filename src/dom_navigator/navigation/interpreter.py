"""Command interpreter driving a cursor through a document tree."""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, TextIO

from dom_navigator.shared import (
    DOMNavigatorError,
    EmptyDocumentError,
    InterpreterConfig,
    PerformanceMetrics,
    get_logger,
)
from dom_navigator.navigation.instructions import InstructionReader
from dom_navigator.tree.node import Direction, DocNode

MS_PER_SECOND = 1000


@dataclass
class InterpretResult:
    """Counters collected while executing instruction batches."""

    cases: int = 0
    moves: int = 0
    no_op_moves: int = 0
    final_value: Optional[str] = None
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    @property
    def instructions_executed(self) -> int:
        return self.moves + self.no_op_moves

    def summary(self) -> Dict[str, Any]:
        return {
            "cases": self.cases,
            "instructions_executed": self.instructions_executed,
            "moves": self.moves,
            "no_op_moves": self.no_op_moves,
            "final_value": self.final_value,
            "performance": self.performance.to_dict(),
        }


class CommandInterpreter:
    """Executes navigation instructions against a single shared cursor.

    The cursor starts at ``root``. Moving along a link that is not set leaves the
    cursor in place; the value at the cursor is emitted after every instruction
    either way.
    """

    def __init__(
        self,
        root: Optional[DocNode],
        config: Optional[InterpreterConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or InterpreterConfig()
        self.logger = get_logger(__name__, correlation_id, "command_interpreter")
        self._cursor = root
        self._moves = 0
        self._no_op_moves = 0

    @property
    def cursor(self) -> Optional[DocNode]:
        return self._cursor

    def step(self, direction: Direction) -> DocNode:
        """Move the cursor one step in ``direction`` if a node is linked there.

        Returns:
            The node under the cursor after the step

        Raises:
            EmptyDocumentError: If the document has no root
        """
        if self._cursor is None:
            raise EmptyDocumentError("Cannot navigate a document with no nodes")

        next_node = self._cursor.link(direction)
        if next_node is not None:
            self._cursor = next_node
            self._moves += 1
        else:
            self._no_op_moves += 1
            self.logger.debug(
                "No link in direction, cursor stays",
                extra={"direction": direction.value, "value": self._cursor.value}
            )
        return self._cursor

    def run_batch(self, directions: Iterable[Direction]) -> List[str]:
        """Execute a batch and return the cursor value after each instruction."""
        return [self.step(direction).value for direction in directions]

    def run(self, reader: InstructionReader, output: TextIO) -> InterpretResult:
        """Execute every batch from ``reader``, writing one Case block per batch.

        Args:
            reader: Source of instruction batches
            output: Stream receiving the Case headers and cursor values

        Returns:
            InterpretResult with execution counters
        """
        start_time = time.time()
        result = InterpretResult()
        self._moves = 0
        self._no_op_moves = 0

        try:
            for batch in reader.batches():
                result.cases += 1
                values = self.run_batch(batch)
                output.write(self.config.case_header.format(number=result.cases) + "\n")
                for value in values:
                    output.write(value + "\n")
        except DOMNavigatorError as e:
            self.logger.error(
                "Instruction execution failed",
                extra={"error": str(e), "case_number": result.cases}
            )
            raise

        result.moves = self._moves
        result.no_op_moves = self._no_op_moves
        result.final_value = self._cursor.value if self._cursor is not None else None
        result.performance.instructions_executed = result.instructions_executed
        result.performance.processing_time_ms = (
            (time.time() - start_time) * MS_PER_SECOND
        )

        self.logger.info(
            "Instruction execution completed",
            extra={
                "cases": result.cases,
                "instructions_executed": result.instructions_executed,
                "no_op_moves": result.no_op_moves,
            }
        )
        return result
