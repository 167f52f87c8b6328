"""Core tree building implementation for DOM navigation.

This module turns the line-oriented markup block into a navigable document tree.
The block starts with a line count, followed by that many lines, each either an
opening line carrying a quoted value or the closing marker.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, TextIO

from dom_navigator.shared import (
    BuilderConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    DOMNavigatorError,
    MalformedDocumentError,
    PerformanceMetrics,
    get_logger,
)
from dom_navigator.tree.node import Direction, DocNode

MS_PER_SECOND = 1000


def extract_value(line: str, quote_char: str = "'") -> str:
    """Return the text strictly between the first and last quote of ``line``.

    Raises:
        MalformedDocumentError: If the line does not hold a quoted value
    """
    first_quote_pos = line.find(quote_char)
    last_quote_pos = line.rfind(quote_char)
    if first_quote_pos < 0 or first_quote_pos >= last_quote_pos:
        raise MalformedDocumentError(f"No quoted value in {line!r}")
    return line[first_quote_pos + 1:last_quote_pos]


@dataclass
class DocumentTree:
    """Root container for the nodes of one parsed document.

    ``nodes`` holds every node in creation order and keeps them alive for the
    lifetime of the tree.
    """

    root: Optional[DocNode] = None
    nodes: List[DocNode] = field(default_factory=list)
    max_depth: int = 0
    correlation_id: Optional[str] = None

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def top_level_nodes(self) -> List[DocNode]:
        """Get the root and the nodes opened after it at depth one."""
        result: List[DocNode] = []
        node = self.root
        while node is not None:
            result.append(node)
            node = node.next_sibling
        return result

    @staticmethod
    def children_of(node: DocNode) -> List[DocNode]:
        """Get the children of ``node`` in document order."""
        children: List[DocNode] = []
        child = node.first_child
        while child is not None:
            children.append(child)
            child = child.next_sibling
        return children

    def iter_nodes(self) -> Iterator[DocNode]:
        """Traverse the tree depth-first in document order."""
        stack = list(reversed(self.top_level_nodes()))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(self.children_of(node)))

    def find(self, value: str) -> Optional[DocNode]:
        """Find the first node in document order carrying ``value``."""
        for node in self.iter_nodes():
            if node.value == value:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the tree to a nested dictionary."""
        def _node_to_dict(node: DocNode) -> Dict[str, Any]:
            return {
                "value": node.value,
                "children": [_node_to_dict(child) for child in self.children_of(node)],
            }

        return {
            "node_count": self.node_count,
            "max_depth": self.max_depth,
            "roots": [_node_to_dict(node) for node in self.top_level_nodes()],
        }

    def render(self, indent: str = "  ") -> str:
        """Render the tree as an indented outline, one value per line."""
        lines: List[str] = []

        def _render(node: DocNode, depth: int) -> None:
            lines.append(f"{indent * depth}{node.value}")
            for child in self.children_of(node):
                _render(child, depth + 1)

        for node in self.top_level_nodes():
            _render(node, 0)
        return "\n".join(lines)


@dataclass
class BuildResult:
    """Result object for tree building operations."""

    tree: DocumentTree = field(default_factory=DocumentTree)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None

    @property
    def root(self) -> Optional[DocNode]:
        return self.tree.root

    @property
    def node_count(self) -> int:
        return self.tree.node_count

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line_number: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line_number=line_number,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get a compact summary of the build."""
        return {
            "root": self.root.value if self.root is not None else None,
            "node_count": self.node_count,
            "max_depth": self.tree.max_depth,
            "diagnostics": len(self.diagnostics),
            "performance": self.performance.to_dict(),
        }


class DocumentBuilder:
    """Builds a DocumentTree from the markup block of an input stream.

    The builder reads exactly the lines announced by the count line and leaves
    the rest of the stream untouched, so instructions can be read afterwards.
    """

    def __init__(
        self,
        config: Optional[BuilderConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize document builder.

        Args:
            config: Builder configuration (closing marker, quote character, depth limit)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or BuilderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "document_builder")

        self._open_nodes: List[DocNode] = []
        self._previous_sibling: Optional[DocNode] = None
        self._line_number = 0

    def build(self, stream: TextIO) -> BuildResult:
        """Build a document tree from the markup block at the head of ``stream``.

        Args:
            stream: Text stream positioned at the line count

        Returns:
            BuildResult holding the tree and build metrics

        Raises:
            MalformedDocumentError: If the markup block violates the format
        """
        start_time = time.time()
        self._reset_state()

        result = BuildResult(correlation_id=self.correlation_id)
        tree = DocumentTree(correlation_id=self.correlation_id)
        result.tree = tree

        try:
            line_count = self._read_line_count(stream)
            self.logger.info(
                "Starting tree building",
                extra={"line_count": line_count}
            )

            for _ in range(line_count):
                self._process_line(self._read_line(stream), tree)

            if self._open_nodes:
                raise MalformedDocumentError(
                    f"{len(self._open_nodes)} unclosed node(s) at end of document, "
                    f"innermost {self._open_nodes[-1].value!r}",
                    self._line_number,
                )
        except DOMNavigatorError as e:
            self.logger.error(
                "Tree building failed",
                extra={"error": str(e), "line_number": self._line_number}
            )
            raise

        if tree.is_empty:
            result.add_diagnostic(
                DiagnosticSeverity.INFO,
                "Document contains no nodes",
                "document_builder",
                details={"line_count": line_count},
            )

        result.performance.processing_time_ms = (
            (time.time() - start_time) * MS_PER_SECOND
        )
        result.performance.lines_processed = line_count
        result.performance.nodes_created = tree.node_count

        self.logger.info(
            "Tree building completed",
            extra={
                "node_count": tree.node_count,
                "max_depth": tree.max_depth,
                "processing_time_ms": result.performance.processing_time_ms,
            }
        )
        return result

    def _reset_state(self) -> None:
        """Reset internal state for a new build."""
        self._open_nodes = []
        self._previous_sibling = None
        self._line_number = 0

    def _read_line(self, stream: TextIO) -> str:
        line = stream.readline()
        self._line_number += 1
        if not line:
            raise MalformedDocumentError(
                "Unexpected end of input inside markup block", self._line_number
            )
        return line.rstrip("\r\n")

    def _read_line_count(self, stream: TextIO) -> int:
        raw = self._read_line(stream).strip()
        try:
            line_count = int(raw)
        except ValueError:
            raise MalformedDocumentError(
                f"Line count must be an integer, got {raw!r}", self._line_number
            ) from None
        if line_count < 0:
            raise MalformedDocumentError(
                f"Line count must be >= 0, got {line_count}", self._line_number
            )
        return line_count

    def _process_line(self, line: str, tree: DocumentTree) -> None:
        if line.strip() == self.config.closing_marker:
            self._close_node()
        else:
            try:
                value = extract_value(line, self.config.quote_char)
            except MalformedDocumentError as e:
                raise MalformedDocumentError(str(e), self._line_number) from None
            self._open_node(value, tree)

    def _open_node(self, value: str, tree: DocumentTree) -> None:
        node = DocNode(value)
        parent = self._open_nodes[-1] if self._open_nodes else None
        node.set_link(Direction.PARENT, parent)
        node.set_link(Direction.PREVIOUS_SIBLING, self._previous_sibling)

        self._open_nodes.append(node)

        depth = len(self._open_nodes)
        if self.config.max_depth is not None and depth > self.config.max_depth:
            raise MalformedDocumentError(
                f"Nesting depth {depth} exceeds limit {self.config.max_depth}",
                self._line_number,
            )

        tree.nodes.append(node)
        tree.max_depth = max(tree.max_depth, depth)
        if tree.root is None:
            tree.root = node

        self.logger.debug(
            "Opened node",
            extra={
                "value": value,
                "depth": depth,
                "parent": parent.value if parent is not None else None,
                "line_number": self._line_number,
            }
        )

    def _close_node(self) -> None:
        if not self._open_nodes:
            raise MalformedDocumentError(
                f"Closing marker {self.config.closing_marker!r} without an open node",
                self._line_number,
            )
        self._previous_sibling = self._open_nodes.pop()
