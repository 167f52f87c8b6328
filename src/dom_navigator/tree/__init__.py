"""Tree building engine for DOM navigation.

Key Components:
    DocNode: Node with once-only directional links and reciprocal back-fill
    Direction: The four navigable relations between nodes
    DocumentBuilder: Builds a DocumentTree from the markup block of a stream
    DocumentTree: Root container with traversal and rendering helpers
    BuildResult: Tree plus diagnostics and build metrics
"""

from .builder import (
    BuildResult,
    DocumentBuilder,
    DocumentTree,
    extract_value,
)
from .node import Direction, DocNode, reverse

__all__ = [
    "BuildResult",
    "DocumentBuilder",
    "DocumentTree",
    "extract_value",
    "Direction",
    "DocNode",
    "reverse",
]
