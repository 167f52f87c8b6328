"""DOM Navigator.

Builds a navigable tree from a line-oriented markup block and walks a cursor
through it with first_child / next_sibling / previous_sibling / parent moves.

Progressive API Disclosure:
- Level 1: Simple functions - navigate(), navigate_string(), build_tree()
- Level 2: Reusable session - NavigationSession class
"""

__version__ = "0.1.0"
__author__ = "DOM Navigator Team"

from .api import (
    NavigationSession,
    SessionResult,
    build_tree,
    build_tree_string,
    navigate,
    navigate_file,
    navigate_string,
)
from .navigation import CommandInterpreter, InstructionReader
from .shared.config import NavigatorConfig
from .tree import BuildResult, Direction, DocNode, DocumentBuilder, DocumentTree

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "navigate",
    "navigate_string",
    "navigate_file",
    "build_tree",
    "build_tree_string",

    # Level 2: Reusable session
    "NavigationSession",
    "SessionResult",

    # Building blocks
    "BuildResult",
    "CommandInterpreter",
    "Direction",
    "DocNode",
    "DocumentBuilder",
    "DocumentTree",
    "InstructionReader",

    # Configuration
    "NavigatorConfig",
]
