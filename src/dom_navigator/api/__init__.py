"""Public API for DOM navigation."""

from .session import (
    NavigationSession,
    SessionResult,
    build_tree,
    build_tree_string,
    navigate,
    navigate_file,
    navigate_string,
)

__all__ = [
    "NavigationSession",
    "SessionResult",
    "build_tree",
    "build_tree_string",
    "navigate",
    "navigate_file",
    "navigate_string",
]
