"""Navigable document node with four directional links.

Each node holds a value and at most one link per direction. Links are set once
and never overwritten; setting a link also fills in the reciprocal link on the
target when that slot is still empty.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from dom_navigator.shared.exceptions import (
    InvalidDirectionError,
    LinkAlreadySetError,
    UnknownInstructionError,
)


class Direction(Enum):
    """Navigable relations between nodes, valued by their instruction keyword."""

    PARENT = "parent"
    FIRST_CHILD = "first_child"
    NEXT_SIBLING = "next_sibling"
    PREVIOUS_SIBLING = "previous_sibling"

    @classmethod
    def from_keyword(cls, token: str) -> "Direction":
        """Map an instruction keyword to its direction (exact, case-sensitive)."""
        try:
            return cls(token)
        except ValueError:
            raise UnknownInstructionError(token) from None


_REVERSED = {
    Direction.FIRST_CHILD: Direction.PARENT,
    Direction.PARENT: Direction.FIRST_CHILD,
    Direction.NEXT_SIBLING: Direction.PREVIOUS_SIBLING,
    Direction.PREVIOUS_SIBLING: Direction.NEXT_SIBLING,
}


def reverse(direction: Optional[Direction]) -> Direction:
    """Return the inverse relation of ``direction``.

    Raises:
        InvalidDirectionError: If ``direction`` is not one of the four directions
    """
    try:
        return _REVERSED[direction]
    except (KeyError, TypeError):
        raise InvalidDirectionError(
            f"No reverse for direction {direction!r}"
        ) from None


@dataclass(frozen=True, eq=False)
class DocNode:
    """A single element of the navigable document tree.

    Nodes compare by identity. The value is fixed at construction; only the link
    table grows, and only additively.
    """

    value: str
    _links: Dict[Direction, Optional["DocNode"]] = field(
        default_factory=dict, init=False, repr=False
    )

    def link(self, direction: Direction) -> Optional["DocNode"]:
        """Return the node linked in ``direction``, or None if unset."""
        return self._links.get(direction)

    def has_link(self, direction: Direction) -> bool:
        """Check whether ``direction`` was ever set, even to None."""
        return direction in self._links

    def set_link(self, direction: Direction, node: Optional["DocNode"]) -> None:
        """Link this node to ``node`` and back-fill the reciprocal link.

        Setting a direction to None still consumes it: a later call for the same
        direction raises. The reciprocal link is only written when the target
        has nothing linked in the reverse direction.

        Raises:
            LinkAlreadySetError: If ``direction`` is already set on this node
        """
        reversed_direction = reverse(direction)
        self._attach(direction, node)

        if node is not None and node.link(reversed_direction) is None:
            node._attach(reversed_direction, self)

    def _attach(self, direction: Direction, node: Optional["DocNode"]) -> None:
        # Force-set; never back-fills.
        if direction in self._links:
            raise LinkAlreadySetError(self.value, direction.value)
        self._links[direction] = node

    @property
    def parent(self) -> Optional["DocNode"]:
        return self.link(Direction.PARENT)

    @property
    def first_child(self) -> Optional["DocNode"]:
        return self.link(Direction.FIRST_CHILD)

    @property
    def next_sibling(self) -> Optional["DocNode"]:
        return self.link(Direction.NEXT_SIBLING)

    @property
    def previous_sibling(self) -> Optional["DocNode"]:
        return self.link(Direction.PREVIOUS_SIBLING)

    def to_dict(self) -> Dict[str, Any]:
        """Describe this node and the values of its linked neighbours."""
        return {
            "value": self.value,
            "links": {
                direction.value: (
                    self._links[direction].value
                    if self._links[direction] is not None else None
                )
                for direction in Direction
                if direction in self._links
            },
        }
