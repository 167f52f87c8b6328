"""Exception hierarchy for DOM navigation.

Every anomaly in the document or instruction stream is an unrecoverable
contract violation. Components raise one of these and never attempt repair.
"""

from typing import List, Optional


class DOMNavigatorError(Exception):
    """Base exception for all navigator errors."""


class LinkAlreadySetError(DOMNavigatorError):
    """Raised when a node link is set a second time in the same direction."""

    def __init__(self, value: str, direction: str) -> None:
        super().__init__(
            f"Link {direction!r} of node {value!r} is already set"
        )
        self.value = value
        self.direction = direction


class InvalidDirectionError(DOMNavigatorError):
    """Raised when a non-navigable direction is reversed."""


class MalformedDocumentError(DOMNavigatorError):
    """Raised when the markup block violates the document format."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class MalformedInstructionError(DOMNavigatorError):
    """Raised when an instruction batch is truncated or has a bad count."""


class UnknownInstructionError(MalformedInstructionError):
    """Raised for a token outside the direction vocabulary."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown instruction: {token!r}")
        self.token = token


class EmptyDocumentError(DOMNavigatorError):
    """Raised when instructions are executed against a document with no root."""


class ConfigError(DOMNavigatorError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []
