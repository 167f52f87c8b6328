"""Shared utilities for DOM navigation.

This module provides shared data structures, configuration objects, result types,
exceptions and logging helpers used across the builder, interpreter and CLI.
"""

from .config import (
    BuilderConfig,
    GlobalConfig,
    InterpreterConfig,
    NavigatorConfig,
)
from .exceptions import (
    ConfigError,
    ConfigValidationError,
    DOMNavigatorError,
    EmptyDocumentError,
    InvalidDirectionError,
    LinkAlreadySetError,
    MalformedDocumentError,
    MalformedInstructionError,
    UnknownInstructionError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "BuilderConfig",
    "GlobalConfig",
    "InterpreterConfig",
    "NavigatorConfig",
    "ConfigError",
    "ConfigValidationError",
    "DOMNavigatorError",
    "EmptyDocumentError",
    "InvalidDirectionError",
    "LinkAlreadySetError",
    "MalformedDocumentError",
    "MalformedInstructionError",
    "UnknownInstructionError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
