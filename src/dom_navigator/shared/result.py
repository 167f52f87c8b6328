"""Result objects and diagnostic types for DOM navigation.

This module defines the diagnostic entries and performance metrics attached to
build and interpretation results.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line_number: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class PerformanceMetrics:
    """Performance metrics for build and navigation operations."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    lines_processed: int = 0
    nodes_created: int = 0
    instructions_executed: int = 0

    @property
    def lines_per_second(self) -> float:
        """Calculate markup lines processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.lines_processed * 1000.0) / self.processing_time_ms

    @property
    def instructions_per_second(self) -> float:
        """Calculate instructions executed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.instructions_executed * 1000.0) / self.processing_time_ms

    def merge(self, other: "PerformanceMetrics") -> "PerformanceMetrics":
        """Return the sum of two metric sets."""
        return PerformanceMetrics(
            processing_time_ms=self.processing_time_ms + other.processing_time_ms,
            memory_used_bytes=self.memory_used_bytes + other.memory_used_bytes,
            lines_processed=self.lines_processed + other.lines_processed,
            nodes_created=self.nodes_created + other.nodes_created,
            instructions_executed=(
                self.instructions_executed + other.instructions_executed
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a plain dictionary."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "lines_processed": self.lines_processed,
            "nodes_created": self.nodes_created,
            "instructions_executed": self.instructions_executed,
        }
