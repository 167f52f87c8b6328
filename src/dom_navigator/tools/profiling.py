"""Performance profiling tools for DOM navigation.

Measures wall time and resident memory for each processing layer (tree building
and instruction execution) of a navigation run.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from dom_navigator.shared.logging import get_logger


@dataclass
class LayerPerformance:
    """Performance metrics for a specific processing layer."""

    layer_name: str
    start_time: float
    end_time: float
    memory_start: int  # bytes
    memory_end: int  # bytes
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        """Operations per second rate."""
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer_name": self.layer_name,
            "duration_ms": self.duration_ms,
            "memory_delta": self.memory_delta,
            "operations_count": self.operations_count,
            "ops_per_second": self.ops_per_second,
        }


@dataclass
class ProfilingSession:
    """Container for a complete profiling session."""

    session_id: str
    start_time: float
    end_time: float = 0.0
    layers: List[LayerPerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_used_bytes(self) -> int:
        """Sum of positive memory deltas across layers."""
        return sum(layer.memory_delta for layer in self.layers if layer.memory_delta > 0)

    def layer(self, layer_name: str) -> Optional[LayerPerformance]:
        """Get the most recent measurement for ``layer_name``."""
        for layer in reversed(self.layers):
            if layer.layer_name == layer_name:
                return layer
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "total_duration_ms": self.total_duration_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "metadata": self.metadata,
            "layers": [layer.to_dict() for layer in self.layers],
        }


class PerformanceProfiler:
    """Performance profiler for navigation runs.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.start_session("run-1")
        >>> with profiler.profile_layer(session, "tree_building") as layer:
        ...     result = builder.build(stream)
        ...     layer.operations_count = result.node_count
        >>> profiler.end_session(session)
    """

    def __init__(self, enable_memory_tracking: bool = True):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample process RSS around each layer
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "performance_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def current_memory(self) -> int:
        """Resident set size of this process in bytes, or 0 when not tracking."""
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def start_session(self, session_id: str) -> ProfilingSession:
        """Start a new profiling session."""
        session = ProfilingSession(session_id=session_id, start_time=time.time())
        self.logger.debug(
            "Started profiling session",
            extra={
                "session_id": session_id,
                "memory_tracking": self.enable_memory_tracking
            }
        )
        return session

    def end_session(self, session: ProfilingSession) -> None:
        """End a profiling session and store results."""
        session.end_time = time.time()
        self.sessions.append(session)

        self.logger.info(
            "Ended profiling session",
            extra={
                "session_id": session.session_id,
                "duration_ms": session.total_duration_ms,
                "layer_count": len(session.layers)
            }
        )

    def profile_layer(self, session: ProfilingSession, layer_name: str) -> "LayerProfiler":
        """Profile a specific processing layer."""
        return LayerProfiler(self, session, layer_name)

    def add_layer_performance(
        self,
        session: ProfilingSession,
        layer_perf: LayerPerformance
    ) -> None:
        """Add layer performance data to session."""
        session.layers.append(layer_perf)

        self.logger.debug(
            "Added layer performance data",
            extra={
                "session_id": session.session_id,
                "layer_name": layer_perf.layer_name,
                "duration_ms": layer_perf.duration_ms,
                "memory_delta": layer_perf.memory_delta
            }
        )

    def format_report(self) -> str:
        """Render all recorded sessions as a short text report."""
        lines = []
        for session in self.sessions:
            lines.append(
                f"Session {session.session_id}: {session.total_duration_ms:.2f}ms, "
                f"{session.memory_used_bytes} bytes"
            )
            for layer in session.layers:
                lines.append(
                    f"  {layer.layer_name}: {layer.duration_ms:.2f}ms, "
                    f"{layer.operations_count} ops, {layer.memory_delta:+d} bytes"
                )
        return "\n".join(lines)

    def save_report(self, output_path: Path) -> None:
        """Save all recorded sessions as JSON."""
        report_data = {
            "generation_time": time.time(),
            "sessions": [session.to_dict() for session in self.sessions],
        }
        output_path.write_text(json.dumps(report_data, indent=2))

        self.logger.info(
            "Saved performance report",
            extra={
                "output_path": str(output_path),
                "session_count": len(self.sessions)
            }
        )

    def clear_sessions(self) -> None:
        """Clear all stored profiling sessions."""
        self.sessions.clear()


class LayerProfiler:
    """Context manager for profiling individual processing layers."""

    def __init__(self, profiler: PerformanceProfiler, session: ProfilingSession, layer_name: str):
        self.profiler = profiler
        self.session = session
        self.layer_name = layer_name
        self.layer_perf: Optional[LayerPerformance] = None

    def __enter__(self) -> LayerPerformance:
        """Start layer profiling."""
        self.layer_perf = LayerPerformance(
            layer_name=self.layer_name,
            start_time=time.time(),
            end_time=0.0,
            memory_start=self.profiler.current_memory(),
            memory_end=0,
        )
        return self.layer_perf

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End layer profiling."""
        if self.layer_perf is None:
            return

        self.layer_perf.end_time = time.time()
        self.layer_perf.memory_end = self.profiler.current_memory()

        self.profiler.add_layer_performance(self.session, self.layer_perf)
