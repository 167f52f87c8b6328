"""Developer tools for DOM navigation.

Provides layer-level timing and memory profiling for navigation runs.
"""

from .profiling import (
    LayerPerformance,
    LayerProfiler,
    PerformanceProfiler,
    ProfilingSession,
)

__all__ = [
    "LayerPerformance",
    "LayerProfiler",
    "PerformanceProfiler",
    "ProfilingSession",
]
