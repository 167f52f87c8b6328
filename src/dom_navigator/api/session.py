"""Public navigation API.

Level 1: module functions ``navigate``, ``navigate_string``, ``navigate_file``,
``build_tree`` and ``build_tree_string``.
Level 2: ``NavigationSession`` for repeated runs with shared configuration,
usage statistics and optional profiling.
"""

import contextlib
import io
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ContextManager, Dict, Optional, TextIO, Union

from dom_navigator.navigation import CommandInterpreter, InstructionReader, InterpretResult
from dom_navigator.shared import (
    DOMNavigatorError,
    NavigatorConfig,
    PerformanceMetrics,
    get_logger,
)
from dom_navigator.tools.profiling import (
    LayerPerformance,
    PerformanceProfiler,
    ProfilingSession,
)
from dom_navigator.tree import BuildResult, DocumentBuilder

MS_PER_SECOND = 1000


@dataclass
class SessionResult:
    """Combined result of building a tree and executing its instructions."""

    build: BuildResult
    interpretation: InterpretResult
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    profiling: Optional[ProfilingSession] = None
    correlation_id: Optional[str] = None

    @property
    def cases(self) -> int:
        return self.interpretation.cases

    def summary(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "build": self.build.summary(),
            "interpretation": self.interpretation.summary(),
            "performance": self.performance.to_dict(),
        }


class NavigationSession:
    """Reusable navigator bound to one configuration.

    Examples:
        >>> session = NavigationSession()
        >>> result = session.run(sys.stdin, sys.stdout)
        >>> session.statistics["total_runs"]
        1
    """

    def __init__(
        self,
        config: Optional[NavigatorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or NavigatorConfig()
        self.correlation_id = correlation_id or self.config.global_.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "navigation_session")

        self.profiler: Optional[PerformanceProfiler] = (
            PerformanceProfiler() if self.config.global_.enable_profiling else None
        )

        self._run_count = 0
        self._failed_runs = 0
        self._total_processing_time = 0.0
        self._total_instructions = 0

    def _profile_layer(
        self,
        session: Optional[ProfilingSession],
        layer_name: str
    ) -> ContextManager[Optional[LayerPerformance]]:
        if self.profiler is None or session is None:
            return contextlib.nullcontext(None)
        return self.profiler.profile_layer(session, layer_name)

    def build(self, input_stream: TextIO) -> BuildResult:
        """Build the document tree from the markup block only."""
        builder = DocumentBuilder(self.config.builder, self.correlation_id)
        return builder.build(input_stream)

    def run(self, input_stream: TextIO, output_stream: TextIO) -> SessionResult:
        """Build the tree, then execute every instruction batch.

        Args:
            input_stream: Markup block followed by instruction batches
            output_stream: Receives the Case blocks

        Returns:
            SessionResult for the run

        Raises:
            DOMNavigatorError: On any malformed document or instruction
        """
        start_time = time.time()
        self._run_count += 1
        profiling = (
            self.profiler.start_session(f"run-{self._run_count}")
            if self.profiler is not None else None
        )

        self.logger.info(
            "Starting navigation run",
            extra={"run_number": self._run_count, "profiling": profiling is not None}
        )

        try:
            with self._profile_layer(profiling, "tree_building") as layer:
                build_result = self.build(input_stream)
                if layer is not None:
                    layer.operations_count = build_result.node_count

            with self._profile_layer(profiling, "instruction_execution") as layer:
                interpreter = CommandInterpreter(
                    build_result.root, self.config.interpreter, self.correlation_id
                )
                reader = InstructionReader(input_stream, self.correlation_id)
                interpret_result = interpreter.run(reader, output_stream)
                if layer is not None:
                    layer.operations_count = interpret_result.instructions_executed
        except DOMNavigatorError:
            self._failed_runs += 1
            self.logger.error(
                "Navigation run failed",
                extra={"run_number": self._run_count}
            )
            raise
        finally:
            if profiling is not None:
                self.profiler.end_session(profiling)

        performance = build_result.performance.merge(interpret_result.performance)
        performance.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        if profiling is not None:
            performance.memory_used_bytes = profiling.memory_used_bytes

        self._total_processing_time += performance.processing_time_ms
        self._total_instructions += interpret_result.instructions_executed

        self.logger.info(
            "Navigation run completed",
            extra={
                "run_number": self._run_count,
                "cases": interpret_result.cases,
                "processing_time_ms": performance.processing_time_ms,
            }
        )

        return SessionResult(
            build=build_result,
            interpretation=interpret_result,
            performance=performance,
            profiling=profiling,
            correlation_id=self.correlation_id,
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get session usage statistics."""
        successful_runs = self._run_count - self._failed_runs
        return {
            "total_runs": self._run_count,
            "successful_runs": successful_runs,
            "failed_runs": self._failed_runs,
            "total_instructions": self._total_instructions,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / successful_runs
                if successful_runs > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset session usage statistics."""
        self._run_count = 0
        self._failed_runs = 0
        self._total_processing_time = 0.0
        self._total_instructions = 0
        if self.profiler is not None:
            self.profiler.clear_sessions()


def navigate(
    input_stream: TextIO,
    output_stream: TextIO,
    config: Optional[NavigatorConfig] = None,
    correlation_id: Optional[str] = None
) -> SessionResult:
    """Read a document and its instructions from one stream, write Case blocks to another.

    Examples:
        >>> out = io.StringIO()
        >>> _ = navigate(io.StringIO("4\\n<n v='a'>\\n<n v='b'>\\n</n>\\n</n>\\n1\\nfirst_child\\n0\\n"), out)
        >>> out.getvalue()
        'Case 1:\\nb\\n'
    """
    return NavigationSession(config, correlation_id).run(input_stream, output_stream)


def navigate_string(
    text: str,
    config: Optional[NavigatorConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Run the navigator over ``text`` and return its output."""
    output = io.StringIO()
    navigate(io.StringIO(text), output, config, correlation_id)
    return output.getvalue()


def navigate_file(
    file_path: Union[str, Path],
    output_stream: TextIO,
    config: Optional[NavigatorConfig] = None,
    correlation_id: Optional[str] = None
) -> SessionResult:
    """Run the navigator over a file, writing Case blocks to ``output_stream``."""
    path_obj = Path(file_path)
    with path_obj.open(encoding="utf-8", newline=None) as input_stream:
        return navigate(input_stream, output_stream, config, correlation_id)


def build_tree(
    input_stream: TextIO,
    config: Optional[NavigatorConfig] = None,
    correlation_id: Optional[str] = None
) -> BuildResult:
    """Build the document tree from the markup block of ``input_stream``."""
    return NavigationSession(config, correlation_id).build(input_stream)


def build_tree_string(
    text: str,
    config: Optional[NavigatorConfig] = None,
    correlation_id: Optional[str] = None
) -> BuildResult:
    """Build the document tree from a markup block held in a string."""
    return build_tree(io.StringIO(text), config, correlation_id)
