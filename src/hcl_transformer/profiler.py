"""Performance profiler for HCL Transformer conversions."""

import time
import psutil
import logging
from typing import Dict, Any, Optional, List
from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class PerformanceMetrics:
    """Performance metrics for one conversion."""
    operation_name: str
    start_time: float
    end_time: float
    duration: float
    input_size: int
    output_size: int
    memory_peak_mb: float
    memory_start_mb: float
    memory_end_mb: float
    throughput_mbps: float
    fallbacks: int
    success: bool


class PerformanceProfiler:
    """
    Profiler recording duration, memory and throughput per conversion.

    Memory figures are the resident set size of the current process as
    reported by psutil.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[PerformanceMetrics] = []
        self.current_operation: Optional[str] = None
        self.start_time: Optional[float] = None
        self.start_memory: Optional[float] = None
        self.peak_memory: float = 0
        self.input_size = 0
        self.output_size = 0
        self.fallbacks = 0
        self.success = True

    @contextmanager
    def profile_operation(self, operation_name: str, input_size: int = 0):
        """
        Context manager for profiling one conversion.

        The managed block may set ``output_size``, ``fallbacks`` and
        ``success`` on the yielded profiler before it exits.

        Args:
            operation_name: Name of the operation being profiled
            input_size: Size of input data in bytes
        """
        self.start_profiling(operation_name, input_size)
        try:
            yield self
        finally:
            self.stop_profiling()

    def start_profiling(self, operation_name: str, input_size: int = 0) -> None:
        """
        Start profiling an operation.

        Args:
            operation_name: Name of the operation
            input_size: Size of input data in bytes
        """
        self.current_operation = operation_name
        self.start_time = time.time()
        self.input_size = input_size
        self.output_size = 0
        self.fallbacks = 0
        self.success = True

        self.start_memory = self._rss_mb()
        self.peak_memory = self.start_memory

        self.logger.debug(f"Started profiling: {operation_name}")

    def sample_performance(self) -> None:
        """Sample current memory usage."""
        if not self.current_operation:
            return
        self.peak_memory = max(self.peak_memory, self._rss_mb())

    def stop_profiling(self) -> PerformanceMetrics:
        """
        Stop profiling and return metrics.

        Returns:
            PerformanceMetrics object with collected data

        Raises:
            ValueError: If no operation is being profiled
        """
        if not self.current_operation or not self.start_time:
            raise ValueError("No active profiling session")

        end_time = time.time()
        duration = end_time - self.start_time
        end_memory = self._rss_mb()
        self.peak_memory = max(self.peak_memory, end_memory)
        throughput = (self.input_size / 1024 / 1024) / duration if duration > 0 else 0  # MB/s

        metrics = PerformanceMetrics(
            operation_name=self.current_operation,
            start_time=self.start_time,
            end_time=end_time,
            duration=duration,
            input_size=self.input_size,
            output_size=self.output_size,
            memory_peak_mb=self.peak_memory,
            memory_start_mb=self.start_memory,
            memory_end_mb=end_memory,
            throughput_mbps=throughput,
            fallbacks=self.fallbacks,
            success=self.success
        )

        self.metrics_history.append(metrics)

        self.logger.info(f"Performance Summary - {self.current_operation}:")
        self.logger.info(f"  Duration: {duration * 1000:.2f}ms")
        self.logger.info(f"  Input/Output: {self.input_size} -> {self.output_size} bytes")
        self.logger.info(f"  Memory Peak: {self.peak_memory:.1f} MB")
        self.logger.info(f"  Fallbacks: {self.fallbacks}")

        self.current_operation = None
        self.start_time = None
        self.start_memory = None

        return metrics

    def get_performance_summary(self) -> Dict[str, Any]:
        """
        Get summary of all performance metrics.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics_history:
            return {"total_operations": 0}

        count = len(self.metrics_history)
        return {
            "total_operations": count,
            "failed_operations": sum(1 for m in self.metrics_history if not m.success),
            "total_duration": sum(m.duration for m in self.metrics_history),
            "total_input_bytes": sum(m.input_size for m in self.metrics_history),
            "total_output_bytes": sum(m.output_size for m in self.metrics_history),
            "total_fallbacks": sum(m.fallbacks for m in self.metrics_history),
            "average_memory_peak_mb": sum(m.memory_peak_mb for m in self.metrics_history) / count,
        }

    def _rss_mb(self) -> float:
        try:
            return psutil.Process().memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.warning(f"Memory sampling failed: {e}")
            return self.start_memory or 0.0
