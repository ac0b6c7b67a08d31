"""Observability Module - Logging, Tracing, and Metrics

This module provides:
1. Structured logging with a shared format
2. Per-turn tracing of the conversation flow
3. Flow metrics (turns, retries, completions, latency per step)
"""
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime

from config.settings import LOG_LEVEL

# Configure structured logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s | %(name)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger("imcbot")


@dataclass
class TurnTrace:
    """Represents a single traced turn (or any named unit of work)."""
    name: str
    start_time: datetime = field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    duration_ms: Optional[float] = None
    input_summary: str = ""
    success: bool = True
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def complete(self, success: bool = True, error: str = None):
        """Mark trace as complete."""
        self.end_time = datetime.now()
        self.duration_ms = (self.end_time - self.start_time).total_seconds() * 1000
        self.success = success
        self.error = error


@dataclass
class FlowMetrics:
    """Aggregated metrics for the conversation flow."""
    total_turns: int = 0
    failed_turns: int = 0
    completed_flows: int = 0
    validation_retries: Dict[str, int] = field(default_factory=dict)
    total_latency_ms: float = 0
    step_latencies: Dict[str, list] = field(default_factory=dict)

    @property
    def avg_latency_ms(self) -> float:
        if self.total_turns == 0:
            return 0.0
        return self.total_latency_ms / self.total_turns

    def record(self, trace: TurnTrace):
        """Record a finished trace."""
        self.total_turns += 1
        if not trace.success:
            self.failed_turns += 1

        if trace.duration_ms is not None:
            self.total_latency_ms += trace.duration_ms
            step = trace.metadata.get("step", trace.name)
            self.step_latencies.setdefault(step, []).append(trace.duration_ms)

    def record_retry(self, step: str):
        self.validation_retries[step] = self.validation_retries.get(step, 0) + 1

    def record_completion(self):
        self.completed_flows += 1

    def reset(self):
        self.total_turns = 0
        self.failed_turns = 0
        self.completed_flows = 0
        self.validation_retries.clear()
        self.total_latency_ms = 0
        self.step_latencies.clear()

    def summary(self) -> Dict[str, Any]:
        """Return metrics summary."""
        step_avg = {}
        for step, latencies in self.step_latencies.items():
            if latencies:
                step_avg[step] = sum(latencies) / len(latencies)

        return {
            "total_turns": self.total_turns,
            "failed_turns": self.failed_turns,
            "completed_flows": self.completed_flows,
            "validation_retries": dict(self.validation_retries),
            "avg_latency_ms": f"{self.avg_latency_ms:.0f}ms",
            "step_avg_latency": step_avg,
        }


# Global metrics instance
metrics = FlowMetrics()


class Tracer:
    """Context manager for tracing one turn."""

    def __init__(self, name: str, input_data: Any = None, **metadata):
        self.trace = TurnTrace(name=name, metadata=dict(metadata))
        if input_data:
            self.trace.input_summary = str(input_data)[:200]

    def __enter__(self):
        logger.debug(f"▶ {self.trace.name} started")
        return self.trace

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.trace.complete(success=False, error=str(exc_val))
            logger.error(f"✖ {self.trace.name} failed: {exc_val}")
        else:
            self.trace.complete(success=True)
            logger.info(f"✔ {self.trace.name} completed in {self.trace.duration_ms:.0f}ms")

        metrics.record(self.trace)
        return False  # Don't suppress exceptions


def get_metrics_summary() -> Dict[str, Any]:
    """Get current metrics summary."""
    return metrics.summary()
