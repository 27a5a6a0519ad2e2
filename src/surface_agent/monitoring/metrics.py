"""
Metrics Collection
Prometheus metrics for agent turns, model phases, surface validation and tools.
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, REGISTRY, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the agent.

    Pass a private ``CollectorRegistry`` to keep instances isolated (tests
    create one per collector); the module-level collector uses the default.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else REGISTRY

        # Agent turns
        self.agent_turns_total = Counter(
            "surface_agent_turns_total",
            "Total number of agent turns",
            ["entry", "outcome"],
            registry=self.registry,
        )
        self.agent_turn_duration = Histogram(
            "surface_agent_turn_duration_seconds",
            "Agent turn duration in seconds",
            ["entry"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry,
        )
        self.agent_retries_total = Counter(
            "surface_agent_retries_total",
            "Total number of tool retries decided by the agent",
            registry=self.registry,
        )

        # LLM phases
        self.llm_calls_total = Counter(
            "surface_llm_calls_total",
            "Total number of LLM calls per phase",
            ["phase", "status"],
            registry=self.registry,
        )
        self.llm_duration = Histogram(
            "surface_llm_duration_seconds",
            "LLM call duration in seconds",
            ["phase"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=self.registry,
        )

        # Surface validation
        self.surface_validations_total = Counter(
            "surface_validations_total",
            "Total number of surface validations",
            ["result", "code"],
            registry=self.registry,
        )

        # Tools
        self.tool_executions_total = Counter(
            "surface_tool_executions_total",
            "Total number of routed tool executions",
            ["tool", "status"],
            registry=self.registry,
        )
        self.tool_duration = Histogram(
            "surface_tool_duration_seconds",
            "Tool execution duration in seconds",
            ["tool"],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry,
        )

        # System
        self.uptime = Gauge(
            "surface_uptime_seconds",
            "Service uptime in seconds",
            registry=self.registry,
        )
        self.start_time = time.time()

    def record_turn(self, entry: str, outcome: str, duration: float) -> None:
        """Record one agent turn (entry: query or action)."""
        self.agent_turns_total.labels(entry=entry, outcome=outcome).inc()
        self.agent_turn_duration.labels(entry=entry).observe(duration)

    def record_retry(self) -> None:
        self.agent_retries_total.inc()

    def record_llm_call(self, phase: str, status: str, duration: float) -> None:
        """Record an LLM call for one agent phase."""
        self.llm_calls_total.labels(phase=phase, status=status).inc()
        self.llm_duration.labels(phase=phase).observe(duration)

    def record_validation(self, code: Optional[str] = None) -> None:
        """Record a surface validation; ``code`` is the failure code, if any."""
        if code is None:
            self.surface_validations_total.labels(result="valid", code="").inc()
        else:
            self.surface_validations_total.labels(result="invalid", code=code).inc()

    def record_tool(self, tool: str, status: str, duration: float) -> None:
        """Record a routed tool execution (duration in seconds)."""
        self.tool_executions_total.labels(tool=tool, status=status).inc()
        self.tool_duration.labels(tool=tool).observe(duration)

    def update_uptime(self) -> None:
        self.uptime.set(time.time() - self.start_time)

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.time()
        try:
            yield
        finally:
            callback(time.time() - start)

    def get_metrics(self) -> bytes:
        """Render metrics in Prometheus exposition format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
