"""
Performance monitoring and metrics.

Track tool call performance, cache efficiency and research runs.
"""

import time
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "ToolMetrics",
    "PerformanceMonitor",
    "get_tool_metrics",
    "get_performance_monitor",
    "format_metrics_report",
    "reset_metrics",
]

# ══════════════════════════════════════════════════════════════════════════════
# Metrics Classes
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class ToolMetrics:
    """Track tool call statistics, overall and per tool."""

    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    total_latency_ms: float = 0.0
    error_types: dict[str, int] = field(default_factory=dict)
    calls_by_tool: dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        if self.total_calls == 0:
            return 0.0
        return (self.successful_calls / self.total_calls) * 100

    @property
    def avg_latency_ms(self) -> float:
        if self.successful_calls == 0:
            return 0.0
        return self.total_latency_ms / self.successful_calls

    def record_success(self, tool: str, latency_ms: float):
        self.total_calls += 1
        self.successful_calls += 1
        self.total_latency_ms += latency_ms
        self.calls_by_tool[tool] = self.calls_by_tool.get(tool, 0) + 1

    def record_failure(self, tool: str, error_type: str):
        self.total_calls += 1
        self.failed_calls += 1
        self.error_types[error_type] = self.error_types.get(error_type, 0) + 1
        self.calls_by_tool[tool] = self.calls_by_tool.get(tool, 0) + 1


@dataclass
class PerformanceMonitor:
    """Track system-wide performance."""

    start_time: float = field(default_factory=time.time)
    research_times: list[float] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0
    total_findings: int = 0

    def record_research(self, duration_seconds: float, finding_count: int = 0):
        self.research_times.append(duration_seconds)
        self.total_findings += finding_count

    def record_cache_hit(self):
        self.cache_hits += 1

    def record_cache_miss(self):
        self.cache_misses += 1

    @property
    def avg_research_time_ms(self) -> float:
        if not self.research_times:
            return 0.0
        return (sum(self.research_times) / len(self.research_times)) * 1000

    @property
    def cache_hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return (self.cache_hits / total) * 100

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self.start_time

    def summary(self) -> dict[str, Any]:
        return {
            "uptime_seconds": round(self.uptime_seconds, 1),
            "total_research_runs": len(self.research_times),
            "avg_research_time_ms": round(self.avg_research_time_ms, 0),
            "cache_hit_rate": round(self.cache_hit_rate, 1),
            "total_findings": self.total_findings,
        }


# ══════════════════════════════════════════════════════════════════════════════
# Global Instances
# ══════════════════════════════════════════════════════════════════════════════

_tool_metrics = ToolMetrics()
_perf_monitor = PerformanceMonitor()


def get_tool_metrics() -> ToolMetrics:
    return _tool_metrics


def get_performance_monitor() -> PerformanceMonitor:
    return _perf_monitor


def reset_metrics() -> None:
    """Start counting from zero."""
    global _tool_metrics, _perf_monitor
    _tool_metrics = ToolMetrics()
    _perf_monitor = PerformanceMonitor()


def format_metrics_report() -> str:
    """Generate human-readable metrics report."""
    tools = _tool_metrics
    perf = _perf_monitor.summary()

    lines = [
        "# Performance Metrics",
        "",
        "## Tool Calls",
        f"- Total calls: {tools.total_calls}",
        f"- Success rate: {tools.success_rate:.1f}%",
        f"- Average latency: {tools.avg_latency_ms:.0f} ms",
    ]
    if tools.calls_by_tool:
        lines.append("- By tool: " + ", ".join(
            f"{name}={count}" for name, count in sorted(tools.calls_by_tool.items())
        ))
    if tools.error_types:
        lines.append("- Errors: " + ", ".join(
            f"{name}={count}" for name, count in sorted(tools.error_types.items())
        ))

    lines += [
        "",
        "## Research",
        f"- Uptime: {perf['uptime_seconds']}s",
        f"- Research runs: {perf['total_research_runs']}",
        f"- Average research time: {perf['avg_research_time_ms']:.0f} ms",
        f"- Findings produced: {perf['total_findings']}",
        f"- Answer cache hit rate: {perf['cache_hit_rate']}%",
    ]
    return "\n".join(lines)
