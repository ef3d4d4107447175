"""
Core of the Government Records MCP.

    Errors            Error taxonomy shared by adapters and tools
    Planner           Query decomposition into sub-questions
    Synthesizer       Cited answers, contradictions, gaps, confidence
    Quality Scoring   Confidence (0-1) for findings
    Deduplication     Drop repeated records, keep first-seen order
    Retry Logic       Exponential backoff for tool calls
    Metrics           Tool and research performance reporting

The tool surface (core.tools), researcher (core.researcher), pipeline
(core.pipeline) and assistant (core.assistant) depend on the adapters
package and are imported from their modules directly.
"""

from core.dedup import deduplicate_by_key, deduplicate_sources
from core.errors import (
    AdapterConnectionError,
    ConfigurationError,
    FetchError,
    GovernmentRecordsError,
    UpstreamModelError,
)
from core.metrics import (
    PerformanceMonitor,
    ToolMetrics,
    format_metrics_report,
    get_performance_monitor,
    get_tool_metrics,
)
from core.planner import create_research_plan, refine_plan
from core.quality import SCORING_PRESETS, ConfidenceScorer
from core.reliability import RetryStrategy, resilient_api_call
from core.synthesizer import detect_contradictions, format_with_citations, synthesize

__all__ = [
    # Errors
    "GovernmentRecordsError",
    "ConfigurationError",
    "AdapterConnectionError",
    "FetchError",
    "UpstreamModelError",
    # Planning and synthesis
    "create_research_plan",
    "refine_plan",
    "synthesize",
    "detect_contradictions",
    "format_with_citations",
    # Quality
    "ConfidenceScorer",
    "SCORING_PRESETS",
    # Deduplication
    "deduplicate_by_key",
    "deduplicate_sources",
    # Reliability
    "RetryStrategy",
    "resilient_api_call",
    # Metrics
    "ToolMetrics",
    "PerformanceMonitor",
    "get_tool_metrics",
    "get_performance_monitor",
    "format_metrics_report",
]
