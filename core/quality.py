"""
Confidence scoring for research findings.

Assigns a confidence in [0, 1] to each finding from how much of the
sub-question the tool calls covered, how many of those calls succeeded and
whether the records found actually mention what was asked.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

__all__ = ["ConfidenceScorer", "ResearchSignals", "SCORING_PRESETS", "weighted_mean"]

# ══════════════════════════════════════════════════════════════════════════════
# Scoring Presets
# ══════════════════════════════════════════════════════════════════════════════

SCORING_PRESETS: dict[str, dict[str, Any]] = {
    "balanced": {
        "weights": {
            "coverage": 0.40,
            "reliability": 0.30,
            "relevance": 0.30,
        },
        "relevance_floor": 0.6,
    },
    "strict": {
        "weights": {
            "coverage": 0.45,
            "reliability": 0.35,
            "relevance": 0.20,
        },
        "relevance_floor": 0.3,
    },
    "lenient": {
        "weights": {
            "coverage": 0.30,
            "reliability": 0.20,
            "relevance": 0.50,
        },
        "relevance_floor": 0.8,
    },
}

# ══════════════════════════════════════════════════════════════════════════════
# Confidence Scorer
# ══════════════════════════════════════════════════════════════════════════════


@dataclass
class ResearchSignals:
    """What the researcher observed while answering one sub-question."""

    targets_attempted: int = 0  # target sources that had a tool to call
    targets_with_data: int = 0
    calls: int = 0
    failed_calls: int = 0
    relevant: bool = False  # a record matched the question, or an exact lookup
    source_count: int = 0


class ConfidenceScorer:
    """
    Score findings based on coverage, reliability and relevance.

    Example:
        >>> scorer = ConfidenceScorer("balanced")
        >>> scorer.score(ResearchSignals(1, 1, 1, 0, True, 3))
        1.0
    """

    def __init__(self, preset: str = "balanced"):
        config = SCORING_PRESETS.get(preset, SCORING_PRESETS["balanced"])
        self.weights = config["weights"]
        self.relevance_floor = config["relevance_floor"]

    def score(self, signals: ResearchSignals) -> float:
        """Confidence (0-1) for one finding. 0 when nothing was found."""
        if signals.source_count == 0 or signals.targets_with_data == 0:
            return 0.0

        coverage = signals.targets_with_data / max(signals.targets_attempted, 1)
        reliability = (
            (signals.calls - signals.failed_calls) / signals.calls
            if signals.calls
            else 1.0
        )
        relevance = 1.0 if signals.relevant else self.relevance_floor

        total = (
            min(coverage, 1.0) * self.weights["coverage"]
            + max(reliability, 0.0) * self.weights["reliability"]
            + relevance * self.weights["relevance"]
        )
        return round(min(1.0, max(0.0, total)), 2)


def weighted_mean(
    values: Iterable[float], weights: Optional[Iterable[float]] = None
) -> float:
    """Weighted mean; 0.0 for no values or zero total weight."""
    values = list(values)
    weights = list(weights) if weights is not None else [1.0] * len(values)
    total_weight = sum(weights)
    if not values or total_weight <= 0:
        return 0.0
    return sum(v * w for v, w in zip(values, weights)) / total_weight
