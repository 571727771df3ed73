"""Rule-table evaluation for additive heuristic scores.

A score is an ordered list of named rules. Each rule contributes
min(weight * magnitude, cap) when its predicate holds, which keeps every
threshold and weight visible in one table and lets a breakdown be reported
alongside the total.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ScoringRule:
    """One named contribution to an additive score."""

    name: str
    predicate: Callable[[Any], bool]
    weight: float
    cap: Optional[float] = None
    magnitude: Optional[Callable[[Any], float]] = None

    def contribution(self, facts: Any) -> float:
        if not self.predicate(facts):
            return 0.0
        points = self.weight * (self.magnitude(facts) if self.magnitude else 1.0)
        if self.cap is not None:
            points = min(points, self.cap)
        return points


def evaluate_rules(
    rules: Iterable[ScoringRule], facts: Any
) -> Tuple[float, Dict[str, float]]:
    """Sum rule contributions in order, returning the total and per-rule points."""
    breakdown: Dict[str, float] = {}
    total = 0.0
    for rule in rules:
        points = rule.contribution(facts)
        breakdown[rule.name] = points
        total += points
    return total, breakdown


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet: .5 always goes away from zero for positives."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def step_score(value: float, steps: Sequence[Tuple[float, float]], default: float) -> float:
    """Score for the first (upper_bound, score) step with value below its bound."""
    for upper_bound, score in steps:
        if value < upper_bound:
            return score
    return default
