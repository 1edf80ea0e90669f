# mindbalance/engine/scoring_rules.py
"""
Proper scoring rules for a binary forecast.

The service never receives a ground-truth label, so on the non-abstain path
the realized decision is treated as the outcome. The numbers are
self-referential diagnostics (how sharp the forecast was about its own
verdict), not calibration measurements.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, Optional

LOG_FLOOR = 1e-15

# canonical emission order
RULE_NAMES = ("brier", "log", "quadratic", "spherical")


def brier(p_positive: float, outcome_positive: bool) -> float:
    y = 1.0 if outcome_positive else 0.0
    return (p_positive - y) ** 2


def log_score(p_positive: float, outcome_positive: bool) -> float:
    p_y = p_positive if outcome_positive else 1.0 - p_positive
    return -math.log(max(p_y, LOG_FLOOR))


def quadratic(p_positive: float, outcome_positive: bool) -> float:
    p_negative = 1.0 - p_positive
    p_y = p_positive if outcome_positive else p_negative
    return 2.0 * p_y - (p_positive ** 2 + p_negative ** 2)


def spherical(p_positive: float, outcome_positive: bool) -> float:
    p_negative = 1.0 - p_positive
    p_y = p_positive if outcome_positive else p_negative
    return p_y / math.sqrt(p_positive ** 2 + p_negative ** 2)


SCORING_RULES: Dict[str, Callable[[float, bool], float]] = {
    "brier": brier,
    "log": log_score,
    "quadratic": quadratic,
    "spherical": spherical,
}


def ordered_rules(rules: Iterable[str]) -> list[str]:
    wanted = set(rules)
    return [name for name in RULE_NAMES if name in wanted]


def evaluate(
    rules: Iterable[str],
    p_positive: float,
    decision: str,
    abstention_score: Optional[float],
) -> Dict[str, float]:
    """
    Score each requested rule against the realized decision.

    When abstaining every rule records the fixed abstention score instead.
    """
    names = ordered_rules(rules)
    if decision == "abstain":
        fixed = 0.0 if abstention_score is None else float(abstention_score)
        return {name: fixed for name in names}

    outcome_positive = decision == "positive"
    return {name: SCORING_RULES[name](p_positive, outcome_positive) for name in names}
