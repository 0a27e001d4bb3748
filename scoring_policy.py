"""Centralized scoring policy for the hiring pipeline.

The policy is declarative so the agents, synthesizers, sheet writer and
notifications all read weights and thresholds from one place.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

import app_config
from hiring_models import FounderWeights, RoleContext

SCORE_PRECISION = 6
"""Decimal places kept on every 0-100 score after clamping."""

TECHNICAL_WEIGHTS: Dict[str, float] = {
    "S": 0.35,
    "D": 0.30,
    "W": 0.25,
    "R": -0.10,
}
"""Execution-fit weights. The positive terms sum to 0.90; kept literally."""

FOUNDER_CONFIDENCE_WEIGHTS: Dict[RoleContext, FounderWeights] = {
    RoleContext.EARLY_STARTUP_EXECUTION: FounderWeights(wO=0.35, wL=0.15, wP=0.30, wG=0.20),
    RoleContext.HIGH_OWNERSHIP_CRITICAL: FounderWeights(wO=0.40, wL=0.20, wP=0.25, wG=0.15),
    RoleContext.STABLE_LONG_TERM: FounderWeights(wO=0.20, wL=0.40, wP=0.15, wG=0.25),
    RoleContext.HIGH_PRESSURE_DELIVERY: FounderWeights(wO=0.20, wL=0.15, wP=0.45, wG=0.20),
    RoleContext.EXPLORATORY_RND: FounderWeights(wO=0.25, wL=0.15, wP=0.20, wG=0.40),
}

RELEVANCE_WEIGHTS: Dict[RoleContext, Tuple[float, float]] = {
    RoleContext.EARLY_STARTUP_EXECUTION: (0.55, 0.45),
    RoleContext.HIGH_OWNERSHIP_CRITICAL: (0.45, 0.55),
    RoleContext.STABLE_LONG_TERM: (0.60, 0.40),
    RoleContext.HIGH_PRESSURE_DELIVERY: (0.50, 0.50),
    RoleContext.EXPLORATORY_RND: (0.40, 0.60),
}
"""(alpha, beta) applied to execution fit and founder confidence."""

RELEVANCE_THRESHOLD = app_config.RELEVANCE_THRESHOLD
"""Minimum relevance (0-100) to move a candidate on to the assignment stage."""

RECOMMENDATION_BANDS: List[Tuple[float, str]] = [
    (80.0, "Strong Yes"),
    (65.0, "Yes"),
    (50.0, "Maybe"),
]
FALLBACK_RECOMMENDATION = "Not Now"

CRITICALITY_MIN = 0.6
CRITICALITY_MAX = 1.0
TIMEBOX_MIN_HOURS = 2
TIMEBOX_MAX_HOURS = 6
TIMEBOX_DEFAULT_HOURS = 4

MAX_FOCUS_AREAS = 5
MAX_RISK_NOTES = 5


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Best-effort numeric coercion for model output; NaN and junk become ``default``."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def clamp_unit(value: Any) -> float:
    return clamp(coerce_number(value), 0.0, 1.0)


def round_score(value: float) -> float:
    return round(clamp(value, 0.0, 100.0), SCORE_PRECISION)


def execution_fit_score(s: float, d: float, w: float, r: float) -> float:
    raw = 100 * (
        TECHNICAL_WEIGHTS["S"] * s
        + TECHNICAL_WEIGHTS["D"] * d
        + TECHNICAL_WEIGHTS["W"] * w
        + TECHNICAL_WEIGHTS["R"] * r
    )
    return round_score(raw)


def founder_confidence_score(weights: FounderWeights, o: float, l: float, p: float, g: float) -> float:
    raw = 100 * (weights.wO * o + weights.wL * l + weights.wP * p + weights.wG * g)
    return round_score(raw)


def recommendation_for(relevance_score: float) -> str:
    for floor, label in RECOMMENDATION_BANDS:
        if relevance_score >= floor:
            return label
    return FALLBACK_RECOMMENDATION
