"""Sleep consistency: how regular bed times, wake times and durations are.

Two sub-scores on 0-100 are blended 55/45:

- timing:   population SD of bed and wake clock times; 30 min or less
            scores 100, 120 min or more scores 0
- duration: coefficient of variation of nightly duration; 5 % or less
            scores 100, 30 % or more scores 0

Clock times before 06:00 are counted past midnight (01:30 -> 25:30) so a
bedtime that drifts across midnight does not look like a 23 hour swing.
At least ``MIN_NIGHTS`` nights are needed for a score.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Sequence

import numpy as np

from strainlab.analytics.sleep import SleepScore
from strainlab.models import fields_to_plain

logger = logging.getLogger(__name__)

MIN_NIGHTS = 3

W_TIMING = 0.55
W_DURATION = 0.45

TIMING_BEST_SD_MIN = 30.0
TIMING_WORST_SD_MIN = 120.0
DURATION_BEST_CV_PCT = 5.0
DURATION_WORST_CV_PCT = 30.0

NEXT_DAY_BEFORE_HOUR = 6


class ConsistencyRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    INSUFFICIENT = "Insufficient Data"

    @classmethod
    def from_score(cls, score: float) -> ConsistencyRating:
        if score >= 80:
            return cls.EXCELLENT
        if score >= 60:
            return cls.GOOD
        if score >= 40:
            return cls.FAIR
        if score >= 20:
            return cls.POOR
        return cls.INSUFFICIENT


@dataclass(frozen=True)
class SleepConsistency:
    score: float  # 0-100
    timing_variability: float  # 100 - timing score, lower is better
    duration_variability: float  # 100 - duration score, lower is better
    rating: ConsistencyRating
    insight: str
    nights: int

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)

    def __repr__(self) -> str:
        return (
            f"SleepConsistency({self.score:.0f}, {self.rating.value}, "
            f"nights={self.nights})"
        )


def minutes_from_midnight(moment: datetime) -> float:
    """Clock time in minutes; early-morning times roll past 24:00."""
    minutes = float(moment.hour * 60 + moment.minute)
    if moment.hour < NEXT_DAY_BEFORE_HOUR:
        minutes += 24 * 60
    return minutes


def _linear_score(value: float, best: float, worst: float) -> float:
    return max(0.0, min(100.0, 100.0 - (value - best) * (100.0 / (worst - best))))


def _timing_score(nights: Sequence[SleepScore]) -> float:
    bedtimes = [minutes_from_midnight(n.sleep_start) for n in nights if n.sleep_start]
    waketimes = [minutes_from_midnight(n.sleep_end) for n in nights if n.sleep_end]
    if not bedtimes or not waketimes:
        return 0.0

    bed = _linear_score(float(np.std(bedtimes)), TIMING_BEST_SD_MIN, TIMING_WORST_SD_MIN)
    wake = _linear_score(float(np.std(waketimes)), TIMING_BEST_SD_MIN, TIMING_WORST_SD_MIN)
    return (bed + wake) / 2.0


def _duration_score(nights: Sequence[SleepScore]) -> float:
    durations = np.array([n.total_duration_minutes for n in nights], dtype=np.float64)
    mean = float(np.mean(durations))
    if mean <= 0:
        return 0.0
    cv_pct = float(np.std(durations)) / mean * 100.0
    return _linear_score(cv_pct, DURATION_BEST_CV_PCT, DURATION_WORST_CV_PCT)


def _insight(timing: float, duration: float, rating: ConsistencyRating) -> str:
    if rating == ConsistencyRating.EXCELLENT:
        return "Your sleep schedule is very consistent"
    if rating == ConsistencyRating.GOOD:
        if timing < duration:
            return "Try to keep more regular bed and wake times"
        return "Your timing is good, work on consistent duration"
    if rating == ConsistencyRating.FAIR:
        return "More consistent sleep would improve recovery"
    if rating == ConsistencyRating.POOR:
        return "Irregular sleep is affecting your recovery"
    return "Keep tracking to build your sleep profile"


def calculate_consistency(nights: Sequence[SleepScore]) -> SleepConsistency:
    """Score the regularity of recent nights.

    Args:
        nights: Sleep scores, any order; nights without start/end times
            only count towards duration.

    Returns:
        A SleepConsistency; fewer than ``MIN_NIGHTS`` nights gives a zero
        score rated ``INSUFFICIENT``.
    """
    if len(nights) < MIN_NIGHTS:
        return SleepConsistency(
            score=0.0,
            timing_variability=0.0,
            duration_variability=0.0,
            rating=ConsistencyRating.INSUFFICIENT,
            insight=f"Need at least {MIN_NIGHTS} nights of data",
            nights=len(nights),
        )

    timing = _timing_score(nights)
    duration = _duration_score(nights)
    score = W_TIMING * timing + W_DURATION * duration
    rating = ConsistencyRating.from_score(score)
    logger.debug("Consistency timing=%.1f duration=%.1f -> %.1f", timing, duration, score)

    return SleepConsistency(
        score=score,
        timing_variability=100.0 - timing,
        duration_variability=100.0 - duration,
        rating=rating,
        insight=_insight(timing, duration, rating),
        nights=len(nights),
    )
