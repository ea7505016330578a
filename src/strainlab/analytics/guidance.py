"""Recommended strain range for today.

The range follows from this morning's recovery category and is shifted by
the user's preferred training intensity.  The last week of strain scores
decides the weekly load status shown alongside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from strainlab.analytics import stats
from strainlab.analytics.recovery import RecoveryCategory, RecoveryScore
from strainlab.analytics.strain import STRAIN_MAX, StrainScore
from strainlab.models import fields_to_plain


class TrainingIntensity(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    INTENSE = "intense"
    VERY_INTENSE = "very_intense"


class WeeklyLoadStatus(str, Enum):
    UNDER_LOADED = "Under-loaded"
    OPTIMAL = "Optimal"
    BUILDING = "Building"
    PEAKING = "Peaking"
    OVER_REACHING = "Over-reaching"
    DELOADING = "Deloading"
    UNKNOWN = "Analyzing"


BASE_RANGES = {
    RecoveryCategory.OPTIMAL: (14.0, 18.0),
    RecoveryCategory.MODERATE: (10.0, 14.0),
    RecoveryCategory.POOR: (4.0, 8.0),
}
DEFAULT_RANGE = (8.0, 12.0)

INTENSITY_SHIFT = {
    TrainingIntensity.LIGHT: -2.0,
    TrainingIntensity.MODERATE: 0.0,
    TrainingIntensity.INTENSE: 2.0,
    TrainingIntensity.VERY_INTENSE: 3.0,
}

DAILY_TARGET = {
    TrainingIntensity.LIGHT: 8.0,
    TrainingIntensity.MODERATE: 11.0,
    TrainingIntensity.INTENSE: 14.0,
    TrainingIntensity.VERY_INTENSE: 16.0,
}

_RECOVERY_CONTEXT = {
    RecoveryCategory.OPTIMAL: "Your recovery is strong",
    RecoveryCategory.MODERATE: "You're moderately recovered",
    RecoveryCategory.POOR: "Your body needs more rest",
}

_LOAD_CONTEXT = {
    WeeklyLoadStatus.UNDER_LOADED: "you could increase training volume",
    WeeklyLoadStatus.OPTIMAL: "your training load is well balanced",
    WeeklyLoadStatus.BUILDING: "you're progressively building fitness",
    WeeklyLoadStatus.PEAKING: "you're training at high volume",
    WeeklyLoadStatus.OVER_REACHING: "consider reducing intensity",
    WeeklyLoadStatus.DELOADING: "you're in a recovery phase",
    WeeklyLoadStatus.UNKNOWN: "keep training consistently",
}


@dataclass(frozen=True)
class StrainGuidance:
    low: float
    high: float
    weekly_load_status: WeeklyLoadStatus
    rationale: str

    @property
    def target_midpoint(self) -> float:
        return (self.low + self.high) / 2.0

    @property
    def formatted_range(self) -> str:
        return f"{int(self.low)}-{int(self.high)}"

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)


def _weekly_load(
    strains: Sequence[StrainScore],
    recovery: RecoveryScore,
    intensity: TrainingIntensity,
) -> WeeklyLoadStatus:
    if len(strains) < 3:
        return WeeklyLoadStatus.UNKNOWN

    last_week = [s.score for s in strains[-7:]]
    ratio = stats.mean(last_week) / DAILY_TARGET[intensity]
    trend = stats.linear_trend(last_week)

    if ratio < 0.7:
        return WeeklyLoadStatus.UNDER_LOADED
    if ratio > 1.3 and recovery.score < 50:
        return WeeklyLoadStatus.OVER_REACHING
    if ratio > 1.2:
        return WeeklyLoadStatus.PEAKING
    if trend > 0.5 and ratio > 0.9:
        return WeeklyLoadStatus.BUILDING
    if trend < -0.5 and ratio < 1.0:
        return WeeklyLoadStatus.DELOADING
    return WeeklyLoadStatus.OPTIMAL


def calculate_guidance(
    recovery: RecoveryScore | None,
    recent_strains: Sequence[StrainScore],
    intensity: TrainingIntensity = TrainingIntensity.MODERATE,
) -> StrainGuidance:
    """Recommend today's strain range.

    Args:
        recovery: This morning's recovery score, if any.
        recent_strains: Previous days' strain scores, oldest first.
        intensity: The user's preferred training intensity.
    """
    if recovery is None or recovery.category == RecoveryCategory.UNDETERMINED:
        low, high = DEFAULT_RANGE
        return StrainGuidance(low, high, WeeklyLoadStatus.UNKNOWN, "Waiting for recovery data")

    base_low, base_high = BASE_RANGES[recovery.category]
    shift = INTENSITY_SHIFT[intensity]
    low = max(0.0, base_low + shift)
    high = min(STRAIN_MAX, base_high + shift)

    status = _weekly_load(recent_strains, recovery, intensity)
    rationale = f"{_RECOVERY_CONTEXT[recovery.category]}, {_LOAD_CONTEXT[status]}"
    return StrainGuidance(low, high, status, rationale)
