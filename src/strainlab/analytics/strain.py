"""Strain / cardiovascular load scoring (HR-zone TRIMP variant).

Every heart rate sample is classified into one of five zones by its share
of max HR, time in zone is accumulated, and zone minutes are weighted
exponentially into a raw load.  The load is compressed onto the 0-21 scale
with a logarithmic curve::

    score = min(21, scale * ln(1 + rate * load))

Sample duration convention: a sample lasts until the next one in time
order, capped at ``MAX_SAMPLE_GAP_MIN``; the last sample counts
``DEFAULT_SAMPLE_MIN``.

Workout samples are counted exactly once.  Day-stream samples falling
inside the window of a workout that carries its own samples are dropped
from the day stream; the workout's samples are integrated instead,
itemised as a :class:`WorkoutContribution` and added to the day's zone
totals.  A workout without samples keeps the day stream and is itemised
from the day-stream samples inside its window.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Sequence

import numpy as np

from strainlab.analytics.capabilities import StrainScoreCalculating
from strainlab.config import ConfigurationError, require_positive
from strainlab.models import HeartRateSample, WorkoutSession, fields_to_plain

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# HR zones (% of max HR)
# ---------------------------------------------------------------------------

ZONE_BOUNDARIES = [0.50, 0.60, 0.70, 0.80, 0.90]
ZONE_WEIGHTS = [0.5, 1.0, 2.0, 4.0, 8.0]  # zone 1-5
ZONE_LABELS = ["Zone 1", "Zone 2", "Zone 3", "Zone 4", "Zone 5"]

STRAIN_MAX = 21.0

MAX_SAMPLE_GAP_MIN = 5.0
DEFAULT_SAMPLE_MIN = 1.0


@dataclass(frozen=True)
class StrainCalibration:
    """Constants of the ``scale * ln(1 + rate * load)`` compression.

    The defaults put a typical active day (load ~500) near 14 and reach
    the 21 ceiling at a load of roughly 1600.
    """

    scale: float = 6.0
    rate: float = 0.02

    def __post_init__(self) -> None:
        require_positive("scale", self.scale)
        require_positive("rate", self.rate)

    def compress(self, load: float) -> float:
        if load <= 0:
            return 0.0
        return min(STRAIN_MAX, self.scale * math.log1p(self.rate * load))


class StrainCategory(str, Enum):
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"
    ALL_OUT = "all_out"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def from_score(cls, score: float) -> StrainCategory:
        if score >= 18:
            return cls.ALL_OUT
        if score >= 14:
            return cls.HIGH
        if score >= 10:
            return cls.MODERATE
        return cls.LIGHT


@dataclass(frozen=True)
class ZoneMinutes:
    zone1: float = 0.0
    zone2: float = 0.0
    zone3: float = 0.0
    zone4: float = 0.0
    zone5: float = 0.0

    @classmethod
    def from_list(cls, minutes: Sequence[float]) -> ZoneMinutes:
        return cls(*(float(m) for m in minutes))

    def as_list(self) -> list[float]:
        return [self.zone1, self.zone2, self.zone3, self.zone4, self.zone5]

    @property
    def total_minutes(self) -> float:
        return sum(self.as_list())

    @property
    def load(self) -> float:
        """Zone-weighted minutes."""
        return sum(m * w for m, w in zip(self.as_list(), ZONE_WEIGHTS))

    def __add__(self, other: ZoneMinutes) -> ZoneMinutes:
        return ZoneMinutes.from_list(
            [a + b for a, b in zip(self.as_list(), other.as_list())]
        )


@dataclass(frozen=True)
class WorkoutContribution:
    """One workout's share of the day's strain."""

    workout_id: str
    activity_type: str
    zone_minutes: ZoneMinutes
    raw_load: float
    strain: float  # the workout's load compressed on its own

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)


@dataclass(frozen=True)
class StrainScore:
    """Strain score and breakdown."""

    date: date
    score: float  # 0-21
    raw_load: float
    activity_minutes: float
    zone_minutes: ZoneMinutes
    workout_contributions: tuple[WorkoutContribution, ...] = ()

    @property
    def category(self) -> StrainCategory:
        return StrainCategory.from_score(self.score)

    @property
    def explanation(self) -> str:
        parts = [f"Today's strain is {self.score:.1f} out of 21."]
        parts.append({
            StrainCategory.LIGHT: "This is a light day, ideal for recovery.",
            StrainCategory.MODERATE: "This is moderate activity, good for building fitness.",
            StrainCategory.HIGH: "This is high strain, ensure you recover properly.",
            StrainCategory.ALL_OUT: "This is maximum effort. Prioritize recovery tomorrow.",
        }[self.category])
        if self.zone_minutes.zone5 > 0:
            parts.append(
                f"You spent {int(self.zone_minutes.zone5)} minutes "
                f"in your peak heart rate zone."
            )
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["category"] = self.category.value
        d["explanation"] = self.explanation
        return d

    def __repr__(self) -> str:
        return (
            f"StrainScore({self.date}: {self.score:.1f}/21, "
            f"{self.category.value}, load={self.raw_load:.0f})"
        )


def _classify_zone(hr_pct: float) -> int:
    """Return 0-based zone index (0 = below zone 1, 1..5 = zone 1..5)."""
    zone = 0
    for i, lower in enumerate(ZONE_BOUNDARIES):
        if hr_pct >= lower:
            zone = i + 1
    return zone


def _sample_durations(timestamps: Sequence[datetime]) -> np.ndarray:
    """Minutes attributed to each sample of a time-sorted stream."""
    n = len(timestamps)
    durations = np.full(n, DEFAULT_SAMPLE_MIN, dtype=np.float64)
    if n > 1:
        gaps = np.array(
            [(b - a).total_seconds() / 60.0 for a, b in zip(timestamps, timestamps[1:])],
            dtype=np.float64,
        )
        durations[:-1] = np.clip(gaps, 0.0, MAX_SAMPLE_GAP_MIN)
    return durations


def _zone_minutes(
    samples: Sequence[HeartRateSample],
    durations: np.ndarray,
    max_hr: float,
) -> ZoneMinutes:
    minutes = [0.0] * len(ZONE_LABELS)
    for sample, duration in zip(samples, durations):
        if not math.isfinite(sample.bpm):
            continue
        zone_idx = _classify_zone(sample.bpm / max_hr)
        if zone_idx >= 1:
            minutes[zone_idx - 1] += float(duration)
        # Below zone 1 contributes 0 strain
    return ZoneMinutes.from_list(minutes)


def zone_minutes_for(samples: Sequence[HeartRateSample], max_hr: float) -> ZoneMinutes:
    """Integrate time in each zone for a stream of samples."""
    ordered = sorted(samples, key=lambda s: s.timestamp)
    return _zone_minutes(ordered, _sample_durations([s.timestamp for s in ordered]), max_hr)


class StrainCalculator(StrainScoreCalculating):
    """Daily strain from heart rate samples and completed workouts."""

    def __init__(self, calibration: StrainCalibration | None = None) -> None:
        self.calibration = calibration or StrainCalibration()

    def calculate(
        self,
        heart_rate_samples: Sequence[HeartRateSample],
        max_heart_rate: float,
        workouts: Sequence[WorkoutSession] = (),
        day: date | None = None,
    ) -> StrainScore:
        """Compute the day's strain score.

        Args:
            heart_rate_samples: The day's all-day sample stream.
            max_heart_rate: User's max HR (bpm); must be positive.
            workouts: Completed workouts with their own samples.
            day: Date stamped on the result (default: today).

        Raises:
            ConfigurationError: If *max_heart_rate* is not positive.
        """
        max_hr = require_positive("max_heart_rate", max_heart_rate)

        ordered = sorted(heart_rate_samples, key=lambda s: s.timestamp)
        durations = _sample_durations([s.timestamp for s in ordered])
        sampled = [w for w in workouts if w.heart_rate_samples]
        keep = [
            i for i, s in enumerate(ordered)
            if not any(w.contains(s.timestamp) for w in sampled)
        ]
        if len(keep) < len(ordered):
            logger.debug(
                "%d day-stream samples fall inside workouts; counted via workouts",
                len(ordered) - len(keep),
            )
        totals = _zone_minutes([ordered[i] for i in keep], durations[keep], max_hr)

        contributions = []
        for workout in workouts:
            if workout.heart_rate_samples:
                zones = zone_minutes_for(workout.heart_rate_samples, max_hr)
                totals = totals + zones
            else:
                # No samples of its own: its time is already in the day stream
                inside = [i for i in keep if workout.contains(ordered[i].timestamp)]
                zones = _zone_minutes([ordered[i] for i in inside], durations[inside], max_hr)
            contributions.append(WorkoutContribution(
                workout_id=workout.id,
                activity_type=workout.activity_type,
                zone_minutes=zones,
                raw_load=zones.load,
                strain=self.calibration.compress(zones.load),
            ))

        load = totals.load
        score = max(0.0, self.calibration.compress(load))
        logger.debug("Strain load %.1f -> score %.2f", load, score)

        return StrainScore(
            date=day or date.today(),
            score=score,
            raw_load=load,
            activity_minutes=totals.total_minutes,
            zone_minutes=totals,
            workout_contributions=tuple(contributions),
        )


def estimate_max_heart_rate(age: int) -> float:
    """Age-predicted max HR (220 - age)."""
    if age <= 0 or age >= 220:
        raise ConfigurationError(f"age out of range: {age}")
    return float(220 - age)


def zone_description(zone: int) -> str:
    return {
        1: "Zone 1 (50-60%): Light activity, warm up",
        2: "Zone 2 (60-70%): Fat burning, easy aerobic",
        3: "Zone 3 (70-80%): Aerobic endurance",
        4: "Zone 4 (80-90%): Anaerobic threshold",
        5: "Zone 5 (90-100%): Maximum effort",
    }.get(zone, "Unknown zone")
