"""Abstract interfaces for the baseline engine and the score calculators.

The orchestrator only depends on these, so an alternate implementation
(for example a test double returning fixed scores) can be swapped in
without touching call sites.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from strainlab.analytics.recovery import RecoveryScore
    from strainlab.analytics.sleep import SleepScore
    from strainlab.analytics.strain import StrainScore
    from strainlab.models import HeartRateSample, SleepSession, UserBaseline, WorkoutSession


class BaselineCalculating(ABC):
    """Rolling personal baselines from historical daily values."""

    @abstractmethod
    def calculate_rolling_average(self, values: Sequence[float], days: int) -> float:
        """Mean of the most recent *days* values."""

    @abstractmethod
    def detect_outliers(self, values: Sequence[float], threshold: float = 1.5) -> list[float]:
        """Values with Tukey-fence outliers removed."""

    @abstractmethod
    def smooth_values(self, values: Sequence[float], window_size: int = 3) -> list[float]:
        """Centered moving average of *values*."""

    @abstractmethod
    def build_user_baseline(
        self,
        hrv_history: Sequence[float],
        rhr_history: Sequence[float],
        on: date,
        sleep_need_minutes: float = 450.0,
        max_heart_rate: float = 190.0,
    ) -> "UserBaseline":
        """Snapshot of the HRV and RHR baselines as of *on*."""


class StrainScoreCalculating(ABC):

    @abstractmethod
    def calculate(
        self,
        heart_rate_samples: Sequence["HeartRateSample"],
        max_heart_rate: float,
        workouts: Sequence["WorkoutSession"] = (),
        day: date | None = None,
    ) -> "StrainScore":
        """Score a day's cardiovascular load on the 0-21 scale."""


class SleepScoreCalculating(ABC):

    @abstractmethod
    def calculate(
        self,
        session: "SleepSession",
        sleep_need_minutes: float,
        day: date | None = None,
    ) -> "SleepScore":
        """Score one night of sleep on the 0-100 scale."""


class RecoveryScoreCalculating(ABC):

    @abstractmethod
    def calculate(
        self,
        current_hrv: float | None,
        current_rhr: float | None,
        hrv_baseline: float | None,
        rhr_baseline: float | None,
        sleep_quality: float,
        day: date | None = None,
    ) -> "RecoveryScore":
        """Score readiness on the 0-100 scale against personal baselines."""
