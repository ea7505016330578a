"""Scoring pipeline: run one day's inputs through every calculator.

:class:`ScoreEngine` is handed its baseline engine and score calculators
(defaults are built when omitted) and combines their results into a
:class:`DailySummary`.  It keeps no state between calls: scoring the same
inputs twice yields equal summaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from strainlab.analytics.baseline import BaselineEngine
from strainlab.analytics.capabilities import (
    BaselineCalculating,
    RecoveryScoreCalculating,
    SleepScoreCalculating,
    StrainScoreCalculating,
)
from strainlab.analytics.consistency import calculate_consistency
from strainlab.analytics.guidance import TrainingIntensity, calculate_guidance
from strainlab.analytics.hrv import current_hrv
from strainlab.analytics.insight import generate_insight
from strainlab.analytics.quality import assess_quality
from strainlab.analytics.recovery import FALLBACK_SLEEP_QUALITY, RecoveryCalculator
from strainlab.analytics.sleep import SleepCalculator
from strainlab.analytics.sleep_debt import calculate_sleep_debt
from strainlab.analytics.strain import StrainCalculator
from strainlab.analytics.summary import DailySummary, ScoreHistory, build_daily_summary
from strainlab.models import (
    HeartRateSample,
    HRVSample,
    SleepSession,
    UserBaseline,
    WorkoutSession,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayInputs:
    """Everything recorded for one day."""

    day: date
    heart_rate_samples: tuple[HeartRateSample, ...] = ()
    hrv_samples: tuple[HRVSample, ...] = ()
    resting_heart_rate: float | None = None
    sleep_session: SleepSession | None = None
    workouts: tuple[WorkoutSession, ...] = ()


class ScoreEngine:
    """Computes baselines and daily scores with injected calculators."""

    def __init__(
        self,
        baseline: BaselineCalculating | None = None,
        strain: StrainScoreCalculating | None = None,
        sleep: SleepScoreCalculating | None = None,
        recovery: RecoveryScoreCalculating | None = None,
    ) -> None:
        self.baseline = baseline or BaselineEngine()
        self.strain = strain or StrainCalculator()
        self.sleep = sleep or SleepCalculator()
        self.recovery = recovery or RecoveryCalculator()

    def update_baseline(
        self,
        hrv_history: Sequence[float],
        rhr_history: Sequence[float],
        on: date,
        sleep_need_minutes: float = 450.0,
        max_heart_rate: float = 190.0,
    ) -> UserBaseline:
        """Recompute the baseline snapshot from daily HRV and RHR history."""
        return self.baseline.build_user_baseline(
            hrv_history,
            rhr_history,
            on,
            sleep_need_minutes=sleep_need_minutes,
            max_heart_rate=max_heart_rate,
        )

    def score_day(
        self,
        inputs: DayInputs,
        baseline: UserBaseline,
        history: ScoreHistory | None = None,
        intensity: TrainingIntensity = TrainingIntensity.MODERATE,
    ) -> DailySummary:
        """Score one day against *baseline*.

        Args:
            inputs: The day's samples, sleep session and workouts.
            baseline: Baseline snapshot (also supplies max HR and sleep need).
            history: Earlier scores, oldest first, for guidance, sleep debt,
                consistency and the insight.
            intensity: Preferred training intensity for the strain guidance.

        Raises:
            ConfigurationError: If the baseline's max HR or sleep need is
                not positive.
        """
        history = history if history is not None else ScoreHistory()
        day = inputs.day

        sleep = None
        if inputs.sleep_session is not None:
            sleep = self.sleep.calculate(
                inputs.sleep_session, baseline.sleep_need_minutes, day=day,
            )

        strain = self.strain.calculate(
            inputs.heart_rate_samples,
            baseline.max_heart_rate,
            workouts=inputs.workouts,
            day=day,
        )

        if sleep is None:
            logger.info(
                "No sleep session for %s; using sleep quality %.0f",
                day, FALLBACK_SLEEP_QUALITY,
            )
        recovery = self.recovery.calculate(
            current_hrv(inputs.hrv_samples),
            inputs.resting_heart_rate,
            baseline.hrv_baseline,
            baseline.rhr_baseline,
            sleep.score if sleep is not None else FALLBACK_SLEEP_QUALITY,
            day=day,
        )

        guidance = calculate_guidance(recovery, history.recent_strain(7), intensity)

        recent_sleep = history.recent_sleep(14) + ([sleep] if sleep is not None else [])
        sleep_debt = calculate_sleep_debt(recent_sleep, baseline.sleep_need_minutes)
        consistency = calculate_consistency(recent_sleep)

        previous_strain = next(
            (s for s in history.recent_strain(1) if s.date == day - timedelta(days=1)), None,
        )
        days_until_baseline = None
        if not baseline.established:
            days_until_baseline = max(1, baseline.window_days - history.days_covered - 1)
        insight = generate_insight(
            day,
            recovery=recovery,
            sleep=sleep,
            previous_day_strain=previous_strain,
            days_until_baseline=days_until_baseline,
        )

        session = inputs.sleep_session
        quality = assess_quality(
            hrv_values=[s.sdnn_ms for s in inputs.hrv_samples],
            rhr_values=[s.bpm for s in inputs.heart_rate_samples],
            sleep_minutes=session.total_duration_minutes if session is not None else None,
            activity_minutes=strain.activity_minutes,
            days_covered=history.days_covered + 1,
        )

        summary = build_daily_summary(
            day,
            recovery=recovery,
            strain=strain,
            sleep=sleep,
            baseline=baseline,
            guidance=guidance,
            history=history,
            quality=quality,
            sleep_debt=sleep_debt,
            consistency=consistency,
            insight=insight,
        )
        logger.debug("Scored %r", summary)
        return summary
