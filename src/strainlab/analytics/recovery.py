"""Recovery score computation (baseline-relative).

Recovery compares this morning's HRV and resting HR with the user's own
rolling baselines and blends in last night's sleep score:

    score = 0.50 * hrv_component + 0.30 * rhr_component + 0.20 * sleep

Deviations are fractions of the baseline, signed so that positive is
favourable for both metrics (HRV above baseline, RHR below baseline).  Each
deviation goes through a clamped linear response: 0 deviation maps to 50,
``+span`` to 100 and ``-span`` to 0.

Without established baselines (or without today's readings) the score is
``None`` and the category is ``undetermined``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from strainlab.analytics.capabilities import RecoveryScoreCalculating
from strainlab.config import require_positive
from strainlab.models import fields_to_plain

logger = logging.getLogger(__name__)

# Weights for the composite recovery score
W_HRV = 0.50
W_RHR = 0.30
W_SLEEP = 0.20

NEUTRAL_COMPONENT = 50.0

# Sleep quality used when no (or no finite) sleep score is available
FALLBACK_SLEEP_QUALITY = 70.0


@dataclass(frozen=True)
class RecoveryCurve:
    """Deviation (as a fraction of baseline) that saturates each component."""

    hrv_span: float = 0.25
    rhr_span: float = 0.15

    def __post_init__(self) -> None:
        require_positive("hrv_span", self.hrv_span)
        require_positive("rhr_span", self.rhr_span)

    @staticmethod
    def _respond(deviation: float, span: float) -> float:
        return max(0.0, min(100.0, NEUTRAL_COMPONENT + deviation / span * 50.0))

    def hrv_component(self, deviation: float) -> float:
        return self._respond(deviation, self.hrv_span)

    def rhr_component(self, deviation: float) -> float:
        return self._respond(deviation, self.rhr_span)


class RecoveryCategory(str, Enum):
    POOR = "poor"
    MODERATE = "moderate"
    OPTIMAL = "optimal"
    UNDETERMINED = "undetermined"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_score(cls, score: float | None) -> RecoveryCategory:
        if score is None:
            return cls.UNDETERMINED
        if score >= 67:
            return cls.OPTIMAL
        if score >= 34:
            return cls.MODERATE
        return cls.POOR


@dataclass(frozen=True)
class RecoveryScore:
    """Recovery score and its components."""

    date: date
    score: float | None  # 0-100, None when undetermined
    hrv_deviation: float | None  # fraction, positive = above baseline
    rhr_deviation: float | None  # fraction, positive = below baseline
    sleep_quality: float  # 0-100
    hrv_baseline: float | None
    rhr_baseline: float | None
    current_hrv: float | None
    current_rhr: float | None

    @property
    def category(self) -> RecoveryCategory:
        return RecoveryCategory.from_score(self.score)

    @property
    def explanation(self) -> str:
        if self.score is None:
            return "Still learning your baseline. Keep wearing your watch to unlock recovery."

        parts = []
        if self.hrv_deviation > 0.05:
            parts.append("Your HRV is above your baseline, indicating good recovery.")
        elif self.hrv_deviation < -0.05:
            parts.append(
                "Your HRV is below your baseline, suggesting your body needs more recovery."
            )
        else:
            parts.append("Your HRV is close to your baseline.")

        if self.rhr_deviation > 0.03:
            parts.append("Your resting heart rate is lower than usual, a positive recovery sign.")
        elif self.rhr_deviation < -0.03:
            parts.append(
                "Your resting heart rate is elevated, which may indicate incomplete recovery."
            )

        if self.sleep_quality >= 80:
            parts.append("Your sleep quality was excellent last night.")
        elif self.sleep_quality >= 60:
            parts.append("Your sleep quality was moderate last night.")
        else:
            parts.append("Your sleep quality was below optimal last night.")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["category"] = self.category.value
        d["explanation"] = self.explanation
        return d

    def __repr__(self) -> str:
        score = "n/a" if self.score is None else f"{self.score:.0f}"
        return f"RecoveryScore({self.date}: {score}, {self.category.value})"


def _usable(value: float | None) -> bool:
    return value is not None and value > 0


class RecoveryCalculator(RecoveryScoreCalculating):

    def __init__(self, curve: RecoveryCurve | None = None) -> None:
        self.curve = curve or RecoveryCurve()

    def calculate(
        self,
        current_hrv: float | None,
        current_rhr: float | None,
        hrv_baseline: float | None,
        rhr_baseline: float | None,
        sleep_quality: float,
        day: date | None = None,
    ) -> RecoveryScore:
        """Compute a recovery score.

        Args:
            current_hrv: This morning's HRV (SDNN, ms).
            current_rhr: This morning's resting HR (bpm).
            hrv_baseline: Rolling HRV baseline, or None if not established.
            rhr_baseline: Rolling RHR baseline, or None if not established.
            sleep_quality: Last night's sleep score, 0-100.  A non-finite
                value is treated as missing.
            day: Date stamped on the result (default: today).
        """
        day = day or date.today()
        sleep_quality = float(sleep_quality)
        if not math.isfinite(sleep_quality):
            logger.info("Non-finite sleep quality; using %.0f", FALLBACK_SLEEP_QUALITY)
            sleep_quality = FALLBACK_SLEEP_QUALITY
        sleep_quality = max(0.0, min(100.0, sleep_quality))

        if not all(_usable(v) for v in (current_hrv, current_rhr, hrv_baseline, rhr_baseline)):
            logger.info("Recovery undetermined: baseline or today's readings missing")
            return RecoveryScore(
                date=day,
                score=None,
                hrv_deviation=None,
                rhr_deviation=None,
                sleep_quality=sleep_quality,
                hrv_baseline=hrv_baseline,
                rhr_baseline=rhr_baseline,
                current_hrv=current_hrv,
                current_rhr=current_rhr,
            )

        hrv_dev = (current_hrv - hrv_baseline) / hrv_baseline
        rhr_dev = (rhr_baseline - current_rhr) / rhr_baseline

        raw_score = (
            W_HRV * self.curve.hrv_component(hrv_dev)
            + W_RHR * self.curve.rhr_component(rhr_dev)
            + W_SLEEP * sleep_quality
        )
        score = float(max(0, min(100, round(raw_score))))
        logger.debug(
            "Recovery hrv_dev=%+.3f rhr_dev=%+.3f sleep=%.0f -> %.0f",
            hrv_dev, rhr_dev, sleep_quality, score,
        )

        return RecoveryScore(
            date=day,
            score=score,
            hrv_deviation=hrv_dev,
            rhr_deviation=rhr_dev,
            sleep_quality=sleep_quality,
            hrv_baseline=hrv_baseline,
            rhr_baseline=rhr_baseline,
            current_hrv=current_hrv,
            current_rhr=current_rhr,
        )

    def insights(
        self,
        score: RecoveryScore,
        previous_day_strain: float | None = None,
    ) -> list[str]:
        """Extra context for a computed recovery score."""
        insights = []
        if score.hrv_deviation is not None:
            if score.hrv_deviation > 0.10:
                insights.append(
                    "Your HRV is significantly above baseline, indicating excellent recovery."
                )
            elif score.hrv_deviation < -0.10:
                insights.append("Your HRV is below baseline. Consider lighter activity today.")

        if score.rhr_deviation is not None:
            if score.rhr_deviation < -0.08:
                insights.append(
                    "Your resting heart rate is elevated, which may indicate "
                    "stress or incomplete recovery."
                )
            elif score.rhr_deviation > 0.05:
                insights.append(
                    "Your resting heart rate is lower than usual, a positive recovery sign."
                )

        if score.sleep_quality < 60:
            insights.append(
                "Sleep quality was suboptimal. Prioritizing rest could improve "
                "tomorrow's recovery."
            )

        if previous_day_strain is not None and previous_day_strain > 15:
            insights.append("Yesterday was a high strain day. Give your body time to adapt.")

        return insights
