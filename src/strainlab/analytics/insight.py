"""Daily readiness insight.

Combines this morning's recovery, last night's sleep and yesterday's strain
into a headline and a recommendation.  Each input becomes a factor marked
positive, neutral or negative; the balance of those signals and which
inputs were available decide the wording and the confidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from strainlab.analytics.recovery import RecoveryCategory, RecoveryScore
from strainlab.analytics.sleep import SleepScore, format_minutes
from strainlab.analytics.strain import StrainScore
from strainlab.models import fields_to_plain

# HRV deviation (% of baseline) beyond which it counts as a signal
HRV_SIGNAL_PCT = 10.0
# Resting HR: below baseline by more than this is positive ...
RHR_LOW_PCT = 5.0
# ... above baseline by more than this is negative
RHR_HIGH_PCT = 8.0

SHORT_HEADLINE_MAX = 40


class InsightConfidence(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"

    @property
    def display_name(self) -> str:
        return {
            InsightConfidence.HIGH: "High confidence",
            InsightConfidence.MODERATE: "Moderate confidence",
            InsightConfidence.LOW: "Limited data",
        }[self]


class FactorType(str, Enum):
    HRV = "HRV"
    RESTING_HR = "Resting HR"
    SLEEP = "Sleep"
    STRAIN = "Recent Strain"


class FactorStatus(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class InsightFactor:
    type: FactorType
    status: FactorStatus
    description: str

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)


@dataclass(frozen=True)
class DailyInsight:
    """Headline, recommendation and the factors behind them."""

    date: date
    headline: str
    recommendation: str
    confidence: InsightConfidence
    factors: tuple[InsightFactor, ...] = ()

    @property
    def positive_signals(self) -> int:
        return sum(1 for f in self.factors if f.status == FactorStatus.POSITIVE)

    @property
    def negative_signals(self) -> int:
        return sum(1 for f in self.factors if f.status == FactorStatus.NEGATIVE)

    @property
    def short_headline(self) -> str:
        """Headline cut at a word boundary to fit ``SHORT_HEADLINE_MAX``."""
        if len(self.headline) <= SHORT_HEADLINE_MAX:
            return self.headline
        truncated = self.headline[:SHORT_HEADLINE_MAX - 3]
        if " " in truncated:
            truncated = truncated[:truncated.rindex(" ")]
        return truncated + "..."

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["positive_signals"] = self.positive_signals
        d["negative_signals"] = self.negative_signals
        return d

    def __repr__(self) -> str:
        return f"DailyInsight({self.date}: {self.headline!r}, {self.confidence.value})"

    @classmethod
    def no_data(cls, day: date) -> DailyInsight:
        return cls(
            date=day,
            headline="Getting to know you",
            recommendation="Wear your watch to start collecting data",
            confidence=InsightConfidence.LOW,
        )

    @classmethod
    def calibrating(cls, day: date, days_remaining: int) -> DailyInsight:
        return cls(
            date=day,
            headline="Building your baseline",
            recommendation=(
                f"Keep wearing your watch for {days_remaining} more days to personalize"
            ),
            confidence=InsightConfidence.LOW,
        )


# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------


def _hrv_factor(recovery: RecoveryScore) -> InsightFactor:
    pct = recovery.hrv_deviation * 100.0
    if pct > HRV_SIGNAL_PCT:
        return InsightFactor(
            FactorType.HRV, FactorStatus.POSITIVE, f"HRV is {int(pct)}% above your baseline",
        )
    if pct < -HRV_SIGNAL_PCT:
        return InsightFactor(
            FactorType.HRV, FactorStatus.NEGATIVE, f"HRV is {int(-pct)}% below your baseline",
        )
    return InsightFactor(FactorType.HRV, FactorStatus.NEUTRAL, "HRV is within normal range")


def _rhr_factor(recovery: RecoveryScore) -> InsightFactor:
    # rhr_deviation is positive when resting HR is below baseline
    elevated_pct = -recovery.rhr_deviation * 100.0
    if elevated_pct < -RHR_LOW_PCT:
        return InsightFactor(
            FactorType.RESTING_HR, FactorStatus.POSITIVE, "Resting HR is lower than usual",
        )
    if elevated_pct > RHR_HIGH_PCT:
        return InsightFactor(FactorType.RESTING_HR, FactorStatus.NEGATIVE, "Resting HR is elevated")
    return InsightFactor(FactorType.RESTING_HR, FactorStatus.NEUTRAL, "Resting HR is normal")


def _sleep_factor(sleep: SleepScore) -> InsightFactor:
    duration = format_minutes(sleep.total_duration_minutes)
    if sleep.score >= 80:
        return InsightFactor(
            FactorType.SLEEP, FactorStatus.POSITIVE, f"Sleep was excellent ({duration})",
        )
    if sleep.score >= 60:
        return InsightFactor(
            FactorType.SLEEP, FactorStatus.NEUTRAL, f"Sleep was adequate ({duration})",
        )
    return InsightFactor(
        FactorType.SLEEP, FactorStatus.NEGATIVE, f"Sleep was insufficient ({duration})",
    )


def _strain_factor(strain: StrainScore) -> InsightFactor:
    if strain.score >= 15:
        return InsightFactor(
            FactorType.STRAIN, FactorStatus.NEGATIVE,
            f"High strain yesterday ({strain.score:.1f})",
        )
    if strain.score >= 10:
        return InsightFactor(FactorType.STRAIN, FactorStatus.NEUTRAL, "Moderate strain yesterday")
    return InsightFactor(
        FactorType.STRAIN, FactorStatus.POSITIVE, "Light strain yesterday, well rested",
    )


# ---------------------------------------------------------------------------
# Wording
# ---------------------------------------------------------------------------


def _confidence(has_recovery: bool, has_sleep: bool, n_factors: int) -> InsightConfidence:
    if has_recovery and has_sleep and n_factors >= 3:
        return InsightConfidence.HIGH
    if has_recovery or (has_sleep and n_factors >= 2):
        return InsightConfidence.MODERATE
    return InsightConfidence.LOW


def _text(
    recovery: RecoveryScore | None,
    sleep: SleepScore | None,
    previous_strain: float,
    positive: int,
    negative: int,
) -> tuple[str, str]:
    if recovery is None:
        if sleep is not None and sleep.score >= 70:
            return "Sleep was solid last night", "Recovery data will be available soon"
        return "Sleep could have been better", "Try to prioritize rest today"

    if recovery.category == RecoveryCategory.OPTIMAL:
        if sleep is not None and sleep.score >= 75:
            headline = "HRV is strong and sleep was solid"
        else:
            headline = "Your body is well recovered"
        if previous_strain < 12:
            return headline, "Today is a good day to push harder"
        return headline, "Great recovery, you're ready for whatever today brings"

    if recovery.category == RecoveryCategory.MODERATE:
        if negative > positive:
            return "Mixed signals today", "Listen to your body during activity"
        return "Recovery is moderate", "A balanced training day would work well"

    if sleep is not None and sleep.score < 60:
        headline = "Sleep was short and recovery is low"
    else:
        headline = "Your body needs more recovery time"
    if previous_strain >= 15:
        return headline, "Consider rest or light activity, yesterday was demanding"
    return headline, "Prioritize recovery today"


def generate_insight(
    day: date,
    recovery: RecoveryScore | None = None,
    sleep: SleepScore | None = None,
    previous_day_strain: StrainScore | None = None,
    days_until_baseline: int | None = None,
) -> DailyInsight:
    """Build the day's insight from whichever scores are available.

    An undetermined recovery counts as missing.  With neither recovery nor
    sleep, the result is a calibration notice when *days_until_baseline*
    is given and positive, else a no-data notice.
    """
    if recovery is not None and recovery.score is None:
        recovery = None

    if recovery is None and sleep is None:
        if days_until_baseline:
            return DailyInsight.calibrating(day, days_until_baseline)
        return DailyInsight.no_data(day)

    factors = []
    if recovery is not None:
        factors.append(_hrv_factor(recovery))
        factors.append(_rhr_factor(recovery))
    if sleep is not None:
        factors.append(_sleep_factor(sleep))
    if previous_day_strain is not None:
        factors.append(_strain_factor(previous_day_strain))

    positive = sum(1 for f in factors if f.status == FactorStatus.POSITIVE)
    negative = sum(1 for f in factors if f.status == FactorStatus.NEGATIVE)
    previous = previous_day_strain.score if previous_day_strain is not None else 0.0
    headline, recommendation = _text(recovery, sleep, previous, positive, negative)

    return DailyInsight(
        date=day,
        headline=headline,
        recommendation=recommendation,
        confidence=_confidence(recovery is not None, sleep is not None, len(factors)),
        factors=tuple(factors),
    )
