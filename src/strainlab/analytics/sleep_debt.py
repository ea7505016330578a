"""Accumulated sleep debt from recent sleep scores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from strainlab.analytics import stats
from strainlab.analytics.sleep import SleepScore

DAILY_DECAY = 0.9
LOOKBACK_NIGHTS = 14
SURPLUS_CREDIT = 0.5  # share of surplus sleep that pays down debt
TREND_THRESHOLD_MIN = 10.0  # minutes/day of deficit slope


class DebtTrend(str, Enum):
    INCREASING = "Increasing"
    STABLE = "Stable"
    DECREASING = "Decreasing"


class DebtSeverity(str, Enum):
    NONE = "None"
    MILD = "Mild"
    MODERATE = "Moderate"
    SIGNIFICANT = "Significant"
    SEVERE = "Severe"


@dataclass(frozen=True)
class SleepDebt:
    total_debt_minutes: float
    weekly_debt_minutes: float
    trend: DebtTrend
    severity: DebtSeverity
    recommendation: str

    @property
    def formatted_debt(self) -> str:
        hours, minutes = int(self.total_debt_minutes // 60), int(self.total_debt_minutes % 60)
        if hours == 0:
            return f"{minutes}m"
        if minutes == 0:
            return f"{hours}h"
        return f"{hours}h {minutes}m"


def _rolling_debt(durations: Sequence[float], target: float) -> float:
    debt = 0.0
    for age, actual in enumerate(reversed(durations[-LOOKBACK_NIGHTS:])):
        weight = DAILY_DECAY ** age
        deficit = target - actual
        if deficit > 0:
            debt += deficit * weight
        else:
            debt = max(0.0, debt + deficit * weight * SURPLUS_CREDIT)
    return debt


def _trend(durations: Sequence[float], target: float) -> DebtTrend:
    if len(durations) < 3:
        return DebtTrend.STABLE
    slope = stats.linear_trend([target - d for d in durations])
    if slope > TREND_THRESHOLD_MIN:
        return DebtTrend.INCREASING
    if slope < -TREND_THRESHOLD_MIN:
        return DebtTrend.DECREASING
    return DebtTrend.STABLE


def _severity(debt_minutes: float) -> DebtSeverity:
    hours = debt_minutes / 60.0
    if hours < 1:
        return DebtSeverity.NONE
    if hours < 3:
        return DebtSeverity.MILD
    if hours < 6:
        return DebtSeverity.MODERATE
    if hours < 10:
        return DebtSeverity.SIGNIFICANT
    return DebtSeverity.SEVERE


def _recommendation(severity: DebtSeverity, trend: DebtTrend, debt_minutes: float) -> str:
    if severity == DebtSeverity.NONE:
        return "Your sleep is on track"
    if severity == DebtSeverity.MILD:
        if trend == DebtTrend.DECREASING:
            return "You're catching up, keep it going"
        return "Try adding 15-30 min to tonight's sleep"
    if severity == DebtSeverity.MODERATE:
        return {
            DebtTrend.DECREASING: "Good progress on reducing sleep debt",
            DebtTrend.INCREASING: "Sleep debt is building, prioritize rest",
            DebtTrend.STABLE: "Consider an earlier bedtime this week",
        }[trend]
    extra_hours = min(2.0, debt_minutes / 60.0 / 3.0)
    return f"Add {extra_hours:.0f}h of sleep over the next few nights"


def calculate_sleep_debt(
    sleep_scores: Sequence[SleepScore],
    target_minutes: float,
) -> SleepDebt:
    """Summarise sleep debt from chronologically ordered sleep scores."""
    if not sleep_scores:
        return SleepDebt(
            0.0, 0.0, DebtTrend.STABLE, DebtSeverity.NONE,
            "Start tracking to monitor sleep debt",
        )

    durations = [s.total_duration_minutes for s in sleep_scores]
    last_week = durations[-7:]
    weekly = sum(max(0.0, target_minutes - d) for d in last_week)
    rolling = _rolling_debt(durations, target_minutes)
    trend = _trend(last_week, target_minutes)
    severity = _severity(rolling)

    return SleepDebt(
        total_debt_minutes=rolling,
        weekly_debt_minutes=weekly,
        trend=trend,
        severity=severity,
        recommendation=_recommendation(severity, trend, rolling),
    )
