"""Sleep scoring from a night's stage breakdown.

Three components, each on 0-100, combined with fixed weights:

- duration:   time in bed against the personal sleep need (capped at 100 %)
- efficiency: asleep share of time in bed
- stages:     deep and REM proportions against ideal shares (~20 % deep,
              ~25 % REM); both shortfall and excess are penalised
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from strainlab.analytics.capabilities import SleepScoreCalculating
from strainlab.config import require_positive
from strainlab.models import SleepSession, fields_to_plain

logger = logging.getLogger(__name__)

W_DURATION = 0.40
W_EFFICIENCY = 0.35
W_STAGES = 0.25

IDEAL_DEEP_PCT = 0.20
IDEAL_REM_PCT = 0.25
STAGE_PENALTY = 200.0  # points lost per unit of proportion off ideal


def sleep_category(score: float) -> str:
    if score >= 85:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Fair"
    return "Poor"


def format_minutes(minutes: float) -> str:
    hours, mins = int(minutes // 60), int(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins} minutes"


@dataclass(frozen=True)
class SleepScore:
    """Sleep score and its components."""

    date: date
    score: float  # 0-100
    duration_score: float
    efficiency_score: float
    stage_score: float
    total_duration_minutes: float
    sleep_need_minutes: float
    efficiency: float  # 0-1
    deep_sleep_minutes: float
    rem_sleep_minutes: float
    sleep_start: datetime | None = None
    sleep_end: datetime | None = None

    @property
    def category(self) -> str:
        return sleep_category(self.score)

    @property
    def explanation(self) -> str:
        need_hours = self.sleep_need_minutes / 60.0
        parts = []
        if self.total_duration_minutes / self.sleep_need_minutes >= 0.95:
            parts.append(f"You met your sleep need of {need_hours:.1f} hours.")
        else:
            deficit = self.sleep_need_minutes - self.total_duration_minutes
            parts.append(
                f"You were {int(deficit)} minutes short of your "
                f"{need_hours:.1f} hour sleep need."
            )

        eff_pct = self.efficiency * 100.0
        if eff_pct >= 90:
            parts.append(f"Your sleep efficiency was excellent at {int(eff_pct)}%.")
        elif eff_pct >= 80:
            parts.append(f"Your sleep efficiency was good at {int(eff_pct)}%.")
        else:
            parts.append(
                f"Your sleep efficiency was {int(eff_pct)}%, indicating restless sleep."
            )
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["category"] = self.category
        d["explanation"] = self.explanation
        return d

    def __repr__(self) -> str:
        return (
            f"SleepScore({self.date}: {self.score:.0f}, "
            f"dur={self.total_duration_minutes:.0f}/{self.sleep_need_minutes:.0f}min, "
            f"eff={self.efficiency:.0%})"
        )


def _stage_score(session: SleepSession) -> float:
    total = session.total_duration_minutes
    if total <= 0:
        return 0.0
    deep_pct = session.deep_minutes / total
    rem_pct = session.rem_minutes / total
    deep = max(0.0, 100.0 - abs(deep_pct - IDEAL_DEEP_PCT) * STAGE_PENALTY)
    rem = max(0.0, 100.0 - abs(rem_pct - IDEAL_REM_PCT) * STAGE_PENALTY)
    return (deep + rem) / 2.0


class SleepCalculator(SleepScoreCalculating):

    def calculate(
        self,
        session: SleepSession,
        sleep_need_minutes: float,
        day: date | None = None,
    ) -> SleepScore:
        """Score one sleep session.

        Args:
            session: The night's sleep session.
            sleep_need_minutes: Personal sleep need; must be positive.
            day: Date stamped on the result (default: the session's end date).

        Raises:
            ConfigurationError: If *sleep_need_minutes* is not positive.
        """
        need = require_positive("sleep_need_minutes", sleep_need_minutes)

        total = session.total_duration_minutes
        efficiency = session.efficiency

        duration_score = min(1.0, max(0.0, total / need)) * 100.0
        efficiency_score = efficiency * 100.0
        stage_score = _stage_score(session)

        weighted = (
            W_DURATION * duration_score
            + W_EFFICIENCY * efficiency_score
            + W_STAGES * stage_score
        )
        score = float(max(0, min(100, round(weighted))))
        logger.debug(
            "Sleep components d=%.1f e=%.1f s=%.1f -> %.0f",
            duration_score, efficiency_score, stage_score, score,
        )

        return SleepScore(
            date=day or session.end.date(),
            score=score,
            duration_score=duration_score,
            efficiency_score=efficiency_score,
            stage_score=stage_score,
            total_duration_minutes=total,
            sleep_need_minutes=need,
            efficiency=efficiency,
            deep_sleep_minutes=session.deep_minutes,
            rem_sleep_minutes=session.rem_minutes,
            sleep_start=session.start,
            sleep_end=session.end,
        )

    def insights(self, session: SleepSession, sleep_need_minutes: float) -> list[str]:
        """Plain-language observations about a night's sleep."""
        need = require_positive("sleep_need_minutes", sleep_need_minutes)
        insights = []

        if session.total_duration_minutes >= need:
            insights.append(f"You met your sleep goal of {format_minutes(need)}.")
        else:
            deficit = need - session.total_duration_minutes
            insights.append(f"You were {int(deficit)} minutes short of your sleep goal.")

        eff = session.efficiency * 100.0
        if eff >= 90:
            insights.append(f"Excellent sleep efficiency at {int(eff)}%.")
        elif eff >= 80:
            insights.append(f"Good sleep efficiency at {int(eff)}%.")
        else:
            insights.append(
                f"Sleep efficiency was {int(eff)}%. "
                "Try to maintain a consistent sleep schedule."
            )

        if session.deep_minutes >= 60:
            insights.append(
                f"Good deep sleep of {format_minutes(session.deep_minutes)} "
                "for physical recovery."
            )
        elif session.deep_minutes >= 30:
            insights.append("Moderate deep sleep. Physical recovery may be incomplete.")

        if session.rem_minutes >= 90:
            insights.append(
                f"Strong REM sleep of {format_minutes(session.rem_minutes)} "
                "for cognitive recovery."
            )
        elif session.rem_minutes >= 60:
            insights.append("Adequate REM sleep for mental restoration.")

        return insights
