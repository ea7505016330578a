"""Daily summary aggregator.

Pulls the day's scores, the baseline snapshot and the derived views into
a single DailySummary that is JSON-serializable.  This is the payload handed
to whatever persists or syncs scores; nothing here writes it anywhere.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from strainlab.analytics.consistency import SleepConsistency
from strainlab.analytics.guidance import StrainGuidance
from strainlab.analytics.insight import DailyInsight
from strainlab.analytics.quality import DataQuality
from strainlab.analytics.recovery import RecoveryScore
from strainlab.analytics.sleep import SleepScore
from strainlab.analytics.sleep_debt import SleepDebt
from strainlab.analytics.strain import StrainScore
from strainlab.models import UserBaseline, to_plain


@dataclass(frozen=True)
class ScoreHistory:
    """Previously computed scores, oldest first."""

    recovery: tuple[RecoveryScore, ...] = ()
    strain: tuple[StrainScore, ...] = ()
    sleep: tuple[SleepScore, ...] = ()

    def recent_recovery(self, days: int = 7) -> list[RecoveryScore]:
        return list(self.recovery[-days:]) if days > 0 else []

    def recent_strain(self, days: int = 7) -> list[StrainScore]:
        return list(self.strain[-days:]) if days > 0 else []

    def recent_sleep(self, days: int = 7) -> list[SleepScore]:
        return list(self.sleep[-days:]) if days > 0 else []

    @property
    def days_covered(self) -> int:
        return len({s.date for s in (*self.recovery, *self.strain, *self.sleep)})

    def extended(self, summary: DailySummary) -> ScoreHistory:
        """History with *summary*'s scores appended."""
        return replace(
            self,
            recovery=self.recovery + ((summary.recovery,) if summary.recovery else ()),
            strain=self.strain + ((summary.strain,) if summary.strain else ()),
            sleep=self.sleep + ((summary.sleep,) if summary.sleep else ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "recovery": [to_plain(s) for s in self.recovery],
            "strain": [to_plain(s) for s in self.strain],
            "sleep": [to_plain(s) for s in self.sleep],
        }


@dataclass(frozen=True)
class DailySummary:
    """A single day's scores and the context they were computed in."""

    date: date
    recovery: RecoveryScore | None = None
    strain: StrainScore | None = None
    sleep: SleepScore | None = None
    baseline: UserBaseline | None = None
    guidance: StrainGuidance | None = None
    history: ScoreHistory | None = None
    quality: DataQuality | None = None
    sleep_debt: SleepDebt | None = None
    consistency: SleepConsistency | None = None
    insight: DailyInsight | None = None

    def to_dict(self, include_history: bool = False) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly).

        The history is omitted unless *include_history* is set; it is input
        context rather than part of the day's result.
        """
        d = {
            "date": self.date.isoformat(),
            "recovery": to_plain(self.recovery),
            "strain": to_plain(self.strain),
            "sleep": to_plain(self.sleep),
            "baseline": to_plain(self.baseline),
            "guidance": to_plain(self.guidance),
            "quality": to_plain(self.quality),
            "sleep_debt": to_plain(self.sleep_debt),
            "consistency": to_plain(self.consistency),
            "insight": to_plain(self.insight),
        }
        if include_history:
            d["history"] = to_plain(self.history)
        return d

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        recovery = "n/a"
        if self.recovery is not None and self.recovery.score is not None:
            recovery = f"{self.recovery.score:.0f}"
        strain = f"{self.strain.score:.1f}" if self.strain is not None else "n/a"
        sleep = f"{self.sleep.score:.0f}" if self.sleep is not None else "n/a"
        return (
            f"DailySummary({self.date}: "
            f"recovery={recovery}, "
            f"strain={strain}/21, "
            f"sleep={sleep})"
        )


def build_daily_summary(
    day: date | str,
    recovery: RecoveryScore | None = None,
    strain: StrainScore | None = None,
    sleep: SleepScore | None = None,
    baseline: UserBaseline | None = None,
    guidance: StrainGuidance | None = None,
    history: ScoreHistory | None = None,
    quality: DataQuality | None = None,
    sleep_debt: SleepDebt | None = None,
    consistency: SleepConsistency | None = None,
    insight: DailyInsight | None = None,
) -> DailySummary:
    """Build a daily summary from individual score results.

    Args:
        day: The date for this summary (a date or an ISO date string).
        recovery: Recovery score result.
        strain: Strain score result.
        sleep: Sleep score result.
        baseline: Baseline snapshot the scores were computed against.
        guidance: Recommended strain range.
        history: Previous scores used for guidance and sleep debt.
        quality: Data completeness assessment.
        sleep_debt: Accumulated sleep debt.
        consistency: Regularity of recent nights.
        insight: Combined daily readiness insight.

    Returns:
        A populated DailySummary.
    """
    return DailySummary(
        date=day if isinstance(day, date) else date.fromisoformat(day),
        recovery=recovery,
        strain=strain,
        sleep=sleep,
        baseline=baseline,
        guidance=guidance,
        history=history if history is not None else ScoreHistory(),
        quality=quality,
        sleep_debt=sleep_debt,
        consistency=consistency,
        insight=insight,
    )
