"""Tests for strainlab.analytics.pipeline and summary -- end-to-end scoring."""

import json
from datetime import date, datetime, timedelta

import pytest

from strainlab.analytics.capabilities import StrainScoreCalculating
from strainlab.analytics.consistency import ConsistencyRating
from strainlab.analytics.guidance import TrainingIntensity, WeeklyLoadStatus
from strainlab.analytics.insight import InsightConfidence
from strainlab.analytics.pipeline import FALLBACK_SLEEP_QUALITY, DayInputs, ScoreEngine
from strainlab.analytics.recovery import RecoveryCategory
from strainlab.analytics.sleep import SleepCalculator
from strainlab.analytics.strain import StrainScore, ZoneMinutes
from strainlab.analytics.summary import DailySummary, ScoreHistory, build_daily_summary
from strainlab.config import ConfigurationError

from tests.conftest import (
    DAY,
    make_baseline,
    make_hr_stream,
    make_hrv_samples,
    make_session,
    make_workout,
)


def _inputs(**overrides) -> DayInputs:
    fields = dict(
        day=DAY,
        heart_rate_samples=tuple(make_hr_stream([120.0] * 40 + [160.0] * 10)),
        hrv_samples=tuple(make_hrv_samples([60.0])),
        resting_heart_rate=55.0,
        sleep_session=make_session(),
    )
    fields.update(overrides)
    return DayInputs(**fields)


MORNING_WAKE = datetime(2026, 2, 13, 6, 0)


class FixedStrain(StrainScoreCalculating):
    """Test double returning a constant strain score."""

    def calculate(self, heart_rate_samples, max_heart_rate, workouts=(), day=None):
        return StrainScore(day, 12.5, 0.0, 0.0, ZoneMinutes())


class TestScoreDay:
    def test_reference_day(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline())
        assert summary.date == DAY
        assert summary.sleep.score == 93.0
        assert summary.strain.raw_load == pytest.approx(80.0)
        # sleep score 93 feeds recovery: 0.5*90 + 0.3*16.67 + 0.2*93 = 68.6
        assert summary.recovery.score == 69.0
        assert summary.recovery.category == RecoveryCategory.OPTIMAL
        assert summary.recovery.sleep_quality == 93.0

    def test_insight_and_consistency(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline())
        # HRV +20 %, resting HR 10 % above baseline, sleep 93
        assert summary.insight.headline == "HRV is strong and sleep was solid"
        assert summary.insight.confidence == InsightConfidence.HIGH
        assert summary.insight.positive_signals == 2
        assert summary.insight.negative_signals == 1
        assert summary.consistency.rating == ConsistencyRating.INSUFFICIENT
        assert summary.consistency.nights == 1

    def test_calibrating_insight(self):
        summary = ScoreEngine().score_day(
            _inputs(sleep_session=None), make_baseline(hrv=None, rhr=None),
        )
        assert summary.insight.headline == "Building your baseline"
        assert "6 more days" in summary.insight.recommendation

    def test_history_feeds_insight_and_consistency(self):
        calc = SleepCalculator()
        nights = tuple(
            calc.calculate(make_session(end=MORNING_WAKE - timedelta(days=i)), 450.0)
            for i in range(4, 0, -1)
        )
        yesterday = StrainScore(DAY - timedelta(days=1), 16.0, 0.0, 0.0, ZoneMinutes())
        history = ScoreHistory(sleep=nights, strain=(yesterday,))
        summary = ScoreEngine().score_day(_inputs(), make_baseline(), history=history)
        assert summary.consistency.nights == 5
        assert summary.consistency.rating == ConsistencyRating.EXCELLENT
        assert summary.insight.negative_signals == 2
        assert summary.insight.recommendation.startswith("Great recovery")

    def test_no_sleep_session_uses_fallback(self):
        summary = ScoreEngine().score_day(_inputs(sleep_session=None), make_baseline())
        assert summary.sleep is None
        assert summary.recovery.sleep_quality == FALLBACK_SLEEP_QUALITY
        assert summary.sleep_debt.total_debt_minutes == 0.0

    def test_baseline_not_established(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline(hrv=None, rhr=None))
        assert summary.recovery.score is None
        assert summary.recovery.category == RecoveryCategory.UNDETERMINED
        assert summary.guidance.weekly_load_status == WeeklyLoadStatus.UNKNOWN
        # strain and sleep are unaffected
        assert summary.sleep.score == 93.0
        assert summary.strain.score > 0

    def test_no_hrv_sample(self):
        summary = ScoreEngine().score_day(_inputs(hrv_samples=()), make_baseline())
        assert summary.recovery.category == RecoveryCategory.UNDETERMINED

    def test_idempotent(self):
        engine = ScoreEngine()
        inputs = _inputs(workouts=(make_workout([160.0] * 20),))
        first = engine.score_day(inputs, make_baseline())
        second = engine.score_day(inputs, make_baseline())
        assert first == second
        assert first.to_json() == second.to_json()

    def test_invalid_max_hr(self):
        with pytest.raises(ConfigurationError):
            ScoreEngine().score_day(_inputs(), make_baseline(max_hr=0.0))

    def test_invalid_sleep_need(self):
        with pytest.raises(ConfigurationError):
            ScoreEngine().score_day(_inputs(), make_baseline(sleep_need=-1.0))

    def test_injected_calculator(self):
        engine = ScoreEngine(strain=FixedStrain())
        summary = engine.score_day(_inputs(), make_baseline())
        assert summary.strain.score == 12.5

    def test_history_feeds_guidance(self):
        engine = ScoreEngine()
        history = ScoreHistory(strain=tuple(
            StrainScore(DAY - timedelta(days=i), 4.0, 0.0, 0.0, ZoneMinutes())
            for i in range(7, 0, -1)
        ))
        summary = engine.score_day(_inputs(), make_baseline(), history=history)
        assert summary.guidance.weekly_load_status == WeeklyLoadStatus.UNDER_LOADED

    def test_intensity(self):
        engine = ScoreEngine()
        summary = engine.score_day(
            _inputs(), make_baseline(), intensity=TrainingIntensity.INTENSE,
        )
        # optimal recovery 14-18 shifted by +2
        assert (summary.guidance.low, summary.guidance.high) == (16.0, 20.0)


class TestUpdateBaseline:
    def test_established(self):
        baseline = ScoreEngine().update_baseline([50.0] * 7, [50.0] * 7, DAY)
        assert baseline.established
        assert baseline.hrv_baseline == pytest.approx(50.0)

    def test_not_established(self):
        baseline = ScoreEngine().update_baseline([50.0] * 3, [50.0] * 3, DAY)
        assert not baseline.established


class TestSummary:
    def test_to_json_round_trips_through_json(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline())
        data = json.loads(summary.to_json())
        assert data["date"] == "2026-02-13"
        assert data["recovery"]["category"] == "optimal"
        assert data["sleep"]["score"] == 93.0
        assert data["baseline"]["hrv_baseline"] == 50.0
        assert data["quality"]["warnings"] == [
            "Limited HRV data available",
            "Still calibrating your baseline",
        ]
        assert data["insight"]["headline"] == "HRV is strong and sleep was solid"
        assert data["consistency"]["rating"] == "Insufficient Data"
        assert "history" not in data

    def test_include_history(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline())
        assert summary.to_dict(include_history=True)["history"]["strain"] == []

    def test_repr(self):
        summary = build_daily_summary("2026-02-13")
        assert repr(summary) == "DailySummary(2026-02-13: recovery=n/a, strain=n/a/21, sleep=n/a)"

    def test_build_from_iso_string(self):
        summary = build_daily_summary("2026-02-13")
        assert summary.date == date(2026, 2, 13)
        assert summary.history == ScoreHistory()

    def test_history_extended(self):
        summary = ScoreEngine().score_day(_inputs(), make_baseline())
        history = ScoreHistory().extended(summary)
        assert history.recent_strain() == [summary.strain]
        assert history.recent_sleep() == [summary.sleep]
        assert history.days_covered == 1
        assert isinstance(summary, DailySummary)

    def test_recent_limits(self):
        strains = tuple(
            StrainScore(DAY - timedelta(days=i), float(i), 0.0, 0.0, ZoneMinutes())
            for i in range(10, 0, -1)
        )
        history = ScoreHistory(strain=strains)
        assert [s.score for s in history.recent_strain(3)] == [3.0, 2.0, 1.0]
        assert history.recent_strain(0) == []
