"""Shared fixtures and helpers for the strainlab test suite."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from strainlab.models import (
    HeartRateSample,
    HRVSample,
    SleepSession,
    UserBaseline,
    WorkoutSession,
)


DAY = date(2026, 2, 13)
MORNING = datetime(2026, 2, 13, 8, 0)


# ---------------------------------------------------------------------------
# Sample builders
# ---------------------------------------------------------------------------


def make_hr_stream(
    bpms: list[float],
    start: datetime = MORNING,
    interval_min: float = 1.0,
) -> list[HeartRateSample]:
    """One sample per *interval_min* minutes, starting at *start*."""
    return [
        HeartRateSample(timestamp=start + timedelta(minutes=i * interval_min), bpm=bpm)
        for i, bpm in enumerate(bpms)
    ]


def make_hrv_samples(values: list[float], start: datetime = MORNING) -> list[HRVSample]:
    return [
        HRVSample(timestamp=start + timedelta(minutes=10 * i), sdnn_ms=v)
        for i, v in enumerate(values)
    ]


def make_workout(
    bpms: list[float],
    start: datetime = MORNING,
    workout_id: str = "w1",
    activity_type: str = "Running",
) -> WorkoutSession:
    """Workout covering exactly its one-per-minute samples."""
    samples = make_hr_stream(bpms, start)
    return WorkoutSession(
        id=workout_id,
        activity_type=activity_type,
        start=start,
        end=samples[-1].timestamp,
        heart_rate_samples=tuple(samples),
    )


def make_session(
    total_min: float = 420.0,
    deep_min: float = 80.0,
    rem_min: float = 100.0,
    efficiency: float = 0.88,
    end: datetime = datetime(2026, 2, 13, 6, 0),
) -> SleepSession:
    """Sleep session with the given length, stage minutes and efficiency."""
    awake = total_min * (1.0 - efficiency)
    return SleepSession(
        start=end - timedelta(minutes=total_min),
        end=end,
        deep_minutes=deep_min,
        rem_minutes=rem_min,
        light_minutes=max(0.0, total_min - awake - deep_min - rem_min),
        awake_minutes=awake,
    )


def make_baseline(
    hrv: float | None = 50.0,
    rhr: float | None = 50.0,
    max_hr: float = 190.0,
    sleep_need: float = 450.0,
) -> UserBaseline:
    return UserBaseline(
        computed_on=DAY,
        hrv_baseline=hrv,
        rhr_baseline=rhr,
        sleep_need_minutes=sleep_need,
        max_heart_rate=max_hr,
    )


# ---------------------------------------------------------------------------
# Day file helpers
# ---------------------------------------------------------------------------


def make_day_payload(**overrides) -> dict:
    """A complete, valid day file as a dict."""
    payload = {
        "date": DAY.isoformat(),
        "profile": {"max_heart_rate": 190, "sleep_need_minutes": 450},
        "heart_rate": [
            {"timestamp": (MORNING + timedelta(minutes=i)).isoformat(), "bpm": bpm}
            for i, bpm in enumerate([120.0] * 40 + [160.0] * 10)
        ],
        "hrv": [{"timestamp": "2026-02-13T06:30:00", "sdnn_ms": 60.0}],
        "resting_heart_rate": 55,
        "sleep": {
            "start": "2026-02-12T23:00:00",
            "end": "2026-02-13T06:00:00",
            "deep_minutes": 80,
            "rem_minutes": 100,
            "light_minutes": 189.6,
            "awake_minutes": 50.4,
        },
        "workouts": [],
        "history": {
            "hrv": [50.0] * 7,
            "resting_heart_rate": [50.0] * 7,
        },
    }
    payload.update(overrides)
    return payload


def write_json(path: Path, payload: dict) -> Path:
    with open(path, "w") as f:
        json.dump(payload, f)
    return path


@pytest.fixture
def day_file(tmp_path: Path) -> Path:
    return write_json(tmp_path / "day.json", make_day_payload())
