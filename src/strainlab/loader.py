"""Read a day's recorded data from a JSON file.

A day file looks like::

    {
      "date": "2026-02-13",
      "profile": {"max_heart_rate": 185, "sleep_need_minutes": 480},
      "heart_rate": [{"timestamp": "2026-02-13T08:00:00", "bpm": 72}, ...],
      "hrv": [{"timestamp": "2026-02-13T06:30:00", "sdnn_ms": 54.0}, ...],
      "resting_heart_rate": 52,
      "sleep": {"start": "...", "end": "...", "deep_minutes": 84, ...},
      "workouts": [{"id": "w1", "activity_type": "Running", ...}],
      "history": {"hrv": [50.1, 48.7, ...], "resting_heart_rate": [53, 54, ...]},
      "baseline": {"computed_on": "...", "hrv_baseline": 51.0, ...}
    }

Every key except ``date`` is optional.  ``baseline`` is a stored snapshot;
without it the baseline is computed from ``history``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from strainlab.analytics.pipeline import DayInputs
from strainlab.models import (
    HeartRateSample,
    HRVSample,
    SleepSession,
    UserBaseline,
    WorkoutSession,
    _parse_date,
)


@dataclass(frozen=True)
class DayFile:
    """Parsed contents of a day file."""

    inputs: DayInputs
    hrv_history: tuple[float, ...] = ()
    rhr_history: tuple[float, ...] = ()
    baseline: UserBaseline | None = None
    profile: dict[str, float] = field(default_factory=dict)


def parse_day(data: dict[str, Any]) -> DayFile:
    """Build a :class:`DayFile` from an already-decoded JSON object.

    Raises:
        ValueError: If a required key is missing or a value has the wrong type.
    """
    if not isinstance(data, dict):
        raise ValueError("day file must contain a JSON object")

    try:
        day = _parse_date(data["date"])
        sleep = data.get("sleep")
        rhr = data.get("resting_heart_rate")
        inputs = DayInputs(
            day=day,
            heart_rate_samples=tuple(
                HeartRateSample.from_dict(s) for s in data.get("heart_rate", [])
            ),
            hrv_samples=tuple(HRVSample.from_dict(s) for s in data.get("hrv", [])),
            resting_heart_rate=float(rhr) if rhr is not None else None,
            sleep_session=SleepSession.from_dict(sleep) if sleep else None,
            workouts=tuple(WorkoutSession.from_dict(w) for w in data.get("workouts", [])),
        )
        history = data.get("history", {})
        baseline = data.get("baseline")
        return DayFile(
            inputs=inputs,
            hrv_history=tuple(float(v) for v in history.get("hrv", [])),
            rhr_history=tuple(float(v) for v in history.get("resting_heart_rate", [])),
            baseline=UserBaseline.from_dict(baseline) if baseline else None,
            profile={k: float(v) for k, v in data.get("profile", {}).items()},
        )
    except KeyError as exc:
        raise ValueError(f"missing required field {exc}") from exc
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"malformed day file: {exc}") from exc


def load_day(path: str | Path) -> DayFile:
    """Read and parse a day file.

    Raises:
        ValueError: If the file is not valid JSON or not a valid day file.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path.name}: invalid JSON ({exc})") from exc

    try:
        return parse_day(data)
    except ValueError as exc:
        raise ValueError(f"{path.name}: {exc}") from exc
