"""Input records supplied by the sensor/history provider.

Every record is an immutable dataclass that converts to a plain,
JSON-friendly dict with ``to_dict()`` and can be rebuilt from one with
``from_dict()``.  Timestamps are naive :class:`datetime` objects (converted to UTC when
the source carries an offset or is in epoch seconds); minutes are floats.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Plain-record conversion
# ---------------------------------------------------------------------------


def to_plain(value: Any) -> Any:
    """Recursively convert records, enums and dates into JSON-friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        to_dict = getattr(value, "to_dict", None)
        if to_dict is not None:
            return to_dict()
        return fields_to_plain(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    return value


def fields_to_plain(obj: Any) -> dict[str, Any]:
    return {f.name: to_plain(getattr(obj, f.name)) for f in fields(obj)}


def _parse_datetime(value: Any) -> datetime:
    """Parse to a naive datetime; offsets and epoch seconds become UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


# ---------------------------------------------------------------------------
# Heart rate / HRV
# ---------------------------------------------------------------------------


class SampleSource(str, Enum):
    """Where a heart rate sample came from."""

    WATCH = "watch"
    MANUAL = "manual"


@dataclass(frozen=True)
class HeartRateSample:
    """A single heart rate reading."""

    timestamp: datetime
    bpm: float
    source: SampleSource = SampleSource.WATCH

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeartRateSample:
        return cls(
            timestamp=_parse_datetime(data["timestamp"]),
            bpm=float(data["bpm"]),
            source=SampleSource(data.get("source", SampleSource.WATCH.value)),
        )


@dataclass(frozen=True)
class HRVSample:
    """Heart rate variability reading (SDNN, optionally with raw RR intervals)."""

    timestamp: datetime
    sdnn_ms: float
    rr_intervals_ms: tuple[float, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HRVSample:
        rr = data.get("rr_intervals_ms")
        return cls(
            timestamp=_parse_datetime(data["timestamp"]),
            sdnn_ms=float(data["sdnn_ms"]),
            rr_intervals_ms=tuple(float(v) for v in rr) if rr is not None else None,
        )


# ---------------------------------------------------------------------------
# Sleep
# ---------------------------------------------------------------------------


class SleepStage(str, Enum):
    """Stage label of a recorded sleep interval."""

    AWAKE = "awake"
    REM = "rem"
    CORE = "core"
    DEEP = "deep"
    IN_BED = "in_bed"
    ASLEEP_UNSPECIFIED = "asleep_unspecified"


@dataclass(frozen=True)
class SleepStageInterval:
    stage: SleepStage
    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> float:
        return max(0.0, _minutes_between(self.start, self.end))


@dataclass(frozen=True)
class SleepSession:
    """One night of sleep with its per-stage minute breakdown.

    ``total_duration_minutes`` is the time in bed (end - start); efficiency
    is the asleep share of that time.
    """

    start: datetime
    end: datetime
    deep_minutes: float = 0.0
    rem_minutes: float = 0.0
    light_minutes: float = 0.0
    awake_minutes: float = 0.0

    @property
    def total_duration_minutes(self) -> float:
        return max(0.0, _minutes_between(self.start, self.end))

    @property
    def asleep_minutes(self) -> float:
        return max(0.0, self.total_duration_minutes - self.awake_minutes)

    @property
    def efficiency(self) -> float:
        total = self.total_duration_minutes
        if total <= 0:
            return 0.0
        return min(1.0, self.asleep_minutes / total)

    @classmethod
    def from_stages(
        cls,
        start: datetime,
        end: datetime,
        stages: list[SleepStageInterval],
    ) -> SleepSession:
        """Build a session by summing stage intervals.

        ``core`` and unspecified sleep count as light sleep; ``in_bed``
        counts as awake time.
        """
        totals = {stage: 0.0 for stage in SleepStage}
        for interval in stages:
            totals[interval.stage] += interval.duration_minutes
        return cls(
            start=start,
            end=end,
            deep_minutes=totals[SleepStage.DEEP],
            rem_minutes=totals[SleepStage.REM],
            light_minutes=totals[SleepStage.CORE] + totals[SleepStage.ASLEEP_UNSPECIFIED],
            awake_minutes=totals[SleepStage.AWAKE] + totals[SleepStage.IN_BED],
        )

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["total_duration_minutes"] = self.total_duration_minutes
        d["efficiency"] = self.efficiency
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SleepSession:
        start = _parse_datetime(data["start"])
        end = _parse_datetime(data["end"])
        if "stages" in data:
            return cls.from_stages(start, end, [
                SleepStageInterval(
                    stage=SleepStage(s["stage"]),
                    start=_parse_datetime(s["start"]),
                    end=_parse_datetime(s["end"]),
                )
                for s in data["stages"]
            ])
        return cls(
            start=start,
            end=end,
            deep_minutes=float(data.get("deep_minutes", 0.0)),
            rem_minutes=float(data.get("rem_minutes", 0.0)),
            light_minutes=float(data.get("light_minutes", 0.0)),
            awake_minutes=float(data.get("awake_minutes", 0.0)),
        )


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkoutSession:
    """A completed workout and the heart rate samples recorded during it."""

    id: str
    activity_type: str
    start: datetime
    end: datetime
    heart_rate_samples: tuple[HeartRateSample, ...] = ()
    active_energy_kcal: float | None = None

    @property
    def duration_minutes(self) -> float:
        return max(0.0, _minutes_between(self.start, self.end))

    @property
    def average_hr(self) -> float:
        if not self.heart_rate_samples:
            return 0.0
        return sum(s.bpm for s in self.heart_rate_samples) / len(self.heart_rate_samples)

    @property
    def peak_hr(self) -> float:
        return max((s.bpm for s in self.heart_rate_samples), default=0.0)

    def contains(self, timestamp: datetime) -> bool:
        return self.start <= timestamp <= self.end

    def to_dict(self) -> dict[str, Any]:
        return fields_to_plain(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkoutSession:
        energy = data.get("active_energy_kcal")
        return cls(
            id=str(data["id"]),
            activity_type=str(data.get("activity_type", "Other")),
            start=_parse_datetime(data["start"]),
            end=_parse_datetime(data["end"]),
            heart_rate_samples=tuple(
                HeartRateSample.from_dict(s) for s in data.get("heart_rate_samples", [])
            ),
            active_energy_kcal=float(energy) if energy is not None else None,
        )


# ---------------------------------------------------------------------------
# Baseline snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UserBaseline:
    """Personal reference values the recovery score is measured against.

    ``None`` for a baseline value means it is not established yet (too
    little history), never "zero".
    """

    computed_on: date
    hrv_baseline: float | None
    rhr_baseline: float | None
    window_days: int = 7
    sleep_need_minutes: float = 450.0
    max_heart_rate: float = 190.0

    @property
    def established(self) -> bool:
        return self.hrv_baseline is not None and self.rhr_baseline is not None

    @property
    def sleep_need_hours(self) -> float:
        return self.sleep_need_minutes / 60.0

    @classmethod
    def default(cls, age: int, on: date) -> UserBaseline:
        """Starting snapshot for a new user: age-estimated max HR, no baselines."""
        return cls(
            computed_on=on,
            hrv_baseline=None,
            rhr_baseline=None,
            max_heart_rate=float(220 - age),
        )

    def to_dict(self) -> dict[str, Any]:
        d = fields_to_plain(self)
        d["established"] = self.established
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserBaseline:
        hrv = data.get("hrv_baseline")
        rhr = data.get("rhr_baseline")
        return cls(
            computed_on=_parse_date(data["computed_on"]),
            hrv_baseline=float(hrv) if hrv is not None else None,
            rhr_baseline=float(rhr) if rhr is not None else None,
            window_days=int(data.get("window_days", 7)),
            sleep_need_minutes=float(data.get("sleep_need_minutes", 450.0)),
            max_heart_rate=float(data.get("max_heart_rate", 190.0)),
        )
