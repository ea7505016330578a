"""HRV metrics and RR-interval cleaning.

Most watches only report SDNN, which is what the recovery score uses.  When
raw RR intervals are available the time-domain metrics below can be
computed directly.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from strainlab.models import HRVSample

RR_MIN_MS = 300.0  # 200 bpm
RR_MAX_MS = 2000.0  # 30 bpm
SDNN_TO_RMSSD = 0.8


def compute_rmssd(rr_intervals: Sequence[float]) -> float:
    """Root mean square of successive RR-interval differences (ms).

    Returns 0 if fewer than 2 intervals are provided.
    """
    if len(rr_intervals) < 2:
        return 0.0
    diffs = np.diff(np.asarray(rr_intervals, dtype=np.float64))
    return float(np.sqrt(np.mean(diffs ** 2)))


def ln_rmssd(rr_intervals: Sequence[float]) -> float:
    """Natural log of RMSSD; typical range 2.0-5.0."""
    rmssd = compute_rmssd(rr_intervals)
    if rmssd <= 0:
        return 0.0
    return math.log(rmssd)


def sdnn(rr_intervals: Sequence[float]) -> float:
    """Standard deviation of NN intervals (population), 0 when empty."""
    if len(rr_intervals) == 0:
        return 0.0
    return float(np.std(np.asarray(rr_intervals, dtype=np.float64), ddof=0))


def rmssd_from_sdnn(sdnn_ms: float) -> float:
    """Rough RMSSD estimate for resting measurements when only SDNN is known."""
    return sdnn_ms * SDNN_TO_RMSSD


def pnn50(rr_intervals: Sequence[float]) -> float:
    """Percentage of successive RR differences > 50 ms."""
    if len(rr_intervals) < 2:
        return 0.0
    diffs = np.abs(np.diff(np.asarray(rr_intervals, dtype=np.float64)))
    return float(np.sum(diffs > 50.0) / len(diffs) * 100.0)


def clean_rr_intervals(rr_intervals: Sequence[float]) -> list[float]:
    """Drop physiologically implausible intervals."""
    return [float(rr) for rr in rr_intervals if RR_MIN_MS <= rr <= RR_MAX_MS]


def remove_ectopic_beats(rr_intervals: Sequence[float], threshold: float = 0.2) -> list[float]:
    """Drop intervals deviating more than *threshold* from their neighbours' mean.

    The first and last intervals are always kept.
    """
    if len(rr_intervals) < 3:
        return [float(rr) for rr in rr_intervals]

    cleaned = [float(rr_intervals[0])]
    for prev, current, nxt in zip(rr_intervals, rr_intervals[1:], rr_intervals[2:]):
        surrounding = (prev + nxt) / 2.0
        if surrounding > 0 and abs(current - surrounding) / surrounding < threshold:
            cleaned.append(float(current))
    cleaned.append(float(rr_intervals[-1]))
    return cleaned


def current_hrv(samples: Sequence[HRVSample]) -> float | None:
    """SDNN of the most recent sample, or None without samples."""
    if not samples:
        return None
    return max(samples, key=lambda s: s.timestamp).sdnn_ms
