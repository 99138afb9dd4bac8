import math
from typing import Sequence

import numpy as np

from .data_structures import BAND_KEYS, PercentileBands

PERCENTILE_RANKS = (0.05, 0.25, 0.50, 0.75, 0.95)
RESOLUTION = 121


# ------------------------------------------------------------
# Percentiles
# ------------------------------------------------------------


def percentile_sorted(sorted_values: Sequence[float], p: float) -> float:
    """
    R-7 percentile of an already sorted sample: index (n-1)*p, linear
    interpolation between the floor and ceil order statistics.
    Empty sample -> 1.0 (starting equity).
    """
    n = len(sorted_values)
    if n == 0:
        return 1.0
    if n == 1:
        return float(sorted_values[0])
    x = (n - 1) * p
    i = int(math.floor(x))
    j = min(n - 1, i + 1)
    a = x - i
    return float(sorted_values[i] + (sorted_values[j] - sorted_values[i]) * a)


def build_bands(equity: np.ndarray) -> PercentileBands:
    """
    Percentile bands from an equity matrix of shape [T+1, P]
    (one row per timestep, one column per path).

    Each row is sorted and summarised at PERCENTILE_RANKS with the same
    interpolation as `percentile_sorted`, so the five rows of output can
    never cross.
    """
    equity = np.asarray(equity, dtype=np.float64)
    if equity.ndim != 2 or equity.shape[0] == 0:
        empty = np.zeros(0, dtype=np.float64)
        return PercentileBands(*(empty for _ in BAND_KEYS))

    steps, n = equity.shape
    if n == 0:
        flat = np.ones(steps, dtype=np.float64)
        return PercentileBands(*(flat for _ in BAND_KEYS))
    if n == 1:
        col = equity[:, 0]
        return PercentileBands(*(col for _ in BAND_KEYS))

    s = np.sort(equity, axis=1)

    series = []
    for p in PERCENTILE_RANKS:
        x = (n - 1) * p
        i = int(math.floor(x))
        j = min(n - 1, i + 1)
        a = x - i
        series.append(s[:, i] + (s[:, j] - s[:, i]) * a)

    return PercentileBands(*series)


# ------------------------------------------------------------
# Fixed-resolution resampling
# ------------------------------------------------------------


def resample_linear(series: Sequence[float], m: int = RESOLUTION) -> np.ndarray:
    """
    Resample `series` to exactly `m` points by linear interpolation over the
    normalised index. First and last values are kept exactly.

    Degenerate input: empty -> m copies of 1.0, one value -> m copies of it.
    """
    y = np.asarray(series, dtype=np.float64)
    n = y.size
    if m <= 0:
        return np.zeros(0, dtype=np.float64)
    if n == 0:
        return np.ones(m, dtype=np.float64)
    if n == 1:
        return np.full(m, y[0], dtype=np.float64)
    if m == 1:
        return y[:1].copy()

    max_i = n - 1
    x = (np.arange(m) / (m - 1)) * max_i
    x0 = np.floor(x).astype(np.int64)
    x1 = np.minimum(max_i, x0 + 1)
    a = x - x0

    v0 = y[x0]
    v1 = y[x1]
    return v0 + (v1 - v0) * a


def resample_bands(bands: PercentileBands, m: int = RESOLUTION) -> PercentileBands:
    return PercentileBands(*(resample_linear(b, m) for b in bands.as_tuple()))


# ------------------------------------------------------------
# Band morphing
# ------------------------------------------------------------


def ease_out_cubic(t: float) -> float:
    t = min(1.0, max(0.0, t))
    return 1.0 - (1.0 - t) ** 3


def interpolate_bands(
    start: PercentileBands, end: PercentileBands, t: float
) -> PercentileBands:
    """
    Element-wise blend between two band sets at progress t in [0, 1].
    Only meaningful when both sides share a resolution; otherwise the
    shorter length wins.
    """
    t = min(1.0, max(0.0, t))
    n = min(len(start), len(end))
    mixed = []
    for a, b in zip(start.as_tuple(), end.as_tuple()):
        a = a[:n]
        b = b[:n]
        mixed.append(a + (b - a) * t)
    return PercentileBands(*mixed)


def cone_width(bands: PercentileBands) -> float:
    """p95 - p05 at the end of the horizon."""
    if len(bands) == 0:
        return 0.0
    return float(bands.p95[-1] - bands.p05[-1])
