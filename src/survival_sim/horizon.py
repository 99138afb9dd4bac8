# survival_sim/horizon.py
import math

from .regime import DISPERSION, VolLevel, dispersion

BASE_HORIZON = 220
MIN_HORIZON = 40
MAX_HORIZON = 260

MIN_RISK = 0.0005
MAX_RISK = 0.10


def _clamp(x, lo, hi):
    return min(hi, max(lo, x))


def vol_factor(level) -> float:
    """LOW -> 1.0, EXTREME -> ~0.52."""
    return 1.0 / (1.0 + 0.9 * (dispersion(level) - DISPERSION[VolLevel.LOW]))


def risk_factor(risk_per_trade: float) -> float:
    """1% -> ~0.85, 3% -> ~0.65, 5% -> ~0.53."""
    return 1.0 / (1.0 + 18.0 * _clamp(risk_per_trade, MIN_RISK, MAX_RISK))


def compute_horizon(risk_per_trade: float, vol_level) -> int:
    """
    Number of simulated trades for one path.

    Higher risk or higher volatility compresses the horizon; the result is
    non-increasing in both and always within [MIN_HORIZON, MAX_HORIZON].
    """
    h = BASE_HORIZON * vol_factor(vol_level) * risk_factor(risk_per_trade)
    # round half up
    return int(_clamp(math.floor(h + 0.5), MIN_HORIZON, MAX_HORIZON))
