import numpy as np

from ...data_structures import SimulationResult
from ...summary import dd50_interval


def trade_axis(result: SimulationResult) -> np.ndarray:
    """
    x values for a resampled band: fractional trade numbers 0..horizon.
    """
    n = len(result.bands)
    if n < 2:
        return np.zeros(n)
    return np.linspace(0.0, float(result.horizon_trades), n)


def dd50_error_bars(result: SimulationResult, num_paths: int) -> tuple:
    """
    (minus, plus) distances from dd50 to its 95% interval, for go.Bar error_y.
    """
    lo, hi = dd50_interval(result.dd50_risk, num_paths)
    return result.dd50_risk - lo, hi - result.dd50_risk
