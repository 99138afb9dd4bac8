import numpy as np
from numba import njit, prange

from .rng import MASK32, PATH_SEED_STRIDE, mulberry32_next, randn_from_state

EQUITY_FLOOR = 0.02
DRAWDOWN_LIMIT = 0.5
NOISE_SCALE = 0.35
LOSS_NOISE_SCALE = 0.6


@njit
def _simulate_path_numba(
    seed: int,
    horizon: int,
    risk_per_trade: float,
    win_rate: float,
    avg_r: float,
    sigma: float,
    equity_out: np.ndarray,  # (T+1, P)
    col: int,
):
    """
    Walk one path through `horizon` trades, writing equity into column
    `col` of `equity_out`. Returns True if the path ever hit a 50%
    drawdown from its own running peak.

    Per step:
      win/loss draw -> regime noise -> R outcome -> equity update
      -> floor at EQUITY_FLOOR -> peak / drawdown bookkeeping
    """
    state = seed & MASK32

    eq = 1.0
    peak = 1.0
    hit = False

    equity_out[0, col] = 1.0

    for t in range(1, horizon + 1):
        state, u = mulberry32_next(state)
        is_win = u < win_rate

        state, z = randn_from_state(state)
        noise = z * NOISE_SCALE * sigma

        if is_win:
            r = max(0.0, avg_r + noise)
        else:
            # losses are centred on -1R with damped dispersion
            r = -max(0.0, 1.0 + noise * LOSS_NOISE_SCALE)

        eq = eq * (1.0 + risk_per_trade * r)
        eq = max(EQUITY_FLOOR, eq)

        peak = max(peak, eq)
        dd = 1.0 - eq / peak

        if not hit and dd >= DRAWDOWN_LIMIT:
            hit = True

        equity_out[t, col] = eq

    return hit


@njit
def _run_paths_numba(
    base_seed: int,
    num_paths: int,
    horizon: int,
    risk_per_trade: float,
    win_rate: float,
    avg_r: float,
    sigma: float,
):
    """
    Sequential path loop.

    Returns:
        equity: (T+1, P) float64
        hits:   (P,) bool
    """
    equity = np.empty((horizon + 1, num_paths), dtype=np.float64)
    hits = np.zeros(num_paths, dtype=np.bool_)

    for p in range(num_paths):
        seed = (base_seed + np.int64(p) * PATH_SEED_STRIDE) & MASK32
        hits[p] = _simulate_path_numba(
            seed, horizon, risk_per_trade, win_rate, avg_r, sigma, equity, p
        )

    return equity, hits


@njit(parallel=True)
def _run_paths_numba_parallel(
    base_seed: int,
    num_paths: int,
    horizon: int,
    risk_per_trade: float,
    win_rate: float,
    avg_r: float,
    sigma: float,
):
    """
    Same as `_run_paths_numba` but spreads paths over threads.
    Each path owns its RNG state and its equity column, so the output is
    identical to the sequential loop.
    """
    equity = np.empty((horizon + 1, num_paths), dtype=np.float64)
    hits = np.zeros(num_paths, dtype=np.bool_)

    for p in prange(num_paths):
        seed = (base_seed + np.int64(p) * PATH_SEED_STRIDE) & MASK32
        hits[p] = _simulate_path_numba(
            seed, horizon, risk_per_trade, win_rate, avg_r, sigma, equity, p
        )

    return equity, hits
