# ============================================================
#  engine.py: High-level orchestrator for survival-sim
# ============================================================

from typing import List, Tuple

import numpy as np

from .bands import RESOLUTION, build_bands, resample_bands
from .data_structures import PathSimulation, SimulationInputs, SimulationResult
from .engine_numba import (
    DRAWDOWN_LIMIT,
    EQUITY_FLOOR,
    LOSS_NOISE_SCALE,
    NOISE_SCALE,
    _run_paths_numba,
    _run_paths_numba_parallel,
)
from .horizon import compute_horizon
from .regime import dispersion
from .rng import SeededRandom, derive_base_seed, randn

LOWER_RISK_FACTOR = 0.7
LOWER_RISK_FLOOR = 0.001


# ============================================================
#  Single path (pure Python)
# ============================================================


def simulate_path(
    seed: int,
    horizon: int,
    risk_per_trade: float,
    win_rate: float,
    avg_r: float,
    sigma: float,
) -> Tuple[List[float], bool]:
    """
    Reference implementation of one path, step for step the same as the
    numba kernel. Returns (equity at t=0..horizon, drawdown_hit).
    """
    draw = SeededRandom(seed)

    eq = 1.0
    peak = 1.0
    hit = False
    equity = [1.0]

    for _ in range(horizon):
        is_win = draw() < win_rate
        noise = randn(draw) * NOISE_SCALE * sigma

        if is_win:
            r = max(0.0, avg_r + noise)
        else:
            r = -max(0.0, 1.0 + noise * LOSS_NOISE_SCALE)

        eq = max(EQUITY_FLOOR, eq * (1.0 + risk_per_trade * r))
        peak = max(peak, eq)
        if not hit and 1.0 - eq / peak >= DRAWDOWN_LIMIT:
            hit = True

        equity.append(eq)

    return equity, hit


# ============================================================
#  Path orchestrator
# ============================================================


def run_paths(inputs: SimulationInputs, parallel: bool = False) -> PathSimulation:
    """
    Run every path for `inputs` (clamped here) and return the raw
    equity matrix [horizon+1, paths] plus per-path drawdown flags.
    """
    inputs = inputs.clamped()

    horizon = compute_horizon(inputs.risk_per_trade, inputs.vol_level)
    sigma = dispersion(inputs.vol_level)
    base_seed = derive_base_seed(inputs)

    kernel = _run_paths_numba_parallel if parallel else _run_paths_numba
    equity, hits = kernel(
        base_seed,
        inputs.paths,
        horizon,
        inputs.risk_per_trade,
        inputs.win_rate,
        inputs.avg_r,
        sigma,
    )

    return PathSimulation(equity=equity, hits=hits.astype(bool), horizon=horizon)


# ============================================================
#  MAIN ENTRY: simulate()
# ============================================================


def simulate(
    inputs: SimulationInputs,
    resolution: int = RESOLUTION,
    parallel: bool = False,
) -> SimulationResult:

    # ------------------------------------------------------------
    # Step 1: Paths
    # ------------------------------------------------------------
    sim = run_paths(inputs, parallel=parallel)

    # ------------------------------------------------------------
    # Step 2: Per-timestep percentiles, then fixed resolution
    # ------------------------------------------------------------
    raw = build_bands(sim.equity)
    bands = resample_bands(raw, resolution)

    # ------------------------------------------------------------
    # Step 3: Result (equity matrix is dropped here)
    # ------------------------------------------------------------
    clamped = inputs.clamped()
    return SimulationResult(
        dd50_risk=sim.dd50_risk,
        horizon_trades=sim.horizon,
        bands=bands,
        metadata={
            "inputs": clamped.to_dict(),
            "min_equity": float(np.min(sim.equity)),
        },
    )


# ============================================================
#  Lower-risk companion run
# ============================================================


def lower_risk_inputs(
    inputs: SimulationInputs, factor: float = LOWER_RISK_FACTOR
) -> SimulationInputs:
    """Same scenario at `factor` times the risk, never below 0.1%."""
    risk = inputs.clamped().risk_per_trade
    lowered = min(risk, max(LOWER_RISK_FLOOR, risk * factor))
    return inputs.with_risk(lowered)


def compare_risk(
    inputs: SimulationInputs,
    factor: float = LOWER_RISK_FACTOR,
    resolution: int = RESOLUTION,
) -> Tuple[SimulationResult, SimulationResult]:
    """(primary, lower-risk) results for the same scenario."""
    primary = simulate(inputs, resolution=resolution)
    lower = simulate(lower_risk_inputs(inputs, factor), resolution=resolution)
    return primary, lower
