# survival_sim/rng.py
import math

from numba import njit

from .regime import SEED_CODES, parse_vol_level

MASK32 = 0xFFFFFFFF
PATH_SEED_STRIDE = 1013


# ------------------------------------------------------------
# Mulberry32 (32-bit state, uniform in [0, 1))
# ------------------------------------------------------------


@njit
def mulberry32_next(state):
    """
    Advance a Mulberry32 state by one step.

    Returns (new_state, value) with value uniform in [0, 1).
    All arithmetic is kept on the low 32 bits so the sequence is identical
    in Python and inside numba kernels.
    """
    state = (state + 0x6D2B79F5) & MASK32
    t = ((state ^ (state >> 15)) * (state | 1)) & MASK32
    t = ((t + (((t ^ (t >> 7)) * (t | 61)) & MASK32)) & MASK32) ^ t
    return state, ((t ^ (t >> 14)) & MASK32) / 4294967296.0


@njit
def randn_from_state(state):
    """Box–Muller standard normal drawn from a Mulberry32 state."""
    u = 0.0
    while u == 0.0:
        state, u = mulberry32_next(state)
    v = 0.0
    while v == 0.0:
        state, v = mulberry32_next(state)
    return state, math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


class SeededRandom:
    """
    Callable uniform draw backed by its own Mulberry32 state.

    Each instance is independent; there is no module-level generator.
    """

    def __init__(self, seed: int):
        self.state = int(seed) & MASK32

    def __call__(self) -> float:
        self.state, value = mulberry32_next(self.state)
        return value


def randn(draw) -> float:
    """
    One standard normal sample from two uniform draws (Box–Muller).
    Zero draws are redrawn so log(0) never happens.
    """
    u = 0.0
    while u == 0.0:
        u = draw()
    v = 0.0
    while v == 0.0:
        v = draw()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


# ------------------------------------------------------------
# Seed derivation
# ------------------------------------------------------------


def derive_base_seed(inputs) -> int:
    """
    Mix the clamped inputs into a 32-bit base seed.
    Identical inputs always give the same seed.
    """
    level = parse_vol_level(inputs.vol_level)
    seed = (
        int(math.floor(inputs.risk_per_trade * 1e6))
        ^ int(math.floor(inputs.win_rate * 1e6))
        ^ int(math.floor(inputs.avg_r * 1e4))
        ^ SEED_CODES[level]
        ^ (int(inputs.paths) << 1)
    )
    return seed & MASK32


def path_seed(base_seed: int, path_index: int) -> int:
    return (int(base_seed) + int(path_index) * PATH_SEED_STRIDE) & MASK32
