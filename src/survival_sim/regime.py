# survival_sim/regime.py
from enum import Enum


class VolLevel(str, Enum):
    """Qualitative volatility regime."""

    LOW = "LOW"
    MED = "MED"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


# Outcome-dispersion multiplier per regime (not price volatility).
DISPERSION = {
    VolLevel.LOW: 0.55,
    VolLevel.MED: 0.85,
    VolLevel.HIGH: 1.15,
    VolLevel.EXTREME: 1.55,
}

# Per-regime term mixed into the base seed.
SEED_CODES = {
    VolLevel.LOW: 11,
    VolLevel.MED: 22,
    VolLevel.HIGH: 33,
    VolLevel.EXTREME: 44,
}


def parse_vol_level(value) -> VolLevel:
    if isinstance(value, VolLevel):
        return value
    try:
        return VolLevel(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown volatility level: {value!r}") from None


def dispersion(level) -> float:
    return DISPERSION[parse_vol_level(level)]
