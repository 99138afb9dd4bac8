import math
from dataclasses import dataclass, field, replace
from typing import Dict, Any, List, Optional

import numpy as np

from .regime import VolLevel, parse_vol_level


# ----------------------------------------------------------------------
# Input bounds
# ----------------------------------------------------------------------

RISK_BOUNDS = (0.0005, 0.10)
WIN_RATE_BOUNDS = (0.01, 0.99)
AVG_R_BOUNDS = (0.1, 10.0)
PATH_BOUNDS = (250, 10_000)

DEFAULT_RISK = 0.01
DEFAULT_WIN_RATE = 0.5
DEFAULT_AVG_R = 1.0
DEFAULT_PATHS = 1500

BAND_KEYS = ("p05", "p25", "p50", "p75", "p95")

# snake_case field -> wire name
_WIRE_NAMES = {
    "risk_per_trade": "riskPerTrade",
    "win_rate": "winRate",
    "avg_r": "avgR",
    "vol_level": "volLevel",
    "paths": "paths",
}


def _clamp(x, lo, hi):
    return min(hi, max(lo, x))


def _finite_or(value, default: float) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        return default
    return x if math.isfinite(x) else default


# ----------------------------------------------------------------------
# Simulation inputs
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationInputs:
    """
    Position-sizing assumptions for one simulation request.

    Values are stored as given; `clamped()` produces the sanitised copy the
    engine actually runs on.
    """

    risk_per_trade: float = DEFAULT_RISK
    win_rate: float = DEFAULT_WIN_RATE
    avg_r: float = DEFAULT_AVG_R
    vol_level: Any = VolLevel.MED
    paths: Any = DEFAULT_PATHS

    def clamped(self) -> "SimulationInputs":
        """
        Sanitised copy: non-finite numbers fall back to defaults, everything
        is clamped into range, vol_level is parsed (ValueError if unknown).
        """
        paths = _finite_or(self.paths, DEFAULT_PATHS) or DEFAULT_PATHS
        return SimulationInputs(
            risk_per_trade=_clamp(
                _finite_or(self.risk_per_trade, DEFAULT_RISK), *RISK_BOUNDS
            ),
            win_rate=_clamp(
                _finite_or(self.win_rate, DEFAULT_WIN_RATE), *WIN_RATE_BOUNDS
            ),
            avg_r=_clamp(_finite_or(self.avg_r, DEFAULT_AVG_R), *AVG_R_BOUNDS),
            vol_level=parse_vol_level(self.vol_level),
            paths=int(_clamp(math.floor(paths), *PATH_BOUNDS)),
        )

    def with_risk(self, risk_per_trade: float) -> "SimulationInputs":
        return replace(self, risk_per_trade=risk_per_trade)

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SimulationInputs":
        """Accepts wire (camelCase) or snake_case keys."""
        kwargs = {}
        for name, wire in _WIRE_NAMES.items():
            if name in cfg:
                kwargs[name] = cfg[name]
            elif wire in cfg:
                kwargs[name] = cfg[wire]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        level = self.vol_level
        return {
            "riskPerTrade": self.risk_per_trade,
            "winRate": self.win_rate,
            "avgR": self.avg_r,
            "volLevel": level.value if isinstance(level, VolLevel) else level,
            "paths": self.paths,
        }


# ----------------------------------------------------------------------
# Engine outputs
# ----------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class PercentileBands:
    """
    Equity-multiplier percentiles over simulated time.

    Each array has the same length: horizon+1 when raw, the resample
    resolution once resampled. Arrays are read-only.
    """

    p05: np.ndarray
    p25: np.ndarray
    p50: np.ndarray
    p75: np.ndarray
    p95: np.ndarray

    def __post_init__(self):
        for key in BAND_KEYS:
            arr = np.array(getattr(self, key), dtype=np.float64)
            arr.flags.writeable = False
            object.__setattr__(self, key, arr)

    def __len__(self) -> int:
        return len(self.p50)

    def as_tuple(self):
        return tuple(getattr(self, k) for k in BAND_KEYS)

    def to_dict(self) -> Dict[str, List[float]]:
        return {k: getattr(self, k).tolist() for k in BAND_KEYS}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PercentileBands":
        return cls(**{k: d[k] for k in BAND_KEYS})


@dataclass(frozen=True, eq=False)
class PathSimulation:
    """
    Raw output of the path orchestrator for one invocation.

    equity: [horizon+1, paths]
    hits:   [paths] boolean, True if the path ever reached a 50% drawdown
    """

    equity: np.ndarray
    hits: np.ndarray
    horizon: int

    @property
    def num_paths(self) -> int:
        return self.equity.shape[1]

    @property
    def dd50_risk(self) -> float:
        if self.hits.size == 0:
            return 0.0
        return float(np.count_nonzero(self.hits)) / self.hits.size


@dataclass(frozen=True)
class SimulationResult:
    """Immutable result of one simulation request."""

    dd50_risk: float
    horizon_trades: int
    bands: PercentileBands
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dd50Risk": self.dd50_risk,
            "horizonTrades": self.horizon_trades,
            "bands": self.bands.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SimulationResult":
        return cls(
            dd50_risk=float(d["dd50Risk"]),
            horizon_trades=int(d["horizonTrades"]),
            bands=PercentileBands.from_dict(d["bands"]),
        )


# ----------------------------------------------------------------------
# Multi-scenario results
# ----------------------------------------------------------------------


@dataclass
class ScenarioRun:
    """One named scenario: clamped inputs, its result, optional lower-risk run."""

    name: str
    inputs: SimulationInputs
    result: SimulationResult
    lower: Optional[SimulationResult] = None
    lower_inputs: Optional[SimulationInputs] = None


@dataclass
class ExperimentResults:
    """
    Container for every scenario of one experiment run.
    """

    runs: Dict[str, ScenarioRun]
    resolution: int
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> ScenarioRun:
        """Convenience: results.get("base") instead of results.runs["base"]."""
        return self.runs[name]
