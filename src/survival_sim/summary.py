import os
from typing import Tuple

import numpy as np
import pandas as pd
from scipy.stats import beta

from .bands import cone_width
from .data_structures import BAND_KEYS, ExperimentResults, ScenarioRun, SimulationResult
from .ruin import risk_of_ruin


# ------------------------------------------------------------
# Formatting helpers
# ------------------------------------------------------------


def _format_pct(val: float) -> str:
    return f"{val * 100:.2f}%"


def _format_float(val: float) -> str:
    return f"{val:.4f}"


def _format_mult(val: float) -> str:
    return f"{val:.3f}x"


# ------------------------------------------------------------
# Statistics helpers
# ------------------------------------------------------------


def dd50_interval(dd50_risk: float, num_paths: int, conf: float = 0.95) -> Tuple[float, float]:
    """
    Clopper–Pearson interval for the drawdown probability, treating each
    path as one Bernoulli trial.
    """
    if num_paths <= 0:
        return 0.0, 1.0
    hits = int(round(dd50_risk * num_paths))
    alpha = 1.0 - conf
    lo = 0.0 if hits == 0 else float(beta.ppf(alpha / 2, hits, num_paths - hits + 1))
    hi = (
        1.0
        if hits == num_paths
        else float(beta.ppf(1 - alpha / 2, hits + 1, num_paths - hits))
    )
    return lo, hi


def bands_frame(result: SimulationResult) -> pd.DataFrame:
    """
    Bands as a DataFrame indexed by (fractional) trade number.
    """
    n = len(result.bands)
    if n > 1:
        trades = np.linspace(0.0, float(result.horizon_trades), n)
    else:
        trades = np.zeros(n)
    df = pd.DataFrame({k: getattr(result.bands, k) for k in BAND_KEYS}, index=trades)
    df.index.name = "trade"
    return df


def terminal_percentiles(result: SimulationResult) -> dict:
    df = bands_frame(result)
    if df.empty:
        return {k: 1.0 for k in BAND_KEYS}
    last = df.iloc[-1]
    return {k: float(last[k]) for k in BAND_KEYS}


# ------------------------------------------------------------
# Main summary generation
# ------------------------------------------------------------


def generate_summary(sim: ExperimentResults, out_dir: str) -> str:
    """
    Writes a purely quantitative markdown summary of every scenario and
    returns its path.
    """
    lines = []
    runs = list(sim.runs.values())
    names = [r.name for r in runs]

    # --- Header ---
    lines.append(f"# Survivability Summary Report: {os.path.basename(os.path.normpath(out_dir))}\n")
    lines.append(f"**Timestamp:** {pd.Timestamp.now()}\n")
    lines.append(f"**Scenarios:** {', '.join(names)}\n")

    # --- 1. Scenario Parameters ---
    lines.append("## 1. Scenario Parameters\n")
    lines.append("| Scenario | Risk / Trade | Win Rate | Avg R | Vol Level | Paths |")
    lines.append("| :--- | :--- | :--- | :--- | :--- | :--- |")
    for r in runs:
        i = r.inputs
        lines.append(
            f"| {r.name} | {_format_pct(i.risk_per_trade)} | {_format_pct(i.win_rate)} "
            f"| {i.avg_r:.2f} | {i.vol_level.value} | {i.paths:,} |"
        )
    lines.append(f"\nResolution: {sim.resolution} points per band\n")

    # --- 2. Survivability Scorecard ---
    lines.append("## 2. Survivability Scorecard\n")
    lines.append("| Metric | " + " | ".join(names) + " |")
    lines.append("| :--- | " + " | ".join([":---"] * len(runs)) + " |")

    def get_metric_row(metric_name: str, func) -> str:
        vals = [func(r) for r in runs]
        return f"| {metric_name} | " + " | ".join(str(v) for v in vals) + " |"

    lines.append(get_metric_row("50% Drawdown Risk", lambda r: _format_pct(r.result.dd50_risk)))

    def calc_interval(r: ScenarioRun) -> str:
        lo, hi = dd50_interval(r.result.dd50_risk, r.inputs.paths)
        return f"{_format_pct(lo)} – {_format_pct(hi)}"

    lines.append(get_metric_row("95% Interval", calc_interval))
    lines.append(get_metric_row("Horizon (trades)", lambda r: r.result.horizon_trades))
    lines.append(
        get_metric_row(
            "Analytic Risk of Ruin",
            lambda r: _format_pct(risk_of_ruin(r.inputs.win_rate, r.inputs.risk_per_trade)),
        )
    )

    def calc_lower(r: ScenarioRun) -> str:
        if r.lower is None:
            return "N/A"
        return f"{_format_pct(r.lower.dd50_risk)} @ {_format_pct(r.lower_inputs.risk_per_trade)}"

    lines.append(get_metric_row("Lower-Risk DD50", calc_lower))
    lines.append(get_metric_row("Cone Width (p95-p05)", lambda r: _format_float(cone_width(r.result.bands))))
    lines.append("\n")

    # --- 3. Terminal Equity Distribution ---
    lines.append("## 3. Terminal Equity Distribution\n")
    lines.append("| Percentile | " + " | ".join(names) + " |")
    lines.append("| :--- | " + " | ".join([":---"] * len(runs)) + " |")
    terminals = {r.name: terminal_percentiles(r.result) for r in runs}
    for key in BAND_KEYS:
        row = [_format_mult(terminals[n][key]) for n in names]
        lines.append(f"| {key} | " + " | ".join(row) + " |")
    lines.append("\n")

    # --- 4. Median Path Checkpoints ---
    lines.append("## 4. Median Equity Checkpoints\n")
    lines.append("| Progress | " + " | ".join(names) + " |")
    lines.append("| :--- | " + " | ".join([":---"] * len(runs)) + " |")
    frames = {r.name: bands_frame(r.result) for r in runs}
    for frac in (0.25, 0.5, 0.75, 1.0):
        row = []
        for n in names:
            df = frames[n]
            if df.empty:
                row.append("N/A")
                continue
            idx = int(round(frac * (len(df) - 1)))
            row.append(_format_mult(float(df["p50"].iloc[idx])))
        lines.append(f"| {int(frac * 100)}% | " + " | ".join(row) + " |")
    lines.append("\n")

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, "summary.md")
    with open(path, "w") as f:
        f.write("\n".join(lines))
    return path
