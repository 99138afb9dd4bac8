import plotly.colors as pc

# Cone fills, outer to inner
BAND_COLORS = {
    "outer": "rgba(31, 119, 180, 0.15)",   # p05-p95
    "inner": "rgba(31, 119, 180, 0.35)",   # p25-p75
}

# Scenario Colors (Cyclic)
SCENARIO_PALETTE = pc.qualitative.Plotly

def get_scenario_color(idx: int) -> str:
    return SCENARIO_PALETTE[idx % len(SCENARIO_PALETTE)]

# Trace Colors
TRACE_COLORS = {
    "median": "#1f77b4",   # Blue
    "start": "#7f7f7f",    # Gray
    "dd50": "#d62728",     # Red
    "lower": "#2ca02c",    # Green
}
