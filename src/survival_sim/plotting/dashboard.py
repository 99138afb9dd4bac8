import plotly.graph_objects as go
from typing import Dict

from ..data_structures import ExperimentResults
from .panels.cone_panel import make_cone_compare_panels
from .panels.risk_panel import make_risk_compare_panels


def make_dashboard(results: ExperimentResults) -> go.Figure:
    """
    Assemble an interactive Plotly dashboard with two views switched via
    dropdown:
      - Equity Cones  (one stacked row per scenario, default)
      - Drawdown Risk (DD50 bars with intervals)

    The cone panel is the layout template; the risk panel's traces are
    appended invisible and toggled by the dropdown.
    """
    n_runs = len(results.runs)

    panel_figs: Dict[str, go.Figure] = {
        "Equity Cones": make_cone_compare_panels(results.runs),
        "Drawdown Risk": make_risk_compare_panels(results.runs),
    }

    # ------------------------------------------------------------------
    # 1. Master figure from the cone panel
    # ------------------------------------------------------------------
    base_fig = panel_figs["Equity Cones"]
    master_fig = go.Figure(base_fig)

    views = [("Equity Cones", 0, len(base_fig.data), base_fig.layout)]
    current_idx = len(base_fig.data)

    # ------------------------------------------------------------------
    # 2. Append remaining panels (invisible)
    # ------------------------------------------------------------------
    for name in ["Drawdown Risk"]:
        fig = panel_figs[name]
        n = len(fig.data)
        if n == 0:
            continue
        start = current_idx
        for tr in fig.data:
            tr.visible = False
            master_fig.add_trace(tr)
        current_idx += n
        views.append((name, start, current_idx, fig.layout))

    total_traces = len(master_fig.data)

    # ------------------------------------------------------------------
    # 3. Dropdown: one button per view
    # ------------------------------------------------------------------
    buttons = []
    for label, start, end, layout in views:
        visible_mask = [start <= i < end for i in range(total_traces)]
        title_text = layout.title.text if layout.title.text else label
        buttons.append(
            dict(
                label=label,
                method="update",
                args=[{"visible": visible_mask}, {"title": title_text}],
            )
        )

    master_fig.update_layout(
        updatemenus=[
            dict(
                active=0,
                buttons=buttons,
                direction="down",
                x=0.0,
                xanchor="left",
                y=1.15,
                yanchor="top",
            )
        ],
        title=f"Survivability Dashboard ({n_runs} scenarios)",
    )

    return master_fig
