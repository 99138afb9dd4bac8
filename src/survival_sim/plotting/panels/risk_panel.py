import plotly.graph_objects as go
from ...data_structures import ScenarioRun
from ..utils.transforms import dd50_error_bars
from ..utils.color_schemes import TRACE_COLORS
from ..layout import apply_standard_layout


def make_risk_compare_panels(runs: dict[str, ScenarioRun]) -> go.Figure:
    """
    DD50 probability per scenario with 95% intervals; lower-risk companion
    runs (when present) as a second bar group.
    """
    names = list(runs.keys())
    fig = go.Figure()

    dd50 = [runs[n].result.dd50_risk for n in names]
    minus, plus = [], []
    for n in names:
        m, p = dd50_error_bars(runs[n].result, runs[n].inputs.paths)
        minus.append(m)
        plus.append(p)

    fig.add_trace(
        go.Bar(
            x=names,
            y=dd50,
            name="DD50",
            marker_color=TRACE_COLORS["dd50"],
            error_y=dict(type="data", symmetric=False, array=plus, arrayminus=minus),
        )
    )

    lower_names = [n for n in names if runs[n].lower is not None]
    if lower_names:
        fig.add_trace(
            go.Bar(
                x=lower_names,
                y=[runs[n].lower.dd50_risk for n in lower_names],
                name="DD50 (lower risk)",
                marker_color=TRACE_COLORS["lower"],
            )
        )

    apply_standard_layout(fig, "Probability of 50% Drawdown", y_title="Probability")
    fig.update_layout(barmode="group")
    fig.update_yaxes(tickformat=".0%", rangemode="tozero")
    return fig
