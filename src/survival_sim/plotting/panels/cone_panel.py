import plotly.graph_objects as go
from ...data_structures import ScenarioRun, SimulationResult
from ..utils.transforms import trade_axis
from ..utils.color_schemes import BAND_COLORS, TRACE_COLORS
from ..layout import make_stacked_subplots, apply_standard_layout


def _cone_traces(result: SimulationResult, name: str, legendgroup: str = None) -> list:
    """
    Fan chart traces: p05-p95 fill, p25-p75 fill, median line.
    Each fill is drawn as an invisible upper edge followed by a 'tonexty' lower edge.
    """
    x = trade_axis(result)
    b = result.bands
    group = legendgroup or name
    return [
        go.Scatter(x=x, y=b.p95, line=dict(width=0), showlegend=False, hoverinfo="skip", legendgroup=group),
        go.Scatter(x=x, y=b.p05, fill="tonexty", fillcolor=BAND_COLORS["outer"], line=dict(width=0),
                   name=f"{name} 5-95%", legendgroup=group),
        go.Scatter(x=x, y=b.p75, line=dict(width=0), showlegend=False, hoverinfo="skip", legendgroup=group),
        go.Scatter(x=x, y=b.p25, fill="tonexty", fillcolor=BAND_COLORS["inner"], line=dict(width=0),
                   name=f"{name} 25-75%", legendgroup=group),
        go.Scatter(x=x, y=b.p50, line=dict(color=TRACE_COLORS["median"], width=2),
                   name=f"{name} Median", legendgroup=group),
    ]


def make_equity_cone(result: SimulationResult, name: str = "Equity") -> go.Figure:
    """
    Detailed single-scenario cone.
    """
    fig = go.Figure()
    if len(result.bands) == 0:
        return fig

    for tr in _cone_traces(result, name):
        fig.add_trace(tr)

    fig.add_hline(y=1.0, line=dict(color=TRACE_COLORS["start"], dash="dot", width=1))
    fig.add_hline(y=0.5, line=dict(color=TRACE_COLORS["dd50"], dash="dash", width=1))

    apply_standard_layout(fig, f"Equity Cone: {name} (DD50 {result.dd50_risk * 100:.1f}%)")
    fig.update_xaxes(title_text="Trades")
    return fig


def make_cone_compare_panels(runs: dict[str, ScenarioRun]) -> go.Figure:
    """
    One cone per scenario, stacked.
    """
    names = list(runs.keys())
    titles = [
        f"{n}: DD50 {runs[n].result.dd50_risk * 100:.1f}%, {runs[n].result.horizon_trades} trades"
        for n in names
    ]
    fig = make_stacked_subplots(len(names), titles)

    for idx, (name, run) in enumerate(runs.items()):
        row = idx + 1

        if len(run.result.bands) == 0:
            fig.add_annotation(text=f"{name}: No band data", showarrow=False, row=row, col=1,
                               font=dict(color="red"))
            continue

        for tr in _cone_traces(run.result, name):
            fig.add_trace(tr, row=row, col=1)

        # Starting equity reference
        fig.add_hline(y=1.0, line=dict(color=TRACE_COLORS["start"], dash="dot", width=1), row=row, col=1)

    apply_standard_layout(fig, "Equity Cone Comparison")
    return fig
