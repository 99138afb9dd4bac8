import plotly.graph_objects as go
from plotly.subplots import make_subplots

def make_stacked_subplots(
    num_rows: int,
    row_titles: list[str],
    shared_x: bool = False,
    vertical_spacing: float = 0.06,
    height_per_row: int = 280
) -> go.Figure:
    """
    Creates a vertical stack of subplots, one per scenario.
    Rows do not share x: each scenario has its own horizon.
    """
    fig = make_subplots(
        rows=max(1, num_rows),
        cols=1,
        shared_xaxes=shared_x,
        vertical_spacing=vertical_spacing if num_rows > 1 else 0.0,
        subplot_titles=row_titles
    )
    fig.update_layout(height=max(1, num_rows) * height_per_row, showlegend=True)
    return fig

def apply_standard_layout(fig: go.Figure, title: str, y_title: str = "Equity (x start)"):
    fig.update_layout(
        title=title,
        template="plotly_white",
        margin=dict(l=50, r=50, t=80, b=50),
        hovermode="x unified"
    )
    fig.update_yaxes(title_text=y_title)
