import os
from ..data_structures import ExperimentResults
from .dashboard import make_dashboard
from .panels.cone_panel import make_equity_cone


def generate_dashboard(sim: ExperimentResults, out_dir: str) -> str:
    """
    Generates an interactive Plotly dashboard for all scenarios.
    Saves:
        - dashboard.html        (comparison views)
        - cone_<scenario>.html  (one detailed cone per scenario)
    Returns:
        Path to dashboard.html
    """
    os.makedirs(out_dir, exist_ok=True)

    fig = make_dashboard(sim)
    dashboard_path = os.path.join(out_dir, "dashboard.html")
    fig.write_html(dashboard_path, include_plotlyjs="cdn")

    for name, run in sim.runs.items():
        cone = make_equity_cone(run.result, name)
        cone.write_html(os.path.join(out_dir, f"cone_{name}.html"), include_plotlyjs="cdn")

    return dashboard_path
