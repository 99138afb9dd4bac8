from .dashboard import make_dashboard
from .panels.cone_panel import make_cone_compare_panels, make_equity_cone
from .panels.risk_panel import make_risk_compare_panels
from .utils.color_schemes import BAND_COLORS, TRACE_COLORS
from .dashboard_export import generate_dashboard

def plot_all(results, out_dir: str):
    """
    Entry point for plotting a finished experiment.
    """
    return generate_dashboard(results, out_dir)
