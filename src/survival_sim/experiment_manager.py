import os
import yaml
from datetime import datetime

from .bands import RESOLUTION
from .data_structures import ExperimentResults, ScenarioRun, SimulationInputs
from .engine import lower_risk_inputs, simulate
from .regime import parse_vol_level
from .summary import generate_summary


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------


def now_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: str):
    if not os.path.exists(path):
        os.makedirs(path)


def discover_runs(root: str = "results"):
    if not os.path.exists(root):
        return []
    return sorted(d for d in os.listdir(root) if os.path.isdir(os.path.join(root, d)))


# ------------------------------------------------------------
# Scenario builders
# ------------------------------------------------------------


def build_inputs(cfg: dict) -> SimulationInputs:
    """
    Build SimulationInputs from a scenario config (snake_case or wire keys).
    Unknown vol levels raise ValueError here rather than at run time.
    """
    if "seed" in cfg:
        print("[WARN] 'seed' in scenario config is ignored. Seeds derive from the inputs.")

    inputs = SimulationInputs.from_dict(cfg)
    parse_vol_level(inputs.vol_level)
    return inputs


def build_scenarios(cfg: dict) -> dict:
    scenarios = cfg.get("scenarios")
    if not scenarios:
        raise ValueError("Config must define at least one scenario")

    built = {}
    for idx, scfg in enumerate(scenarios):
        name = str(scfg.get("name", f"scenario_{idx}"))
        if name in built:
            raise ValueError(f"Duplicate scenario name: {name}")
        built[name] = build_inputs(scfg)
    return built


# ------------------------------------------------------------
# Run scenarios
# ------------------------------------------------------------


def run_scenarios(
    scenarios: dict,
    resolution: int = RESOLUTION,
    parallel: bool = False,
    compare_lower: bool = True,
    lower_factor: float = 0.7,
) -> ExperimentResults:
    runs = {}
    for name, inputs in scenarios.items():
        clamped = inputs.clamped()
        if clamped != inputs:
            print(f"[WARN] Scenario '{name}' inputs clamped to {clamped.to_dict()}")

        print(f"\n=== Running scenario: {name} ===")
        result = simulate(clamped, resolution=resolution, parallel=parallel)
        print(f"DD50: {result.dd50_risk * 100:.2f}%  Horizon: {result.horizon_trades} trades")

        lower = lower_inputs = None
        if compare_lower:
            lower_inputs = lower_risk_inputs(clamped, lower_factor).clamped()
            lower = simulate(lower_inputs, resolution=resolution, parallel=parallel)
            print(
                f"DD50 at {lower_inputs.risk_per_trade * 100:.2f}% risk: "
                f"{lower.dd50_risk * 100:.2f}%"
            )

        runs[name] = ScenarioRun(
            name=name,
            inputs=clamped,
            result=result,
            lower=lower,
            lower_inputs=lower_inputs,
        )

    return ExperimentResults(
        runs=runs,
        resolution=resolution,
        metadata={"parallel": parallel, "lower_factor": lower_factor},
    )


# ------------------------------------------------------------
# Run experiment defined by YAML config
# ------------------------------------------------------------


def run_experiment_from_config(config_file: str, root: str = "results") -> str:
    with open(config_file, "r") as f:
        cfg = yaml.safe_load(f)

    exp_name = cfg.get("name", "experiment")
    rid = f"{now_id()}_{exp_name}"
    outdir = os.path.join(root, rid)
    ensure_dir(outdir)

    scenarios = build_scenarios(cfg)
    resolution = int(cfg.get("resolution", RESOLUTION))
    parallel = bool(cfg.get("parallel", False))
    compare_lower = bool(cfg.get("compare_lower", True))
    lower_factor = float(cfg.get("lower_factor", 0.7))

    print("\n=== Running Experiment ===")
    print(f"Config: {config_file}")
    print(f"Run ID: {rid}")
    print(f"Scenarios: {list(scenarios.keys())}")
    print(f"Resolution: {resolution}")
    print()

    results = run_scenarios(
        scenarios,
        resolution=resolution,
        parallel=parallel,
        compare_lower=compare_lower,
        lower_factor=lower_factor,
    )

    summary_path = generate_summary(results, outdir)
    print(f"Summary report → {summary_path}")

    from survival_sim.plotting.dashboard_export import generate_dashboard
    dashboard_path = generate_dashboard(results, outdir)
    print(f"Interactive dashboard → {dashboard_path}")

    with open(os.path.join(outdir, "config_used.yaml"), "w") as f:
        yaml.safe_dump(cfg, f)

    print("Done.")
    return outdir


# ------------------------------------------------------------
# List all runs
# ------------------------------------------------------------


def list_experiments(root: str = "results"):
    runs = discover_runs(root)
    print("\n=== Available Experiment Runs ===")
    if not runs:
        print("(none)")
        return
    for r in runs:
        print(" •", r)
