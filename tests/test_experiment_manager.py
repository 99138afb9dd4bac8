import os
import pytest
import yaml
from survival_sim.experiment_manager import (
    build_inputs,
    build_scenarios,
    discover_runs,
    run_experiment_from_config,
    run_scenarios,
)
from survival_sim.data_structures import SimulationInputs
from survival_sim.regime import VolLevel


def test_build_inputs_snake_case():
    cfg = {
        "name": "base",
        "risk_per_trade": 0.02,
        "win_rate": 0.55,
        "avg_r": 1.3,
        "vol_level": "high",
        "paths": 500,
    }
    inputs = build_inputs(cfg)
    assert inputs.risk_per_trade == 0.02
    assert inputs.win_rate == 0.55
    assert inputs.avg_r == 1.3
    assert inputs.paths == 500
    assert inputs.clamped().vol_level is VolLevel.HIGH


def test_build_inputs_wire_keys():
    cfg = {"riskPerTrade": 0.03, "winRate": 0.4, "avgR": 2.0, "volLevel": "LOW"}
    inputs = build_inputs(cfg)
    assert inputs.risk_per_trade == 0.03
    assert inputs.avg_r == 2.0
    # Defaults fill the gaps
    assert inputs.paths == 1500


def test_build_inputs_unknown_vol_raises():
    with pytest.raises(ValueError, match="Unknown volatility level"):
        build_inputs({"vol_level": "CALM"})


def test_build_inputs_warns_on_seed(capsys):
    build_inputs({"vol_level": "MED", "seed": 42})
    assert "[WARN]" in capsys.readouterr().out


def test_build_scenarios_validation():
    with pytest.raises(ValueError):
        build_scenarios({"scenarios": []})
    with pytest.raises(ValueError):
        build_scenarios({})
    with pytest.raises(ValueError, match="Duplicate"):
        build_scenarios({"scenarios": [{"name": "a"}, {"name": "a"}]})


def test_build_scenarios_default_names():
    built = build_scenarios({"scenarios": [{"risk_per_trade": 0.01}, {"name": "hot", "risk_per_trade": 0.05}]})
    assert list(built.keys()) == ["scenario_0", "hot"]


def test_run_scenarios_with_lower_companion():
    scenarios = {"base": SimulationInputs(0.02, 0.52, 1.15, "MED", 250)}
    results = run_scenarios(scenarios, compare_lower=True)

    run = results.get("base")
    assert run.inputs.vol_level is VolLevel.MED
    assert len(run.result.bands) == 121
    assert run.lower is not None
    assert run.lower_inputs.risk_per_trade == pytest.approx(0.014)
    assert run.lower.horizon_trades >= run.result.horizon_trades


def test_run_scenarios_warns_on_clamp(capsys):
    results = run_scenarios({"wild": SimulationInputs(0.5, 0.52, 1.15, "MED", 250)}, compare_lower=False)
    assert "[WARN]" in capsys.readouterr().out
    run = results.get("wild")
    assert run.inputs.risk_per_trade == 0.10
    assert run.lower is None


def test_run_experiment_from_config(tmp_path):
    cfg = {
        "name": "smoke",
        "resolution": 61,
        "scenarios": [
            {"name": "base", "risk_per_trade": 0.01, "win_rate": 0.52, "avg_r": 1.15, "vol_level": "MED", "paths": 250},
            {"name": "hot", "risk_per_trade": 0.05, "win_rate": 0.52, "avg_r": 1.15, "vol_level": "HIGH", "paths": 250},
        ],
    }
    config_path = tmp_path / "exp.yaml"
    config_path.write_text(yaml.safe_dump(cfg))

    root = tmp_path / "results"
    outdir = run_experiment_from_config(str(config_path), root=str(root))

    assert os.path.basename(outdir).endswith("_smoke")
    assert os.path.exists(os.path.join(outdir, "summary.md"))
    assert os.path.exists(os.path.join(outdir, "dashboard.html"))
    assert os.path.exists(os.path.join(outdir, "cone_hot.html"))
    assert os.path.exists(os.path.join(outdir, "config_used.yaml"))
    assert discover_runs(str(root)) == [os.path.basename(outdir)]
