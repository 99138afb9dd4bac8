import json
import sys
import pytest
from survival_sim import cli
from survival_sim.data_structures import SimulationInputs


def test_simulate_once_wire_response():
    inputs = SimulationInputs(0.02, 0.55, 1.2, "LOW", 250)
    response = cli.simulate_once(inputs, resolution=31, timeout=300)

    assert response["ok"]
    assert isinstance(response["id"], str)
    result = response["result"]
    assert set(result) == {"dd50Risk", "horizonTrades", "bands"}
    assert len(result["bands"]["p50"]) == 31
    assert result["bands"]["p50"][0] == pytest.approx(1.0)


def test_simulate_once_reports_bad_vol():
    response = cli.simulate_once(SimulationInputs(vol_level="CALM", paths=250), timeout=300)
    assert not response["ok"]
    assert "Unknown volatility level" in response["error"]


def test_main_simulate_prints_json(monkeypatch, capsys):
    captured = {}

    def fake_simulate_once(inputs, resolution, timeout):
        captured["inputs"] = inputs
        return {"id": "abc", "ok": False, "error": "stub"}

    monkeypatch.setattr(cli, "simulate_once", fake_simulate_once)
    monkeypatch.setattr(sys, "argv", ["survival-sim", "simulate", "--risk", "0.02", "--vol", "high"])
    cli.main()

    assert json.loads(capsys.readouterr().out) == {"id": "abc", "ok": False, "error": "stub"}
    assert captured["inputs"].risk_per_trade == 0.02
    assert captured["inputs"].vol_level == "high"
