import pytest
from survival_sim.regime import VolLevel, dispersion, parse_vol_level
from survival_sim.horizon import (
    MAX_HORIZON,
    MIN_HORIZON,
    compute_horizon,
    risk_factor,
    vol_factor,
)

LEVELS = [VolLevel.LOW, VolLevel.MED, VolLevel.HIGH, VolLevel.EXTREME]


def test_dispersion_values():
    assert dispersion(VolLevel.LOW) == 0.55
    assert dispersion(VolLevel.MED) == 0.85
    assert dispersion(VolLevel.HIGH) == 1.15
    assert dispersion(VolLevel.EXTREME) == 1.55


def test_dispersion_total_over_enum():
    for level in VolLevel:
        assert dispersion(level) > 0


def test_parse_vol_level_strings():
    assert parse_vol_level("LOW") is VolLevel.LOW
    assert parse_vol_level(" med ") is VolLevel.MED
    assert parse_vol_level(VolLevel.EXTREME) is VolLevel.EXTREME


def test_parse_vol_level_unknown():
    with pytest.raises(ValueError, match="Unknown volatility level"):
        parse_vol_level("MEDIUM")
    with pytest.raises(ValueError):
        dispersion(None)


def test_factors():
    assert vol_factor(VolLevel.LOW) == pytest.approx(1.0)
    assert vol_factor(VolLevel.EXTREME) == pytest.approx(1.0 / 1.9)
    assert risk_factor(0.01) == pytest.approx(1.0 / 1.18)
    assert risk_factor(0.05) == pytest.approx(1.0 / 1.9)
    # risk is clamped before the factor is applied
    assert risk_factor(1.0) == risk_factor(0.10)
    assert risk_factor(0.0) == risk_factor(0.0005)


def test_compute_horizon_reference_points():
    # 220 / 1.27 / 1.18 = 146.8
    assert compute_horizon(0.01, VolLevel.MED) == 147
    # 220 / 1.009 = 218.03
    assert compute_horizon(0.0005, VolLevel.LOW) == 218
    # 220 / 1.9 / 2.8 = 41.35
    assert compute_horizon(0.10, VolLevel.EXTREME) == 41


def test_compute_horizon_bounds():
    for level in LEVELS:
        for risk in [0.0, 0.0005, 0.001, 0.01, 0.05, 0.1, 0.5]:
            h = compute_horizon(risk, level)
            assert isinstance(h, int)
            assert MIN_HORIZON <= h <= MAX_HORIZON


def test_horizon_monotone_in_risk():
    risks = [0.0005 + i * 0.0005 for i in range(200)]
    for level in LEVELS:
        hs = [compute_horizon(r, level) for r in risks]
        assert all(a >= b for a, b in zip(hs, hs[1:]))


def test_horizon_monotone_in_volatility():
    for risk in [0.0005, 0.005, 0.01, 0.02, 0.05, 0.1]:
        hs = [compute_horizon(risk, level) for level in LEVELS]
        assert all(a >= b for a, b in zip(hs, hs[1:]))
