import math


def _clamp01(x: float) -> float:
    try:
        x = float(x)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(x):
        return 0.0
    return min(1.0, max(0.0, x))


def risk_of_ruin(win_rate: float, risk_per_trade: float) -> float:
    """
    Classical gambler's-ruin estimate for even-money bets:

        RoR = (q / p) ** (1 / f)

    with p the win rate, q = 1 - p and f the fraction risked per trade
    (so 1/f is the number of loss units in the account). No edge
    (p <= 0.5) means certain ruin; f <= 0 means none.
    """
    p = _clamp01(win_rate)
    q = 1.0 - p
    f = _clamp01(risk_per_trade)

    if f <= 0.0:
        return 0.0
    if p <= 0.5:
        return 1.0

    return _clamp01((q / p) ** (1.0 / f))
