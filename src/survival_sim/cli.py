import argparse
import json

from .bands import RESOLUTION
from .data_structures import DEFAULT_PATHS, SimulationInputs
from .experiment_manager import list_experiments, run_experiment_from_config
from .worker import RiskWorkerClient


def simulate_once(inputs: SimulationInputs, resolution: int = RESOLUTION, timeout: float = None) -> dict:
    """
    Send one request through the worker boundary and return the response
    in wire form.
    """
    client = RiskWorkerClient()
    try:
        request_id = client.run(inputs, resolution=resolution)
        if not client.wait(timeout):
            return {"id": request_id, "ok": False, "error": "Timed out"}
        if client.error is not None:
            return {"id": request_id, "ok": False, "error": client.error}
        return {"id": request_id, "ok": True, "result": client.result.to_dict()}
    finally:
        client.close()


def main():
    parser = argparse.ArgumentParser(description="survival-sim drawdown risk calculator")
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------------
    # simulate
    # ------------------------------------------------------------------
    p_sim = sub.add_parser("simulate", help="Run one simulation and print the JSON response")
    p_sim.add_argument("--risk", type=float, default=0.01, help="Fraction of equity risked per trade")
    p_sim.add_argument("--win-rate", type=float, default=0.5, help="Probability a trade wins")
    p_sim.add_argument("--avg-r", type=float, default=1.0, help="Average win size in R")
    p_sim.add_argument("--vol", type=str, default="MED", help="LOW | MED | HIGH | EXTREME")
    p_sim.add_argument("--paths", type=int, default=DEFAULT_PATHS)
    p_sim.add_argument("--resolution", type=int, default=RESOLUTION)
    p_sim.add_argument("--timeout", type=float, default=None, help="Seconds to wait for the worker")

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------
    p_run = sub.add_parser("run", help="Run an experiment from a YAML config")
    p_run.add_argument("config", type=str, help="Path to .yaml config file")

    # ------------------------------------------------------------------
    # list
    # ------------------------------------------------------------------
    sub.add_parser("list", help="List previous experiment runs")

    args = parser.parse_args()

    if args.cmd == "simulate":
        inputs = SimulationInputs(
            risk_per_trade=args.risk,
            win_rate=args.win_rate,
            avg_r=args.avg_r,
            vol_level=args.vol,
            paths=args.paths,
        )
        response = simulate_once(inputs, resolution=args.resolution, timeout=args.timeout)
        print(json.dumps(response, indent=2))

    elif args.cmd == "run":
        run_experiment_from_config(args.config)

    elif args.cmd == "list":
        list_experiments()

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
