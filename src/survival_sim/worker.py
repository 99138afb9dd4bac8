# survival_sim/worker.py
"""
Execution boundary: runs simulations off the caller's thread and answers
every request with exactly one response carrying the request id.

    request  -> { id, kind: "simulate", inputs }
    response -> { id, ok: True, result } | { id, ok: False, error }
"""
from __future__ import annotations

import threading
import uuid
import multiprocessing
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .bands import RESOLUTION
from .data_structures import SimulationInputs, SimulationResult
from .engine import simulate

WORKER_CRASHED = "Worker crashed"
UNKNOWN_REQUEST = "Unknown request"


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True)
class SimulationRequest:
    id: str
    inputs: SimulationInputs
    kind: str = "simulate"
    resolution: int = RESOLUTION

    @classmethod
    def from_dict(cls, msg: Dict[str, Any]) -> "SimulationRequest":
        return cls(
            id=str(msg.get("id", "")),
            kind=msg.get("kind", "simulate"),
            inputs=SimulationInputs.from_dict(msg.get("inputs") or {}),
        )


@dataclass(frozen=True)
class SimulationResponse:
    id: str
    ok: bool
    result: Optional[SimulationResult] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, request_id: str, result: SimulationResult) -> "SimulationResponse":
        return cls(id=request_id, ok=True, result=result)

    @classmethod
    def failure(cls, request_id: str, error: str) -> "SimulationResponse":
        return cls(id=request_id, ok=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"id": self.id, "ok": True, "result": self.result.to_dict()}
        return {"id": self.id, "ok": False, "error": self.error}


# ------------------------------------------------------------
# Worker-side handler
# ------------------------------------------------------------


def handle_request(request: SimulationRequest) -> SimulationResponse:
    """
    Run one request to completion. Never raises: every failure becomes a
    tagged error response.
    """
    request_id = getattr(request, "id", "")
    try:
        if request.kind != "simulate":
            return SimulationResponse.failure(request_id, UNKNOWN_REQUEST)
        inputs = request.inputs
        if isinstance(inputs, dict):
            inputs = SimulationInputs.from_dict(inputs)
        result = simulate(inputs, resolution=request.resolution)
        return SimulationResponse.success(request_id, result)
    except Exception as exc:
        return SimulationResponse.failure(request_id, str(exc) or "Worker error")


# ------------------------------------------------------------
# Isolated execution context
# ------------------------------------------------------------


class SimulationWorker:
    """
    Single-slot executor for `handle_request`.

    Defaults to a one-process pool started with "spawn", so the simulation
    never shares memory with the caller; any `concurrent.futures.Executor`
    can be injected.
    """

    def __init__(self, executor: Optional[Executor] = None):
        self._executor = executor or ProcessPoolExecutor(
            max_workers=1, mp_context=multiprocessing.get_context("spawn")
        )

    def submit(self, request: SimulationRequest) -> Future:
        """
        Returns a Future that always resolves to a SimulationResponse
        tagged with `request.id`, even if the executor cannot start or dies.
        """
        outer: Future = Future()

        try:
            inner = self._executor.submit(handle_request, request)
        except Exception:
            outer.set_result(SimulationResponse.failure(request.id, WORKER_CRASHED))
            return outer

        def _relay(f: Future):
            try:
                outer.set_result(f.result())
            except Exception:
                outer.set_result(
                    SimulationResponse.failure(request.id, WORKER_CRASHED)
                )

        inner.add_done_callback(_relay)
        return outer

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.shutdown()


# ------------------------------------------------------------
# Caller side: last request wins
# ------------------------------------------------------------


class RiskWorkerClient:
    """
    Issues requests to a SimulationWorker and keeps only the answer to the
    most recently issued one. Older responses are dropped on arrival.

    On failure the last good `result` is kept and `error` is set.
    """

    def __init__(
        self,
        worker: Optional[SimulationWorker] = None,
        on_update: Optional[Callable[["RiskWorkerClient"], None]] = None,
    ):
        self.worker = worker or SimulationWorker()
        self.on_update = on_update

        self.result: Optional[SimulationResult] = None
        self.error: Optional[str] = None
        self.is_computing = False

        self._pending_id: Optional[str] = None
        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)

    @property
    def pending_id(self) -> Optional[str]:
        return self._pending_id

    def run(self, inputs: SimulationInputs, resolution: int = RESOLUTION) -> str:
        request = SimulationRequest(
            id=new_request_id(), inputs=inputs, resolution=resolution
        )
        with self._lock:
            self._pending_id = request.id
            self.is_computing = True
            self.error = None

        future = self.worker.submit(request)
        future.add_done_callback(lambda f: self.receive(f.result()))
        return request.id

    def receive(self, response: SimulationResponse) -> bool:
        """Apply a response; returns False if it was stale and ignored."""
        with self._lock:
            if self._pending_id is None or response.id != self._pending_id:
                return False

            self.is_computing = False
            if response.ok:
                self.error = None
                self.result = response.result
            else:
                self.error = response.error
            self._settled.notify_all()

        if self.on_update is not None:
            self.on_update(self)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest request settles. False on timeout."""
        with self._lock:
            return self._settled.wait_for(lambda: not self.is_computing, timeout)

    def close(self):
        with self._lock:
            self._pending_id = None
            self.is_computing = False
            self._settled.notify_all()
        self.worker.shutdown(wait=False)
