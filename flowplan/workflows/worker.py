"""Message boundary for running annual plans off the caller's thread.

Input message:
    {"type": "start", "payload": {...camelCase parameters...}}

Output message:
    {"type": "complete", "results": [...]}
    {"type": "error", "message": "...", "results": [...]}   (results optional)
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Dict, Mapping, Optional
import logging

from flowplan.exceptions import PlanningError
from flowplan.optimization.shipment_problem import ShipmentSolver
from flowplan.parsers.payload_parser import parse_payload
from .annual_plan import PlanConfig, run_annual_plan

logger = logging.getLogger(__name__)


def handle_message(
    message: Mapping[str, Any],
    config: Optional[PlanConfig] = None,
    solver: Optional[ShipmentSolver] = None,
) -> Optional[Dict[str, Any]]:
    """
    Run one planning request.

    Args:
        message: Input message
        config: Run configuration
        solver: Solver collaborator (default: Pyomo solver from config)

    Returns:
        Output message, or None for messages other than "start". Faults while
        reading the payload are reported as an error message, never raised.
    """
    if message.get("type") != "start":
        logger.debug(f"Ignoring message of type {message.get('type')!r}")
        return None

    try:
        params = parse_payload(message.get("payload") or {})
    except PlanningError as e:
        logger.error(f"Invalid start payload: {e}")
        return {"type": "error", "message": str(e)}
    except Exception as e:
        logger.error(f"Crash at parameter parsing: {e}", exc_info=True)
        return {"type": "error", "message": f"Worker crash: {e}"}

    return run_annual_plan(params, config, solver).to_message()


class PlanWorker:
    """
    Runs planning requests in an executor, one unit of work per message.

    Example:
        with PlanWorker() as worker:
            future = worker.submit({"type": "start", "payload": payload})
            reply = future.result()
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        config: Optional[PlanConfig] = None,
        solver: Optional[ShipmentSolver] = None,
    ):
        """
        Initialize worker.

        Args:
            executor: Executor to run on (a single-thread pool if None)
            config: Run configuration
            solver: Solver collaborator shared by all runs
        """
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="flowplan")
        self.config = config
        self.solver = solver

    def submit(self, message: Mapping[str, Any]) -> Future:
        """Schedule a message; the future resolves to the output message."""
        return self.executor.submit(handle_message, dict(message), self.config, self.solver)

    def shutdown(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    def __enter__(self) -> "PlanWorker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
