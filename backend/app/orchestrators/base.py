"""
Base Orchestrator

Abstract base class for all orchestrators with built-in support for:
- Decision tracing (step-by-step audit trail of one run)
- Deterministic pipeline execution in a fixed, explicit order

All feature orchestrators should extend this class.
"""

import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.utils.invariants import validate_orchestrator_name


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ExecutionStep:
    """Represents a single execution step in the trace"""
    def __init__(self, action: str, step_number: int):
        self.step = step_number
        self.action = action
        self.status = "in_progress"
        self.started_at = _utcnow_iso()
        self.completed_at = None
        self.duration_ms = None
        self.details: Dict[str, Any] = {}
        self.error = None
        self._start_time = time.monotonic()

    def _finish(self, status: str, details: Optional[Dict[str, Any]]):
        self.status = status
        self.completed_at = _utcnow_iso()
        self.duration_ms = int((time.monotonic() - self._start_time) * 1000)
        if details:
            self.details.update(details)

    def complete(self, status: str = "success", details: Optional[Dict[str, Any]] = None):
        """Mark step as completed"""
        self._finish(status, details)

    def fail(self, error: str, details: Optional[Dict[str, Any]] = None):
        """Mark step as failed"""
        self._finish("failed", details)
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            "step": self.step,
            "action": self.action,
            "status": self.status,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "duration_ms": self.duration_ms,
        }
        if self.details:
            result["details"] = self.details
        if self.error:
            result["error"] = self.error
        return result


class OrchestrationError(Exception):
    """Base exception for orchestration errors"""
    pass


class BaseOrchestrator(ABC):
    """
    Abstract base orchestrator with execution tracing.

    Subclasses must implement:
    - orchestrator_name: str property

    Usage:
        class MyOrchestrator(BaseOrchestrator):
            @property
            def orchestrator_name(self) -> str:
                return "my_orchestrator"

            async def run(self):
                self._start_trace()
                with self._trace_step("load") as step:
                    step.details = {...}
    """

    def __init__(self):
        validate_orchestrator_name(self.orchestrator_name)
        self._start_time: Optional[float] = None
        self._execution_steps: List[ExecutionStep] = []
        self._step_counter = 0

    @property
    @abstractmethod
    def orchestrator_name(self) -> str:
        """
        Name of this orchestrator (must be unique across all orchestrators).

        Returns:
            Orchestrator name (e.g., "tour_finalization_orchestrator")
        """
        pass

    def _start_trace(self):
        """Reset the trace at the start of a run."""
        self._start_time = time.monotonic()
        self._execution_steps = []
        self._step_counter = 0

    @contextmanager
    def _trace_step(self, action: str):
        """
        Context manager for automatic step tracing.

        A step that does not set its own status is marked "success" on exit;
        an exception marks it failed and propagates.

        Usage:
            with self._trace_step("validate_input"):
                # do validation
                pass
        """
        self._step_counter += 1
        step = ExecutionStep(action, self._step_counter)
        self._execution_steps.append(step)

        try:
            yield step
        except Exception as e:
            step.fail(str(e))
            raise
        else:
            if step.status == "in_progress":
                step.complete()

    def log_step(
        self,
        action: str,
        status: str = "success",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Manually log an execution step.

        Args:
            action: Description of the action
            status: Status of the step (success, failed, skipped, etc.)
            details: Additional details about the step
        """
        self._step_counter += 1
        step = ExecutionStep(action, self._step_counter)
        step.complete(status, details)
        self._execution_steps.append(step)

    def get_trace(self) -> List[Dict[str, Any]]:
        """Structured trace of the current (or last) run."""
        return [step.to_dict() for step in self._execution_steps]

    def get_elapsed_time_ms(self) -> int:
        """Get elapsed time since orchestration started in milliseconds"""
        if self._start_time is not None:
            return int((time.monotonic() - self._start_time) * 1000)
        return 0
