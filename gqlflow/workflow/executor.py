"""
Run driver: executes a flow one step at a time or end to end.
State is persisted after every step so a crash loses at most the step
in flight.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..environment import EnvironmentLoader
from ..exceptions import StepNotFoundError
from ..exec.step_executor import StepExecutor
from ..loader import DefinitionStore, FlowDefinition
from ..state import PENDING, FlowState, StateManager
from .context import assemble_context
from .pointers import is_undefined

logger = logging.getLogger(__name__)

NO_PENDING_STEPS = "No pending steps"


def _public_context(context: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in context.items() if not is_undefined(v)}


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class SingleStepReport:
    """Outcome of single-step mode."""
    set: str
    step: Optional[str] = None
    index: Optional[int] = None
    status: Optional[str] = None
    duration: Optional[int] = None
    result: Optional[Any] = None
    error: Optional[Any] = None
    validationError: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    remaining: int = 0

    @property
    def executed(self) -> bool:
        return self.index is not None

    def to_dict(self) -> Dict[str, Any]:
        if not self.executed:
            return {"error": NO_PENDING_STEPS, "set": self.set}
        result = _without_none({
            "set": self.set,
            "step": self.step,
            "index": self.index,
            "status": self.status,
            "duration": self.duration,
            "result": self.result,
            "error": self.error,
            "validationError": self.validationError,
        })
        result["context"] = _public_context(self.context)
        result["remaining"] = self.remaining
        return result


@dataclass
class StepSummary:
    """Per-step line of a full-run report."""
    name: str
    index: int
    status: str
    duration: Optional[int] = None
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = _without_none({
            "name": self.name,
            "index": self.index,
            "status": self.status,
            "duration": self.duration,
        })
        if self.skipped:
            result["skipped"] = True
        return result


@dataclass
class FullRunReport:
    """Outcome of full mode."""
    set: str
    status: str = "done"
    steps: List[StepSummary] = field(default_factory=list)
    stoppedAt: Optional[int] = None
    error: Optional[Any] = None
    duration: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == "done"

    @property
    def executed_count(self) -> int:
        return sum(1 for step in self.steps if not step.skipped)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"set": self.set, "status": self.status}
        if not self.succeeded:
            result["stoppedAt"] = self.stoppedAt
            result["error"] = self.error
            result["completedSteps"] = [s.to_dict() for s in self.steps]
        else:
            result["steps"] = [s.to_dict() for s in self.steps]
        result["duration"] = self.duration
        return result


class FlowRunner:
    """
    Main flow execution engine.
    Handles single-step and full runs with per-step persistence.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        state_manager: StateManager,
        step_executor: StepExecutor,
        environment: Optional[EnvironmentLoader] = None,
    ):
        """
        Initialize flow runner.

        Args:
            definitions: Definition store
            state_manager: State persistence manager
            step_executor: Executor for individual steps
            environment: Source of environment overrides (None = no overrides)
        """
        self.definitions = definitions
        self.state_manager = state_manager
        self.step_executor = step_executor
        self.environment = environment

    def _prepare(self, name: str):
        flow = self.definitions.load(name)
        flow_state = self.state_manager.get_or_create(name, len(flow.steps))
        overrides = self.environment.load() if self.environment else {}
        context = assemble_context(flow_state.context, overrides)
        return flow, flow_state, context

    def _execute(self, flow: FlowDefinition, flow_state: FlowState, index: int,
                 context: Dict[str, Any]):
        self.step_executor.execute(flow, flow.steps[index], flow_state.steps[index], context)
        flow_state.context = context
        self.state_manager.save()

    def run(self, name: str, full: bool = False, step_index: Optional[int] = None):
        """Run a flow in full mode or single-step mode."""
        if full:
            return self.run_full(name)
        return self.run_single(name, step_index)

    def run_single(self, name: str, step_index: Optional[int] = None) -> SingleStepReport:
        """
        Execute exactly one step.

        Args:
            name: Flow name
            step_index: Explicit step to (re-)run; reset to pending first.
                Defaults to the first pending step.

        Returns:
            SingleStepReport; not executed when nothing is pending

        Raises:
            FlowNotFoundError: If the flow does not exist
            StepNotFoundError: If step_index is out of range
        """
        flow, flow_state, context = self._prepare(name)

        if step_index is not None:
            if not 0 <= step_index < len(flow.steps):
                raise StepNotFoundError(name, step_index, len(flow.steps))
            logger.info(f"Resetting step {step_index} of '{name}' for re-run")
            flow_state.steps[step_index].reset()
            index = step_index
        else:
            index = flow_state.first_pending(len(flow.steps))
            if index is None:
                logger.info(f"No pending steps in '{name}'")
                return SingleStepReport(set=flow.name, context=context)

        self._execute(flow, flow_state, index, context)

        step_state = flow_state.steps[index]
        return SingleStepReport(
            set=flow.name,
            step=flow.steps[index].name,
            index=index,
            status=step_state.status,
            duration=step_state.duration,
            result=step_state.result,
            error=step_state.error,
            validationError=step_state.validationError,
            context=context,
            remaining=flow_state.counts(len(flow.steps))["pending"],
        )

    def run_full(self, name: str) -> FullRunReport:
        """
        Execute every pending step in order, stopping at the first error or failure.

        Settled steps are skipped and reported with their previous outcome.

        Raises:
            FlowNotFoundError: If the flow does not exist
        """
        flow, flow_state, context = self._prepare(name)
        report = FullRunReport(set=flow.name)
        total_start = time.monotonic()

        for index, step in enumerate(flow.steps):
            step_state = flow_state.steps[index]

            if step_state.status != PENDING:
                logger.info(f"Skipping already {step_state.status} step: {step.name}")
                report.steps.append(StepSummary(
                    name=step.name,
                    index=index,
                    status=step_state.status,
                    duration=step_state.duration,
                    skipped=True,
                ))
                continue

            self._execute(flow, flow_state, index, context)
            report.steps.append(StepSummary(
                name=step.name,
                index=index,
                status=step_state.status,
                duration=step_state.duration,
            ))

            if step_state.status in ("error", "failed"):
                logger.info(f"Run of '{name}' stopped at step {index} ({step_state.status})")
                report.status = step_state.status
                report.stoppedAt = index
                report.error = step_state.error if step_state.error is not None else step_state.validationError
                break

        report.duration = int(round((time.monotonic() - total_start) * 1000))
        return report
