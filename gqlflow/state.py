"""State store for gqlflow.

Execution state lives apart from flow definitions so definitions stay
shareable. One JSON document maps each flow name to its context and its
step states; it is rewritten atomically after every step transition.
"""

import json
import logging
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Dict, Any, Optional, List, Literal

from .workflow.pointers import is_undefined


logger = logging.getLogger(__name__)

StepStatus = Literal["pending", "done", "error", "failed"]

PENDING = "pending"


@dataclass
class StepState:
    """Persisted outcome of one step."""
    status: StepStatus = PENDING
    duration: Optional[int] = None
    result: Optional[Any] = None
    error: Optional[Any] = None
    validationError: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, omitting None values."""
        result = {}
        for k, v in asdict(self).items():
            if v is not None:
                result[k] = v
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepState":
        return cls(
            status=data.get("status", PENDING),
            duration=data.get("duration"),
            result=data.get("result"),
            error=data.get("error"),
            validationError=data.get("validationError"),
        )

    def reset(self):
        """Return the step to pending, clearing its previous outcome."""
        self.status = PENDING
        self.duration = None
        self.result = None
        self.error = None
        self.validationError = None


@dataclass
class FlowState:
    """Context and step states of one flow."""
    context: Dict[str, Any] = field(default_factory=dict)
    steps: List[StepState] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization; absent context values are dropped."""
        return {
            "context": {k: v for k, v in self.context.items() if not is_undefined(v)},
            "steps": [step.to_dict() for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowState":
        return cls(
            context=dict(data.get("context") or {}),
            steps=[StepState.from_dict(s) for s in data.get("steps") or []],
        )

    def reconcile(self, step_count: int) -> int:
        """
        Pad step states with pending entries up to step_count.

        Existing entries are never removed or modified.

        Returns:
            Number of entries added
        """
        added = 0
        while len(self.steps) < step_count:
            self.steps.append(StepState())
            added += 1
        return added

    def first_pending(self, step_count: Optional[int] = None) -> Optional[int]:
        """Index of the first pending step among the first step_count, or None."""
        steps = self.steps if step_count is None else self.steps[:step_count]
        for index, step in enumerate(steps):
            if step.status == PENDING:
                return index
        return None

    def counts(self, step_count: Optional[int] = None) -> Dict[str, int]:
        """Status counters in the shape the status/list commands report.

        Only the first step_count entries are counted when given, so entries
        left behind by a definition that lost steps are ignored.
        """
        steps = self.steps if step_count is None else self.steps[:step_count]
        statuses = [step.status for step in steps]
        return {
            "pending": statuses.count("pending"),
            "done": statuses.count("done"),
            "failed": statuses.count("failed"),
            "errors": statuses.count("error"),
        }


class StateManager:
    """Loads and atomically persists execution state for all flows."""

    def __init__(self, state_file: Path):
        """Initialize state manager.

        Args:
            state_file: Path of the shared state document
        """
        self.state_file = Path(state_file)
        self.flows: Dict[str, FlowState] = {}
        self._loaded = False

    def load(self) -> Dict[str, FlowState]:
        """Load state from disk; a missing file is empty state.

        Raises:
            json.JSONDecodeError: If state file is corrupted
        """
        self.flows = {}
        if self.state_file.exists():
            with open(self.state_file, 'r') as f:
                data = json.load(f)
            for name, flow_data in (data or {}).items():
                self.flows[name] = FlowState.from_dict(flow_data)
        self._loaded = True
        return self.flows

    def _ensure_loaded(self):
        if not self._loaded:
            self.load()

    def get(self, flow_name: str) -> Optional[FlowState]:
        self._ensure_loaded()
        return self.flows.get(flow_name)

    def get_or_create(self, flow_name: str, step_count: int) -> FlowState:
        """
        Return the flow's state, creating it lazily and padding it to step_count.

        Args:
            flow_name: Flow identity
            step_count: Number of steps in the current definition
        """
        self._ensure_loaded()
        flow_state = self.flows.get(flow_name)
        if flow_state is None:
            logger.debug(f"Creating state for set '{flow_name}'")
            flow_state = FlowState()
            self.flows[flow_name] = flow_state
        added = flow_state.reconcile(step_count)
        if added:
            logger.debug(f"Padded state for set '{flow_name}' with {added} pending step(s)")
        return flow_state

    def to_dict(self) -> Dict[str, Any]:
        return {name: flow.to_dict() for name, flow in self.flows.items()}

    def save(self):
        """Write state atomically (temp file + rename)."""
        self._ensure_loaded()
        self._write(self.to_dict())

    def _write(self, data: Dict[str, Any]):
        self.state_file.parent.mkdir(parents=True, exist_ok=True)

        temp_file = self.state_file.with_suffix('.tmp')
        with open(temp_file, 'w') as f:
            json.dump(data, f, indent=2)

        # Atomic rename
        temp_file.replace(self.state_file)

    def extend(self, flow_name: str, step_count: int) -> bool:
        """Pad an existing flow state to step_count and persist it.

        Flows without state are left alone; their state is created lazily.

        Returns:
            True if the flow had state to extend
        """
        flow_state = self.get(flow_name)
        if flow_state is None:
            return False
        if flow_state.reconcile(step_count):
            self.save()
        return True

    def reset(self, flow_name: str) -> bool:
        """Drop one flow's state.

        Returns:
            True if there was state to drop
        """
        self._ensure_loaded()
        if flow_name not in self.flows:
            return False
        del self.flows[flow_name]
        self.save()
        logger.info(f"Reset state for set '{flow_name}'")
        return True

    def reset_all(self):
        """Drop state for every flow."""
        self.flows = {}
        self._loaded = True
        if self.state_file.exists():
            self._write({})
        logger.info("Reset state for all sets")
