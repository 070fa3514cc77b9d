"""
Step executor: performs a single step of a flow.
Substitutes templates, sends the request, classifies the outcome and
threads extracted values into the context.
"""

import logging
import time
from typing import Any, Dict

from ..loader import FlowDefinition, StepDefinition
from ..state import StepState
from ..variables.substitution import TemplateSubstitutor
from ..workflow.expectations import validate_expected
from ..workflow.pointers import extract_path
from .transport import HttpTransport


logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int(round((time.monotonic() - start) * 1000))


class StepExecutor:
    """
    Executes one pending step and records its outcome in place.

    pending -> done | error | failed. Persistence is left to the caller.
    """

    def __init__(self, transport: HttpTransport):
        """
        Initialize step executor.

        Args:
            transport: Object with post(url, payload, headers) -> decoded body
        """
        self.transport = transport
        self.substitutor = TemplateSubstitutor()

    def build_headers(self, flow: FlowDefinition, context: Dict[str, Any]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        for key, value in (flow.headers or {}).items():
            headers[key] = self.substitutor.substitute(value, context)
        return headers

    def execute(
        self,
        flow: FlowDefinition,
        step: StepDefinition,
        step_state: StepState,
        context: Dict[str, Any],
    ) -> StepState:
        """
        Execute a step against the assembled context.

        Args:
            flow: Flow definition (base URL, headers)
            step: Step definition to run
            step_state: State entry mutated in place
            context: Shared context; extractions are written into it

        Returns:
            The same step_state, now settled
        """
        logger.info(f"Executing step '{step.name}'")
        start = time.monotonic()

        try:
            query = self.substitutor.substitute(step.query, context)
            payload = {"query": query}
            if step.variables is not None:
                payload["variables"] = self.substitutor.substitute_structured(step.variables, context)
            headers = self.build_headers(flow, context)
            data = self.transport.post(flow.baseUrl, payload, headers)
        except Exception as e:
            step_state.status = "error"
            step_state.error = str(e)
            step_state.duration = _elapsed_ms(start)
            logger.info(f"Step '{step.name}' errored: {e}")
            return step_state

        step_state.duration = _elapsed_ms(start)
        step_state.result = data

        if isinstance(data, dict) and "errors" in data:
            step_state.status = "error"
            step_state.error = data["errors"]
            logger.info(f"Step '{step.name}' returned errors")
            return step_state

        if step.expected is not None:
            validation = validate_expected(step.expected, data)
            if validation.valid:
                step_state.status = "done"
            else:
                step_state.status = "failed"
                step_state.validationError = validation.error
        else:
            step_state.status = "done"

        # Extraction runs even when the expectation did not hold
        for key, path in (step.extractToContext or {}).items():
            context[key] = extract_path(data, path)

        logger.info(f"Step '{step.name}' {step_state.status} in {step_state.duration}ms")
        return step_state
