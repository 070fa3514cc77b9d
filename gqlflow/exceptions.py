"""gqlflow exceptions."""

from typing import List
from dataclasses import dataclass


@dataclass
class ValidationError:
    """Single definition validation error."""
    message: str
    path: str = ""


class GqlflowError(Exception):
    """Base class for all gqlflow errors."""
    exit_code = 1


class DefinitionValidationError(GqlflowError):
    """Raised when a flow or step definition is malformed.

    Raised before anything is written, so a rejected definition change is
    never partially applied.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error at '{error.path}': {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))


class FlowNotFoundError(GqlflowError):
    """Raised when a flow definition does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Set '{name}' not found")


class FlowExistsError(GqlflowError):
    """Raised when creating a flow whose definition already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Set '{name}' already exists")


class StepNotFoundError(GqlflowError):
    """Raised when an explicit step index is outside the flow."""

    def __init__(self, flow_name: str, index: int, total: int):
        self.flow_name = flow_name
        self.index = index
        self.total = total
        super().__init__(
            f"Step index {index} out of range for set '{flow_name}' ({total} steps)"
        )


class TransportError(GqlflowError):
    """Request could not be completed or its response could not be decoded."""
