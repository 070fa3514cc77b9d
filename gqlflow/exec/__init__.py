"""
Execution module for gqlflow.
Handles sending step requests and recording their outcome.
"""

from .transport import HttpTransport
from .step_executor import StepExecutor

__all__ = [
    "HttpTransport",
    "StepExecutor",
]
