"""Shared fixtures: isolated storage roots and a fake GraphQL endpoint."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import httpx
import pytest

from gqlflow.config import GqlflowConfig
from gqlflow.environment import EnvironmentLoader
from gqlflow.exec.step_executor import StepExecutor
from gqlflow.exec.transport import HttpTransport
from gqlflow.loader import DefinitionStore, FlowDefinition, StepDefinition
from gqlflow.state import StateManager
from gqlflow.workflow.executor import FlowRunner


BASE_URL = "http://api.test/graphql"


class FakeServer:
    """httpx.MockTransport handler answering from a queue of canned responses.

    Each queued item is a JSON body (sent with HTTP 200), an httpx.Response,
    an exception instance to raise, or a callable taking the request.
    """

    def __init__(self, responses: List[Any] = None):
        self.responses = list(responses or [])
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    @property
    def call_count(self) -> int:
        return len(self.requests)


def make_transport(server: FakeServer) -> HttpTransport:
    return HttpTransport(client=httpx.Client(transport=httpx.MockTransport(server)))


@pytest.fixture
def config(tmp_path) -> GqlflowConfig:
    """Configuration rooted in a per-test temporary directory."""
    return GqlflowConfig(root=tmp_path / ".gqlflow")


@pytest.fixture
def definitions(config) -> DefinitionStore:
    return DefinitionStore(config.sets_dir)


@pytest.fixture
def save_flow(definitions) -> Callable[..., FlowDefinition]:
    """Store a flow made of the given steps and return its definition."""
    def _save(name: str, steps: List[Dict[str, Any]], headers: Dict[str, str] = None):
        flow = FlowDefinition(
            name=name,
            baseUrl=BASE_URL,
            headers=headers,
            steps=[StepDefinition.from_dict(s) for s in steps],
        )
        definitions.save(name, flow)
        return flow
    return _save


@pytest.fixture
def make_runner(config, definitions) -> Callable[[FakeServer], FlowRunner]:
    """Build a FlowRunner wired to a fake server and the per-test root."""
    def _make(server: FakeServer) -> FlowRunner:
        return FlowRunner(
            definitions=definitions,
            state_manager=StateManager(config.state_file),
            step_executor=StepExecutor(make_transport(server)),
            environment=EnvironmentLoader(config.env_file),
        )
    return _make


def read_state(config: GqlflowConfig) -> Dict[str, Any]:
    with open(config.state_file, 'r') as f:
        return json.load(f)
