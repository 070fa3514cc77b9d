"""Flow definition store and validation."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from gqlflow.exceptions import (
    DefinitionValidationError,
    FlowExistsError,
    FlowNotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/graphql"

# Execution fields found in legacy single-file flows; never part of a definition
LEGACY_STATE_FIELDS = {"status", "duration", "result", "error", "validationError"}


@dataclass
class StepDefinition:
    """One request template of a flow."""
    name: str
    query: str
    variables: Optional[Any] = None
    extractToContext: Optional[Dict[str, str]] = None
    expected: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "query": self.query}
        for key in ("variables", "extractToContext", "expected"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StepDefinition":
        return cls(
            name=data["name"],
            query=data["query"],
            variables=data.get("variables"),
            extractToContext=data.get("extractToContext"),
            expected=data.get("expected"),
        )


@dataclass
class FlowDefinition:
    """A named, ordered sequence of steps sharing a base URL and headers."""
    name: str
    baseUrl: str
    headers: Optional[Dict[str, str]] = None
    steps: List[StepDefinition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"name": self.name, "baseUrl": self.baseUrl}
        if self.headers is not None:
            result["headers"] = self.headers
        result["steps"] = [step.to_dict() for step in self.steps]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowDefinition":
        return cls(
            name=data["name"],
            baseUrl=data["baseUrl"],
            headers=data.get("headers"),
            steps=[StepDefinition.from_dict(s) for s in data.get("steps", [])],
        )


class DefinitionValidator:
    """Collects every problem in a raw definition before raising."""

    def __init__(self):
        self.errors: List[ValidationError] = []

    def _add_error(self, message: str, path: str = ""):
        self.errors.append(ValidationError(message=message, path=path))

    def validate_flow(self, data: Any):
        """Validate a raw flow mapping.

        Raises:
            DefinitionValidationError: If any error was found
        """
        self.errors = []

        if not isinstance(data, dict):
            self._add_error("Set definition must be an object")
            raise DefinitionValidationError(self.errors)

        if not isinstance(data.get("name"), str) or not data["name"]:
            self._add_error("'name' must be a non-empty string", "name")

        if not isinstance(data.get("baseUrl"), str) or not data["baseUrl"]:
            self._add_error("'baseUrl' must be a non-empty string", "baseUrl")

        if "headers" in data and data["headers"] is not None:
            self._validate_string_map(data["headers"], "headers")

        steps = data.get("steps", [])
        if not isinstance(steps, list):
            self._add_error("'steps' must be a list", "steps")
        else:
            for i, step in enumerate(steps):
                self._validate_step(step, f"steps[{i}]")

        if self.errors:
            raise DefinitionValidationError(self.errors)

    def validate_step(self, data: Any):
        """Validate a single raw step mapping.

        Raises:
            DefinitionValidationError: If any error was found
        """
        self.errors = []
        self._validate_step(data, "step")
        if self.errors:
            raise DefinitionValidationError(self.errors)

    def _validate_step(self, step: Any, path: str):
        if not isinstance(step, dict):
            self._add_error("Step must be an object", path)
            return

        for key in ("name", "query"):
            if not isinstance(step.get(key), str):
                self._add_error(f"'{key}' must be a string", f"{path}.{key}")

        extract = step.get("extractToContext")
        if extract is not None:
            self._validate_string_map(extract, f"{path}.extractToContext")

    def _validate_string_map(self, value: Any, path: str):
        if not isinstance(value, dict):
            self._add_error("must be an object of strings", path)
            return
        for key, item in value.items():
            if not isinstance(item, str):
                self._add_error(f"value for '{key}' must be a string", path)


def read_source_file(path: Path) -> Any:
    """Read a JSON or YAML document from path (YAML for .yaml/.yml)."""
    with open(path, 'r') as f:
        if path.suffix.lower() in ('.yaml', '.yml'):
            return yaml.safe_load(f)
        return json.load(f)


def strip_execution_state(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """
    Reduce an imported document to definition fields only.

    Legacy single-file flows carry context and per-step status/result
    alongside the definition; those are dropped here.
    """
    steps = []
    for step in data.get("steps") or []:
        if isinstance(step, dict):
            step = {k: v for k, v in step.items() if k not in LEGACY_STATE_FIELDS}
        steps.append(step)

    stripped: Dict[str, Any] = {
        "name": data.get("name") or name,
        "baseUrl": data.get("baseUrl"),
        "steps": steps,
    }
    if data.get("headers") is not None:
        stripped["headers"] = data["headers"]
    return stripped


class DefinitionStore:
    """Stores one JSON definition file per flow."""

    def __init__(self, sets_dir: Path):
        """Initialize store with the directory holding <name>.json files."""
        self.sets_dir = Path(sets_dir)
        self.validator = DefinitionValidator()

    def path_for(self, name: str) -> Path:
        return self.sets_dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).exists()

    def list_names(self) -> List[str]:
        if not self.sets_dir.exists():
            return []
        return sorted(p.stem for p in self.sets_dir.glob("*.json"))

    def load(self, name: str) -> FlowDefinition:
        """Load and validate a flow definition.

        Raises:
            FlowNotFoundError: If no definition file exists
            DefinitionValidationError: If the stored definition is malformed
        """
        path = self.path_for(name)
        if not path.exists():
            raise FlowNotFoundError(name)

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise DefinitionValidationError(
                [ValidationError(message=f"Failed to parse set definition: {e}", path=str(path))]
            )

        self.validator.validate_flow(data)
        return FlowDefinition.from_dict(data)

    def save(self, name: str, definition: FlowDefinition):
        """Write a definition, preserving step order."""
        self.sets_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(name)
        temp_file = path.with_suffix('.tmp')
        with open(temp_file, 'w') as f:
            json.dump(definition.to_dict(), f, indent=2)
        temp_file.replace(path)

    def create(self, name: str, source: Optional[Path] = None) -> FlowDefinition:
        """
        Create a new flow, empty or imported from a JSON/YAML file.

        Raises:
            FlowExistsError: If the flow already exists
            FileNotFoundError: If source does not exist
            DefinitionValidationError: If the imported definition is malformed
        """
        if self.exists(name):
            raise FlowExistsError(name)

        if source is not None:
            source = Path(source)
            if not source.exists():
                raise FileNotFoundError(f"Source file '{source}' not found")
            try:
                raw = read_source_file(source)
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise DefinitionValidationError(
                    [ValidationError(message=f"Failed to parse source file: {e}", path=str(source))]
                )
            if not isinstance(raw, dict):
                raise DefinitionValidationError(
                    [ValidationError(message="Source file must contain an object", path=str(source))]
                )
            data = strip_execution_state(raw, name)
        else:
            data = {"name": name, "baseUrl": DEFAULT_BASE_URL, "steps": []}

        self.validator.validate_flow(data)
        definition = FlowDefinition.from_dict(data)
        self.save(name, definition)
        logger.info(f"Created set '{name}' with {len(definition.steps)} step(s)")
        return definition

    def add_step(self, name: str, step_data: Dict[str, Any]) -> int:
        """
        Append a step to an existing flow.

        Returns:
            Index of the new step

        Raises:
            FlowNotFoundError: If the flow does not exist
            DefinitionValidationError: If the step is malformed
        """
        definition = self.load(name)
        self.validator.validate_step(step_data)
        definition.steps.append(StepDefinition.from_dict(step_data))
        self.save(name, definition)
        return len(definition.steps) - 1
