"""Add-step command implementation."""

import json
import logging
from argparse import Namespace
from typing import Any, Dict

from gqlflow.cli.common import emit, emit_error, load_config
from gqlflow.exceptions import DefinitionValidationError, GqlflowError
from gqlflow.loader import DefinitionStore
from gqlflow.state import StateManager


logger = logging.getLogger(__name__)

JSON_OPTIONS = (
    ('variables', 'variables', '--variables'),
    ('extract', 'extractToContext', '--extract'),
    ('expected', 'expected', '--expected'),
)


def parse_step_args(args: Namespace) -> Dict[str, Any]:
    """Build a raw step mapping from arguments.

    Raises:
        ValueError: If a JSON option does not parse
    """
    step: Dict[str, Any] = {"name": args.step_name, "query": args.query}
    for attr, key, flag in JSON_OPTIONS:
        raw = getattr(args, attr)
        if raw is None:
            continue
        try:
            step[key] = json.loads(raw)
        except json.JSONDecodeError:
            raise ValueError(f"Invalid JSON for {flag}: {raw}")
    return step


def add_step(args: Namespace) -> int:
    """Append a step to a set; existing state gains a pending entry."""
    config = load_config(args)
    store = DefinitionStore(config.sets_dir)

    try:
        step = parse_step_args(args)
        index = store.add_step(args.name, step)
    except ValueError as e:
        emit_error(str(e))
        return 2
    except DefinitionValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        emit_error(str(e))
        return e.exit_code
    except GqlflowError as e:
        emit_error(str(e))
        return 1

    StateManager(config.state_file).extend(args.name, index + 1)

    emit({
        "added": args.step_name,
        "set": args.name,
        "index": index,
        "step": step,
    })
    return 0
