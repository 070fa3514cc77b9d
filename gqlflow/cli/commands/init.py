"""Init command implementation."""

import logging
from argparse import Namespace
from pathlib import Path

from gqlflow.cli.common import emit, emit_error, load_config
from gqlflow.exceptions import DefinitionValidationError, GqlflowError
from gqlflow.loader import DefinitionStore


logger = logging.getLogger(__name__)


def init_set(args: Namespace) -> int:
    """Create an empty set, or import one from a JSON/YAML file."""
    config = load_config(args)
    store = DefinitionStore(config.sets_dir)

    try:
        source = Path(args.from_file) if args.from_file else None
        definition = store.create(args.name, source)
    except DefinitionValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        emit_error(str(e))
        return e.exit_code
    except (GqlflowError, FileNotFoundError) as e:
        emit_error(str(e))
        return 1

    emit({
        "created": args.name,
        "path": str(store.path_for(args.name)),
        "steps": len(definition.steps),
    })
    return 0
