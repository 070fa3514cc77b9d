"""Run command implementation."""

import json
import logging
from argparse import Namespace

from gqlflow.cli.common import build_runner, emit, emit_error, load_config
from gqlflow.exceptions import DefinitionValidationError, GqlflowError


logger = logging.getLogger(__name__)


def run_set(args: Namespace) -> int:
    """
    Run the next pending step, an explicit step, or every pending step.

    Exit code 0 once a single step has run (whatever its outcome) or when
    nothing is pending; in full mode 1 when the run halts on an error/failed
    step. 1 when the set cannot be loaded, 2 on invalid definitions.
    """
    if args.full and args.step is not None:
        emit_error("--step cannot be combined with --full")
        return 2

    try:
        config = load_config(args)
        runner = build_runner(config)
    except ValueError as e:
        emit_error(str(e))
        return 2

    try:
        report = runner.run(args.name, full=args.full, step_index=args.step)
    except DefinitionValidationError as e:
        for error in e.errors:
            logger.error(f"Validation error: {error.message}")
        emit_error(str(e))
        return e.exit_code
    except GqlflowError as e:
        emit_error(str(e))
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"State file is corrupted: {e}")
        emit_error(f"Failed to load state: {e}")
        return 1
    finally:
        runner.step_executor.transport.close()

    emit(report.to_dict())
    if args.full:
        return 0 if report.succeeded else 1
    return 0
