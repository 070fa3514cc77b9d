"""Reset command implementation."""

from argparse import Namespace

from gqlflow.cli.common import emit, emit_error, load_config
from gqlflow.state import StateManager


def reset_state(args: Namespace) -> int:
    """Drop execution state for one set or for all of them."""
    config = load_config(args)
    state_manager = StateManager(config.state_file)

    if args.all:
        state_manager.reset_all()
        emit({"reset": "all"})
        return 0

    if not args.name:
        emit_error("Provide a set name or --all")
        return 2

    state_manager.reset(args.name)
    emit({"reset": args.name})
    return 0
