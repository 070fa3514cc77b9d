"""Status and list command implementations."""

import logging
from argparse import Namespace

from gqlflow.cli.common import emit, emit_error, load_config
from gqlflow.exceptions import GqlflowError
from gqlflow.loader import DefinitionStore
from gqlflow.state import StateManager


logger = logging.getLogger(__name__)


def show_status(args: Namespace) -> int:
    """Report per-step status of one set without executing anything."""
    config = load_config(args)
    store = DefinitionStore(config.sets_dir)

    try:
        flow = store.load(args.name)
    except GqlflowError as e:
        emit_error(str(e))
        return e.exit_code

    flow_state = StateManager(config.state_file).get_or_create(args.name, len(flow.steps))

    steps = []
    for index, step in enumerate(flow.steps):
        entry = {"index": index, "name": step.name}
        entry.update(flow_state.steps[index].to_dict())
        entry.pop("result", None)
        steps.append(entry)

    emit({
        "name": flow.name,
        "baseUrl": flow.baseUrl,
        "context": flow_state.to_dict()["context"],
        "steps": steps,
        **flow_state.counts(len(flow.steps)),
    })
    return 0


def list_sets(args: Namespace) -> int:
    """Report status counters for every stored set."""
    config = load_config(args)
    store = DefinitionStore(config.sets_dir)
    state_manager = StateManager(config.state_file)

    sets = []
    for name in store.list_names():
        try:
            flow = store.load(name)
        except GqlflowError as e:
            logger.warning(f"Skipping set '{name}': {e}")
            continue
        flow_state = state_manager.get_or_create(name, len(flow.steps))
        sets.append({"name": name, **flow_state.counts(len(flow.steps))})

    emit({"sets": sets})
    return 0
