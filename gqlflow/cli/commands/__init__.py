"""CLI command handlers."""

from .init import init_set
from .add_step import add_step
from .run import run_set
from .status import show_status, list_sets
from .reset import reset_state

__all__ = ['init_set', 'add_step', 'run_set', 'show_status', 'list_sets', 'reset_state']
