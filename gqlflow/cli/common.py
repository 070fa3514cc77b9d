"""Helpers shared by CLI commands."""

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from gqlflow.config import GqlflowConfig
from gqlflow.environment import EnvironmentLoader
from gqlflow.exec.step_executor import StepExecutor
from gqlflow.exec.transport import HttpTransport
from gqlflow.loader import DefinitionStore
from gqlflow.state import StateManager
from gqlflow.workflow.executor import FlowRunner


def configure_logging(args: Namespace):
    """Send logs to stderr at the level chosen on the command line."""
    log_level = getattr(logging, args.log_level.upper())
    if args.debug or args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def emit(data: Any):
    """Write a command result to stdout as indented JSON."""
    print(json.dumps(data, indent=2, default=str))


def emit_error(message: str, **extra: Any):
    emit({"error": message, **extra})


def load_config(args: Namespace) -> GqlflowConfig:
    return GqlflowConfig.resolve(root=args.root, timeout=getattr(args, 'timeout', None))


def build_runner(config: GqlflowConfig) -> FlowRunner:
    """Wire stores, transport and executor for one invocation."""
    return FlowRunner(
        definitions=DefinitionStore(config.sets_dir),
        state_manager=StateManager(config.state_file),
        step_executor=StepExecutor(HttpTransport(timeout=config.timeout)),
        environment=EnvironmentLoader(config.env_file),
    )
