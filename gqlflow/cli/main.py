"""Main CLI entry point for gqlflow."""

import argparse
import logging
import sys
from typing import List, Optional

from .common import configure_logging
from .commands import add_step, init_set, list_sets, reset_state, run_set, show_status


logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the gqlflow CLI."""
    parser = argparse.ArgumentParser(
        prog='gqlflow',
        description='Resumable runner for multi-step GraphQL request sets'
    )
    parser.add_argument(
        '--root',
        type=str,
        help='Storage root directory (default: $GQLFLOW_HOME or ./.gqlflow)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warning', 'error'],
        default='warning',
        help='Logging level'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Verbose output'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Only log errors'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Init command
    init_parser = subparsers.add_parser('init', help='Create a set')
    init_parser.add_argument('name', help='Set name')
    init_parser.add_argument(
        '--from',
        dest='from_file',
        metavar='FILE',
        help='Import the definition from a JSON or YAML file'
    )

    # Add-step command
    add_parser = subparsers.add_parser('add-step', help='Append a step to a set')
    add_parser.add_argument('name', help='Set name')
    add_parser.add_argument('--name', dest='step_name', required=True, help='Step name')
    add_parser.add_argument('--query', required=True, help='Query template')
    add_parser.add_argument('--variables', metavar='JSON', help='Variables template')
    add_parser.add_argument('--extract', metavar='JSON',
                            help='Mapping of context key to dotted response path')
    add_parser.add_argument('--expected', metavar='JSON',
                            help='Partial pattern the response must match')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run the next pending step')
    run_parser.add_argument('name', help='Set name')
    run_parser.add_argument(
        '--full',
        action='store_true',
        help='Run all pending steps, stopping at the first error'
    )
    run_parser.add_argument(
        '--step',
        type=int,
        metavar='INDEX',
        help='Re-run the step at INDEX (0-based), whatever its status'
    )
    run_parser.add_argument(
        '--timeout',
        type=float,
        metavar='SECONDS',
        help='Request timeout (default: $GQLFLOW_TIMEOUT or transport default)'
    )

    # Status command
    status_parser = subparsers.add_parser('status', help='Show set status')
    status_parser.add_argument('name', help='Set name')

    # List command
    subparsers.add_parser('list', help='List all sets')

    # Reset command
    reset_parser = subparsers.add_parser('reset', help='Clear execution state')
    reset_parser.add_argument('name', nargs='?', help='Set name')
    reset_parser.add_argument('--all', action='store_true', help='Clear state for all sets')

    return parser


COMMANDS = {
    'init': init_set,
    'add-step': add_step,
    'run': run_set,
    'status': show_status,
    'list': list_sets,
    'reset': reset_state,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args)
    try:
        return COMMANDS[args.command](args)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
