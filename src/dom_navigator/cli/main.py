"""Main CLI entry point for the dom-navigator command-line tool.

Provides the ``run`` stream transducer and a ``tree`` command that prints the
structure of the markup block.
"""

import argparse
import contextlib
import json
import sys
from pathlib import Path
from typing import List, Optional

from dom_navigator import __version__
from dom_navigator.api import NavigationSession
from dom_navigator.shared import (
    ConfigError,
    DOMNavigatorError,
    NavigatorConfig,
    configure_logging,
    get_logger,
)
from dom_navigator.tree import DocumentTree

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="dom-navigator",
        description="Build a tree from line-oriented markup and walk a cursor through it"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run", help="Build the tree and execute the instruction batches"
    )
    run_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Input file (default: stdin)"
    )
    run_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    run_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    run_parser.add_argument(
        "--profile",
        action="store_true",
        help="Print per-layer timing and memory usage to stderr"
    )

    # Tree command
    tree_parser = subparsers.add_parser(
        "tree", help="Build the tree and print its structure"
    )
    tree_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Input file (default: stdin)"
    )
    tree_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )
    tree_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> NavigatorConfig:
    """Build the effective configuration from the config file and flags."""
    config = NavigatorConfig()
    if args.config:
        config = NavigatorConfig.from_file(args.config)

    if getattr(args, "profile", False):
        config = config.override(global___enable_profiling=True)

    return config


def format_tree(tree: DocumentTree, format_type: str) -> str:
    """Format a built tree for output."""
    if format_type == "json":
        return json.dumps(tree.to_dict(), indent=2)

    if tree.is_empty:
        return "(empty document)"
    return tree.render()


@contextlib.contextmanager
def _open_input(path: Optional[Path]):
    if path is None:
        yield sys.stdin
    else:
        with path.open(encoding="utf-8") as stream:
            yield stream


@contextlib.contextmanager
def _open_output(path: Optional[Path]):
    if path is None:
        yield sys.stdout
    else:
        with path.open("w", encoding="utf-8") as stream:
            yield stream


def cmd_run(args: argparse.Namespace, config: NavigatorConfig) -> int:
    """Handle run command."""
    session = NavigationSession(config)

    with _open_input(args.input) as input_stream, _open_output(args.output) as output_stream:
        session.run(input_stream, output_stream)

    if session.profiler is not None:
        print(session.profiler.format_report(), file=sys.stderr)

    return EXIT_OK


def cmd_tree(args: argparse.Namespace, config: NavigatorConfig) -> int:
    """Handle tree command."""
    session = NavigationSession(config)

    with _open_input(args.input) as input_stream:
        result = session.build(input_stream)

    print(format_tree(result.tree, args.format))
    return EXIT_OK


def _report_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    try:
        config = load_config(args)
    except ConfigError as e:
        _report_error(str(e))
        return EXIT_FAILURE

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    # Route to appropriate command handler
    try:
        if args.command == "run":
            return cmd_run(args, config)
        if args.command == "tree":
            return cmd_tree(args, config)
        _report_error(f"Unknown command: {args.command}")
        return EXIT_FAILURE

    except DOMNavigatorError as e:
        _report_error(str(e))
        return EXIT_FAILURE
    except OSError as e:
        logger.error("I/O failure", extra={"error": str(e)})
        _report_error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
