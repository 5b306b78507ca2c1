#!/usr/bin/env python3
"""
Market Oracle CLI

Command-line interface for building the prediction timeline.

Usage:
    python cli/run_pipeline.py generate
    python cli/run_pipeline.py generate --output predictions.json --max-markets 500
    python cli/run_pipeline.py fetch --output raw_markets.json
    python cli/run_pipeline.py show --input predictions.json
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from cli.commands import (
    DEFAULT_OUTPUT,
    generate_predictions_file,
    fetch_raw_markets,
    show_timeline
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    logger.info("Logging configured")


def cmd_generate(args) -> int:
    """Fetch, process and group markets, then write predictions.json."""
    logger.info(f"Command: generate --output {args.output} --max-markets {args.max_markets}")
    print("Fetching prediction market data...")

    try:
        run = generate_predictions_file(
            output_path=args.output,
            max_markets=args.max_markets,
            verbose=True
        )
    except OSError as e:
        print(f"Error: {e}")
        logger.error(f"Failed to write timeline: {e}")
        return 1

    logger.info(f"Timeline written with {run.event_count} events")
    return 0


def cmd_fetch(args) -> int:
    """Fetch raw markets only."""
    logger.info(f"Command: fetch --max-markets {args.max_markets}")

    try:
        fetch_raw_markets(
            max_markets=args.max_markets,
            output_path=args.output,
            verbose=True
        )
    except OSError as e:
        print(f"Error: {e}")
        logger.error(f"Failed to write raw markets: {e}")
        return 1

    return 0


def cmd_show(args) -> int:
    """Show a saved timeline."""
    logger.info(f"Command: show --input {args.input}")

    try:
        show_timeline(args.input, verbose=True)
    except (OSError, ValueError, KeyError) as e:
        print(f"Error: could not read {args.input}: {e}")
        logger.error(f"Failed to load timeline {args.input}: {e}")
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Market Oracle - Polymarket prediction timeline builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate
  %(prog)s generate --max-markets 500 --output data/predictions.json
  %(prog)s fetch --output raw_markets.json
  %(prog)s show --input predictions.json
        """
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Build the year timeline and write predictions.json"
    )
    generate_parser.add_argument(
        "--output", "-o",
        default=DEFAULT_OUTPUT,
        help=f"Output file (default: {DEFAULT_OUTPUT})"
    )
    generate_parser.add_argument(
        "--max-markets",
        type=int,
        default=1000,
        help="Maximum markets to fetch (default: 1000)"
    )
    generate_parser.set_defaults(func=cmd_generate)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch raw markets from Polymarket"
    )
    fetch_parser.add_argument(
        "--output", "-o",
        help="Save raw markets to this file"
    )
    fetch_parser.add_argument(
        "--max-markets",
        type=int,
        default=1000,
        help="Maximum markets to fetch (default: 1000)"
    )
    fetch_parser.set_defaults(func=cmd_fetch)

    show_parser = subparsers.add_parser(
        "show",
        help="Show a saved timeline"
    )
    show_parser.add_argument(
        "--input", "-i",
        default=DEFAULT_OUTPUT,
        help=f"Timeline file (default: {DEFAULT_OUTPUT})"
    )
    show_parser.set_defaults(func=cmd_show)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
