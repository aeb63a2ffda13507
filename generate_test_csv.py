#!/usr/bin/env python3
"""CSV Test Data Generator - Generate synthetic CSV files from a source CSV.

This interactive command-line tool reads a source CSV, asks how each column's
values should be generated, and writes a CSV of synthetic records with the
same columns. Configurations can be saved as named templates and reused on
later runs.

Usage:
    python generate_test_csv.py
    python generate_test_csv.py customers.csv

Environment:
    CSVGEN_TEMPLATE_FILE  Template document (default: config.json)
    CSVGEN_LOG_LEVEL      Logging level (default: WARNING)
    CSVGEN_LOG_FILE       Optional log file
    CSVGEN_SEED           Random seed for reproducible output
"""

import argparse
import sys
from typing import List, Optional

from csvgen.logsetup import get_logger, setup_logging
from csvgen.prompts import ConsolePromptProvider, PromptProvider
from csvgen.session import GenerationSession
from csvgen.settings import Settings
from csvgen.synthesizer import make_rng
from csvgen.template_store import JsonTemplateStore


logger = get_logger(__name__)


def generate_test_csv(
    source_path: Optional[str] = None,
    settings: Optional[Settings] = None,
    prompts: Optional[PromptProvider] = None
) -> int:
    """Run one interactive generation session.

    Args:
        source_path: Source CSV path; prompted for when not given.
        settings: Runtime settings (default: read from the environment).
        prompts: Prompt provider (default: console prompts).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    if settings is None:
        settings = Settings.from_env()

    session = GenerationSession(
        prompts=prompts or ConsolePromptProvider(),
        store=JsonTemplateStore(settings.template_file),
        rng=make_rng(settings.seed) if settings.seed is not None else None,
    )

    try:
        return session.run(source_arg=source_path)

    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        return 130

    except Exception as e:
        logger.exception("Unexpected error during generation")
        print(f"An error occurred: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog='generate_test_csv.py',
        description='CSV Test Data Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
If source CSV file is provided as a command-line argument, it will be used directly.
Otherwise, you will be prompted to enter the path to the source file.

Examples:
  # Prompt for everything
  python generate_test_csv.py

  # Start from a known source file
  python generate_test_csv.py customers.csv

  # Reproducible output and a different template document
  CSVGEN_SEED=42 CSVGEN_TEMPLATE_FILE=templates.json python generate_test_csv.py
        """
    )

    parser.add_argument(
        'source_file',
        nargs='?',
        help='Path to the source CSV file'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        setup_logging(level=settings.log_level, log_file=settings.log_file)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return generate_test_csv(source_path=args.source_file, settings=settings)


if __name__ == '__main__':
    sys.exit(main())
