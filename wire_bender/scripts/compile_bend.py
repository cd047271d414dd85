#!/usr/bin/env python3
"""
Compile Bend Script.

Compile a bend program to G-code.

Usage:
    python -m wire_bender.scripts.compile_bend part.bend -o part.gcode
    python -m wire_bender.scripts.compile_bend part.bend --bend-feedrate 4000
    cat part.bend | python -m wire_bender.scripts.compile_bend > part.gcode
    python -m wire_bender.scripts.compile_bend part.bend -c my_machine.yaml

Exit codes:
    0  success
    1  bend program error (syntax error, unbalanced REPEAT/END)
    2  configuration or input/output error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from wire_bender.compiler import BendCompiler
from wire_bender.configs.loader import ConfigError, load_config
from wire_bender.dsl.errors import ProgramError
from wire_bender.utils.fs import atomic_write_text
from wire_bender.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROGRAM_ERROR = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile a bend program to G-code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Reads stdin when INPUT is omitted or '-'.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Bend program file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="G-code output file (default: stdout)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Machine configuration file path",
    )

    # Option overrides
    parser.add_argument(
        "--feed-feedrate",
        type=float,
        help="Feed rate for wire feed moves",
    )
    parser.add_argument(
        "--bend-feedrate",
        type=float,
        help="Feed rate for bend moves",
    )
    parser.add_argument(
        "--positive-clearance",
        type=float,
        help="Bend-axis clearance position on the positive side",
    )
    parser.add_argument(
        "--negative-clearance",
        type=float,
        help="Bend-axis clearance position on the negative side",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file",
    )
    return parser


def _read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        args.log_level,
        args.log_file,
        json=args.json_logs,
        context={"app": "compile_bend"},
    )

    # Load config
    try:
        config = load_config(args.config)
        compiler = BendCompiler(
            config,
            feed_feedrate=args.feed_feedrate,
            bend_feedrate=args.bend_feedrate,
            positive_bend_clearance=args.positive_clearance,
            negative_bend_clearance=args.negative_clearance,
        )
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        source = _read_source(args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        gcode = compiler.compile(source)
    except ProgramError as e:
        print(f"{args.input}: {e}", file=sys.stderr)
        logger.debug("Compile failed: kind=%s line=%d", e.kind, e.line)
        return EXIT_PROGRAM_ERROR

    if args.output:
        try:
            atomic_write_text(args.output, gcode + "\n")
        except RuntimeError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_USAGE_ERROR
        logger.info("G-code written to %s", args.output)
    else:
        sys.stdout.write(gcode + "\n")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
