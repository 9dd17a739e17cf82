#!/usr/bin/env python3
"""
Command-line runner for Thor.

Usage:
    python -m thor [FILE] [--tokens] [--ast] [--config FILE] [-v]

Reads FILE (or stdin when FILE is omitted or '-'), runs it, and exits
with status 1 when the program fails.

Examples:
    # Run a script
    python -m thor examples/add.thor

    # Show the token stream and the parsed tree before running
    python -m thor examples/add.thor --tokens --ast

    # Run with extra constants and a restricted set of builtins
    python -m thor examples/add.thor --config thor.yaml
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path


def main(argv=None) -> int:
    from . import run, load_config, create_global_scope, ThorConfig, ThorError

    parser = argparse.ArgumentParser(
        prog="thor",
        description="Run a Thor script",
    )
    parser.add_argument("file", nargs="?", default="-",
                        help="script to run (default: stdin)")
    parser.add_argument("--tokens", action="store_true",
                        help="print the token stream before running")
    parser.add_argument("--ast", action="store_true",
                        help="print the parsed tree before running")
    parser.add_argument("--config", metavar="FILE",
                        help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log interpreter activity (-vv for debug)")
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config) if args.config else ThorConfig()
        scope = create_global_scope(config)
    except (FileNotFoundError, ThorError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.file == "-":
        source = sys.stdin.read()
        filename = "<stdin>"
    else:
        source_path = Path(args.file)
        if not source_path.exists():
            print(f"Error: File not found: {source_path}", file=sys.stderr)
            return 1
        source = source_path.read_text(encoding="utf-8")
        filename = str(source_path)

    options = replace(
        config.options,
        log_tokens=config.options.log_tokens or args.tokens,
        log_ast=config.options.log_ast or args.ast,
    )

    def show(stage, text):
        print(f"{stage}: {text}\n")

    result = run(source, options, scope=scope, filename=filename, on_log=show)

    if not result.success:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
