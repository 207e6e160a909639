"""dollar-script entry point: run a script file (or literal source) to completion."""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from interpreter import Interpreter
from lexer import ScriptError


def _format_error(error: ScriptError) -> str:
    text = f"{type(error).__name__}: {error.message}"
    if error.line_no is not None:
        text += f"\n  at {error.source_name}:{error.line_no}: {error.line}"
    return text


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Line-oriented set/print script interpreter")
    parser.add_argument("program", help="Source file path or literal source with -source")
    parser.add_argument("-source", "--source", dest="source_mode", action="store_true", help="Treat program argument as literal source text")
    parser.add_argument("-verbose", "--verbose", dest="verbose", action="store_true", help="Debug logging and a variable dump on errors")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    interpreter = Interpreter()
    try:
        if args.source_mode:
            interpreter.run_source(args.program)
        else:
            interpreter.run_file(args.program)
    except OSError as exc:
        print(f"Failed to read {args.program}: {exc}", file=sys.stderr)
        return 1
    except ScriptError as error:
        print(_format_error(error), file=sys.stderr)
        if args.verbose:
            print(f"  variables: {interpreter.variables.snapshot()}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
