#!/usr/bin/env python3
"""
Expand an abbreviation from the command line, the way the server would.
Usage: emmet-expand "ul>li.item$*3" [--stylesheet] [--option output.indent="  "]
"""

import argparse
import json
import sys

from emmetls.engine import MARKUP, STYLESHEET, EmmetError, expand, extract, resolve_config


def parse_option(text: str) -> tuple[str, object]:
    """Split ``name=value``; the value is read as JSON when it parses."""
    name, sep, raw = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {text!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return name, value


def main(argv=None):
    parser = argparse.ArgumentParser(description="Expand an Emmet abbreviation")
    parser.add_argument("line", help="Line of text ending with the abbreviation")
    parser.add_argument(
        "--stylesheet", action="store_true", help="Use the stylesheet grammar"
    )
    parser.add_argument(
        "--column", type=int, help="Cursor column (0-based, defaults to end of line)"
    )
    parser.add_argument(
        "--option",
        action="append",
        type=parse_option,
        default=[],
        metavar="NAME=VALUE",
        help="Override a configuration option (repeatable)",
    )

    args = parser.parse_args(argv)
    syntax = STYLESHEET if args.stylesheet else MARKUP

    found = extract(args.line, args.column, syntax)
    if found is None:
        print("No abbreviation found", file=sys.stderr)
        return 1

    config = resolve_config(syntax, dict(args.option))
    for option in config.rejected:
        print(f"Ignoring invalid option: {option}", file=sys.stderr)

    try:
        print(expand(found.abbreviation, config))
    except EmmetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
