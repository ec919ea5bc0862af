#!/usr/bin/env python3
"""
Debug helper for inspecting how nulib parses a command line.

Usage:
    python bin/nulib-dump.py -xsr archive.zip docs/

Prints the validated parse state, or the error nulib would report, without
opening the archive. Useful when changing the capability table.
"""

import sys

from nulib.core.errors import NulibError
from nulib.core.modifiers import lex_bundle
from nulib.core.scanner import parse_args


def dump_bundles(args):
    """Show how each hyphenated token splits into modifier letters."""
    for i, arg in enumerate(args):
        if arg.startswith("-") and arg != "-":
            body = arg[1:]
            if i == 0:
                print(f"command token: {body[:1]!r} bundle: {lex_bundle(body[1:])}")
            else:
                print(f"bundle: {lex_bundle(body)}")
        elif i > 0:
            break


def main():
    if len(sys.argv) < 2:
        print("Usage: nulib-dump.py -command[modifiers] archive [files]")
        print("Example: nulib-dump.py -aee archive.zip file.txt")
        sys.exit(1)

    args = sys.argv[1:]
    print(f"Parsing: {args!r}")
    print("-" * 40)
    dump_bundles(args)

    try:
        state = parse_args(args)
    except NulibError as e:
        print(f"{type(e).__name__}: {e.message}")
        sys.exit(2)
    print(state.describe())


if __name__ == "__main__":
    main()
