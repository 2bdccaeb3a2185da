#!/usr/bin/env python3
"""Command line interface for aliasnav.

Subcommands:
    - aliasnav aliases: Show the merged alias table and base URL of a project
    - aliasnav resolve: Resolve a path-like string as if found in a file

Example:
    $ aliasnav aliases /my/project
    $ aliasnav resolve "@/assets/logo.png" --file /my/project/src/App.vue
    $ aliasnav resolve '<img src="../img/a.png">' --file src/pages/home.vue --json
"""

import argparse
import json
import logging
import os
import sys

from . import __version__
from .colors import get_colors
from .facade import ResolutionFacade


def add_aliases_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the aliases subcommand."""
    parser.add_argument(
        "root", nargs="?", default=".", help="Project root directory (default: .)"
    )
    parser.add_argument(
        "--compact", action="store_true", help="Output compact JSON (default: pretty-printed)"
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")


def add_resolve_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the resolve subcommand."""
    parser.add_argument("text", help="Text containing a path, URL or aliased path")
    parser.add_argument(
        "-f",
        "--file",
        default=None,
        help="File the text appears in (default: <root>/index.js)",
    )
    parser.add_argument(
        "-r", "--root", default=None, help="Project root (default: current directory)"
    )
    parser.add_argument("--json", action="store_true", help="Output the result as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")


def run_aliases(args) -> int:
    """Run the aliases command."""
    root = os.path.abspath(args.root)
    if not os.path.isdir(root):
        c = get_colors(no_color=args.no_color)
        print(f"{c.error('Error')}: not a directory: {root}", file=sys.stderr)
        return 2

    facade = ResolutionFacade([root])
    if args.compact:
        print(json.dumps(facade.describe(), separators=(",", ":")))
    else:
        print(json.dumps(facade.describe(), indent=2))
    return 0


def run_resolve(args) -> int:
    """Run the resolve command.

    Returns:
        0 when a path was found and resolved, 1 otherwise.
    """
    c = get_colors(no_color=args.no_color or args.json)

    root = os.path.abspath(args.root or os.getcwd())
    current_file = os.path.abspath(args.file) if args.file else os.path.join(root, "index.js")

    facade = ResolutionFacade([root])
    result = facade.resolve(args.text, current_file)

    if args.json:
        payload = None
        if result is not None:
            payload = {
                "location": result.location,
                "is_url": result.is_url,
                "match": result.match.text if result.match else None,
                "kind": result.match.kind.value if result.match else None,
            }
        print(json.dumps(payload))
        return 0 if result is not None else 1

    if result is None:
        print(f"{c.yellow('No path found in')} {args.text!r}", file=sys.stderr)
        return 1

    kind = result.match.kind.value if result.match else ("url" if result.is_url else "path")
    print(f"{c.magenta(kind)} {c.cyan(result.match.text if result.match else args.text)}")
    print(f"  -> {c.green(result.location)}")
    return 0


def main(argv=None) -> int:
    """Unified command-line interface for aliasnav.

    Usage:
        aliasnav aliases [ROOT] [--compact]
        aliasnav resolve TEXT [--file FILE] [--root ROOT] [--json]
    """
    parser = argparse.ArgumentParser(
        prog="aliasnav",
        description="Resolve aliased asset paths using a project's build-tool configuration",
        epilog="Run 'aliasnav <command> --help' for more information on a command.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    aliases_parser = subparsers.add_parser(
        "aliases",
        help="Show the merged alias table of a project",
        description="Read webpack, babel, tsconfig, jsconfig and vue configs and print the merged aliases.",
        epilog="Example: aliasnav aliases /my/project",
    )
    add_aliases_arguments(aliases_parser)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a path-like string",
        description="Find the first URL, relative path or aliased path in TEXT and resolve it.",
        epilog='Example: aliasnav resolve "@/assets/logo.png" --file src/App.vue',
    )
    add_resolve_arguments(resolve_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "aliases":
        return run_aliases(args)
    if args.command == "resolve":
        return run_resolve(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
