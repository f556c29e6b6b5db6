#!/usr/bin/env python3
"""
todo — directory-scoped personal task list.

Thin facade: builds the parser, wires default dependencies and dispatches
to the command handlers in cli_commands.
"""

import argparse
import logging
import os
import sys
from importlib.metadata import version as pkg_version, PackageNotFoundError
from typing import List, Optional

from interface.cli_commands import (
    cmd_add as _cmd_add,
    cmd_complete as _cmd_complete,
    cmd_delete as _cmd_delete,
    cmd_list as _cmd_list,
    default_deps,
)
from interface.cli_parser import build_parser as build_cli_parser

DIST_NAME = "scoped-todo"


def cmd_list(args: argparse.Namespace) -> int:
    """List in-scope items (delegates to cli_commands)."""
    return _cmd_list(args, default_deps())


def cmd_add(args: argparse.Namespace) -> int:
    """Add an item (delegates to cli_commands)."""
    return _cmd_add(args, default_deps())


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete an item by position (delegates to cli_commands)."""
    return _cmd_delete(args, default_deps())


def cmd_complete(args: argparse.Namespace) -> int:
    """Complete an item by position (delegates to cli_commands)."""
    return _cmd_complete(args, default_deps())


def configure_logging() -> None:
    level = logging.DEBUG if os.environ.get("SCOPED_TODO_DEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    return build_cli_parser(commands=sys.modules[__name__])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "version", False):
        try:
            print(pkg_version(DIST_NAME))
        except PackageNotFoundError:
            print("0.0.0")
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
