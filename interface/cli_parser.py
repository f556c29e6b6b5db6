"""CLI parser construction for the todo CLI."""

import argparse
from typing import Any, List

POSITION_HELP = "1-based position in the listing shown for the same --path filters"


def _position(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid position: {raw!r}")


def add_common_args(sp: argparse.ArgumentParser, *, nested: bool = False) -> argparse.ArgumentParser:
    """Scope/output options accepted both before and after the subcommand.

    Nested copies use SUPPRESS defaults so they do not overwrite values given
    before the subcommand. Paths given after the subcommand land in
    ``sub_paths``; see scope_paths() for the union.
    """
    default = argparse.SUPPRESS if nested else None
    sp.add_argument(
        "--path",
        "-p",
        dest="sub_paths" if nested else "paths",
        action="append",
        default=default,
        metavar="PATH",
        help="limit to items created under PATH (repeatable; items under any PATH match)",
    )
    sp.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=argparse.SUPPRESS if nested else False,
        help="echo storage paths, raw store contents and the composed message",
    )
    sp.add_argument(
        "--json",
        dest="json",
        action="store_true",
        default=argparse.SUPPRESS if nested else False,
        help="structured JSON output",
    )
    sp.add_argument("--store-dir", default=default, help="override the storage directory")
    return sp


def scope_paths(args) -> List[str]:
    """All --path values, from both sides of the subcommand."""
    return list(getattr(args, "paths", None) or []) + list(getattr(args, "sub_paths", None) or [])


def build_parser(commands: Any) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todo",
        description=(
            "todo — personal task list scoped to directories.\n"
            "Each item remembers the directory it was added in; --path limits a run to items\n"
            "under the given directories. Positions always refer to the listing for the\n"
            "same --path filters."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_common_args(parser)
    parser.add_argument("--version", action="store_true", help="Show version and exit")

    sub = parser.add_subparsers(dest="command", help="Commands")
    parser.set_defaults(func=commands.cmd_list, command="list")

    # list
    lp = sub.add_parser("list", help="List items in scope (default)")
    add_common_args(lp, nested=True)
    lp.set_defaults(func=commands.cmd_list)

    # add
    ap = sub.add_parser("add", help="Add an item in the current directory")
    ap.add_argument("words", nargs="*", metavar="WORD", help="message words, joined with single spaces")
    add_common_args(ap, nested=True)
    ap.set_defaults(func=commands.cmd_add)

    # delete
    dp = sub.add_parser("delete", help="Delete an item by position")
    dp.add_argument("position", type=_position, help=POSITION_HELP)
    add_common_args(dp, nested=True)
    dp.set_defaults(func=commands.cmd_delete)

    # complete
    cp = sub.add_parser("complete", help="Mark an item completed by position")
    cp.add_argument("position", type=_position, help=POSITION_HELP)
    add_common_args(cp, nested=True)
    cp.set_defaults(func=commands.cmd_complete)

    return parser


__all__ = ["build_parser", "add_common_args", "scope_paths", "POSITION_HELP"]
