"""Command handlers for the todo CLI.

Each handler turns parsed args into one TodoManager cycle and renders the
result as plain text or, with --json, as a structured response.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from application.mutations import AddItem
from application.scope import in_scope
from application.todo_manager import TodoManager
from config import get_user_time_format
from core import Record, TodoError, canonicalize_path, current_directory
from infrastructure.json_store import JsonRecordStore
from infrastructure.store_location import StoreLocation, resolve_store_location
from interface.cli_io import plain_error, record_to_dict, structured_error, structured_response
from interface.cli_parser import scope_paths

logger = logging.getLogger("scoped_todo.cli")

Echo = Callable[[str], None]


@dataclass
class CliDeps:
    resolve_location: Callable[..., StoreLocation]
    store_factory: Callable[..., Any]
    manager_factory: Callable[[Any], Any]
    canonicalize: Callable[[str], Path]
    cwd: Callable[[], Path]
    time_format: Callable[[], str]
    echo: Echo = print


def default_deps() -> CliDeps:
    return CliDeps(
        resolve_location=resolve_store_location,
        store_factory=JsonRecordStore,
        manager_factory=TodoManager,
        canonicalize=canonicalize_path,
        cwd=current_directory,
        time_format=get_user_time_format,
    )


class Invocation:
    """Per-run output state: verbose lines go to stdout, or into the JSON payload with --json."""

    def __init__(self, args, deps: CliDeps):
        self.args = args
        self.deps = deps
        self.json = bool(getattr(args, "json", False))
        self.verbose = bool(getattr(args, "verbose", False))
        self.captured: List[str] = []

    def note(self, line: str) -> None:
        if not self.verbose:
            return
        if self.json:
            self.captured.append(line)
        else:
            self.deps.echo(line)

    def payload(self, **values: Any) -> Dict[str, Any]:
        if self.captured:
            values["verbose"] = list(self.captured)
        return values

    def build_manager(self):
        location = self.deps.resolve_location(getattr(self.args, "store_dir", None))
        self.note(str(location.directory))
        self.note(str(location.path))
        store = self.deps.store_factory(location, echo=self.note if self.verbose else None)
        return self.deps.manager_factory(store)

    def filters(self) -> List[Path]:
        return [self.deps.canonicalize(raw) for raw in scope_paths(self.args)]

    def fail(self, exc: TodoError) -> int:
        logger.debug("%s failed: %s", self.args.command, exc)
        if self.json:
            return structured_error(self.args.command, str(exc), payload=self.payload(code=exc.code))
        return plain_error(str(exc))


def _listing(records: List[Record]) -> List[dict]:
    return [record_to_dict(r, position=i) for i, r in enumerate(records, start=1)]


def cmd_list(args, deps: CliDeps) -> int:
    run = Invocation(args, deps)
    try:
        filters = run.filters()
        records = run.build_manager().list_items(filters)
    except TodoError as exc:
        return run.fail(exc)
    if run.json:
        return structured_response(
            "list",
            message=f"{len(records)} item(s) in scope",
            payload=run.payload(filters=[str(f) for f in filters], items=_listing(records)),
        )
    time_format = deps.time_format()
    for position, record in enumerate(records, start=1):
        deps.echo(record.display_line(position, time_format))
    return 0


def cmd_add(args, deps: CliDeps) -> int:
    run = Invocation(args, deps)
    try:
        filters = run.filters()
        manager = run.build_manager()
        mutation = AddItem.from_words(getattr(args, "words", None) or [], deps.cwd())
        result = manager.run(mutation, filters)
    except TodoError as exc:
        return run.fail(exc)
    record = result.affected
    # The store contents were echoed during the load; the message follows them.
    run.note(mutation.message)
    # An item added outside the active filters gets no position in their listing.
    position: Optional[int] = len(result.in_scope) if in_scope(record, filters) else None
    if run.json:
        return structured_response(
            "add",
            message=f"Added #{position}" if position else "Added outside the current --path filters",
            payload=run.payload(item=record_to_dict(record, position=position)),
        )
    if position:
        deps.echo(f"Added {position}: {record.message}")
    else:
        deps.echo(f"Added: {record.message} (outside the current --path filters)")
    return 0


def _positional(args, deps: CliDeps, verb: str) -> int:
    run = Invocation(args, deps)
    try:
        filters = run.filters()
        manager = run.build_manager()
        action = manager.delete if verb == "delete" else manager.complete
        record = action(args.position, filters)
    except TodoError as exc:
        return run.fail(exc)
    label = "Deleted" if verb == "delete" else "Completed"
    if run.json:
        return structured_response(
            verb,
            message=f"{label} #{args.position}",
            payload=run.payload(item=record_to_dict(record, position=args.position)),
        )
    deps.echo(f"{label} {args.position}: {record.message}")
    return 0


def cmd_delete(args, deps: CliDeps) -> int:
    return _positional(args, deps, "delete")


def cmd_complete(args, deps: CliDeps) -> int:
    return _positional(args, deps, "complete")


__all__ = ["CliDeps", "Invocation", "default_deps", "cmd_list", "cmd_add", "cmd_delete", "cmd_complete"]
