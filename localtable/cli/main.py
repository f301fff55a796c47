"""
LocalTable Command Line
=======================
Runs one table operation against a JSON file store and prints the result.

Usage:
    localtable [options] TABLE COMMAND [ARGS]

Exit status: 0 on success, 1 when the operation fails, 2 on bad usage.
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, List, Optional, TextIO

from localtable import config
from localtable.cli.renderer import MODES, Renderer
from localtable.errors import TableError
from localtable.query.criteria import Declarative
from localtable.storage.filestore import JSONFileStore
from localtable.table import Table

logger = logging.getLogger(__name__)

HELP_TEXT = """
LocalTable - schema-validated tables over a key-value store

Usage:
    localtable [options] TABLE COMMAND [ARGS]

Options:
    --help, -h          Show this help
    --store PATH        Store file (default: $LOCALTABLE_STORE or ./localtable_data.json)
    --fields SPEC       Field declarations as JSON, or @FILE to read them from a file
    --mode MODE         Output mode: table, vertical, raw (default: table)
    --limit N           Show at most N rows (the row count still covers all)
    --strict            filter: exclude rows missing a filtered field
    --verbose, -v       Debug logging to stderr

Commands:
    count               Number of rows
    all                 Every row, in insertion order
    get ID              One row
    exists ID           true / false
    insert ID JSON      Insert a new row
    update ID JSON      Merge fields into a row (creates it if missing)
    delete ID           Remove a row (no-op if missing)
    filter JSON         Rows matching {"field": {"op": value}}, ops: = != > >= < <=
    drop                Remove the table and all its rows

IDs are read as JSON when possible (1 is a number, abc is a string).
"""

# command -> number of positional arguments
COMMANDS = {
    "count": 0,
    "all": 0,
    "get": 1,
    "exists": 1,
    "insert": 2,
    "update": 2,
    "delete": 1,
    "filter": 1,
    "drop": 0,
}


class UsageError(Exception):
    """Bad command-line arguments."""
    pass


@dataclass
class Options:
    store: Optional[str] = None
    fields: Optional[str] = None
    mode: str = "table"
    limit: Optional[int] = None
    strict: bool = False
    verbose: bool = False
    help: bool = False
    table: Optional[str] = None
    command: Optional[str] = None
    args: List[str] = field(default_factory=list)


def parse_args(argv: List[str]) -> Options:
    """Parse CLI arguments. Raises UsageError."""
    opts = Options()
    positional: List[str] = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("--help", "-h"):
            opts.help = True
            i += 1
        elif arg in ("--verbose", "-v"):
            opts.verbose = True
            i += 1
        elif arg == "--strict":
            opts.strict = True
            i += 1
        elif arg in ("--store", "--fields", "--mode"):
            if i + 1 >= len(argv):
                raise UsageError(f"Option {arg} needs a value")
            setattr(opts, arg[2:], argv[i + 1])
            i += 2
        elif arg == "--limit":
            if i + 1 >= len(argv):
                raise UsageError("Option --limit needs a value")
            opts.limit = _parse_limit(argv[i + 1])
            i += 2
        elif arg.startswith("-") and len(arg) > 1 and not _looks_numeric(arg):
            raise UsageError(f"Unknown option: {arg}")
        else:
            positional.append(arg)
            i += 1

    if opts.help:
        return opts

    if opts.mode not in MODES:
        raise UsageError(f"Unknown output mode {opts.mode!r}. Valid modes: {list(MODES)}")

    if len(positional) < 2:
        raise UsageError("Expected TABLE and COMMAND")

    opts.table, opts.command, opts.args = positional[0], positional[1], positional[2:]
    if opts.command not in COMMANDS:
        raise UsageError(f"Unknown command: {opts.command}")
    expected = COMMANDS[opts.command]
    if len(opts.args) != expected:
        raise UsageError(f"'{opts.command}' takes {expected} argument(s), got {len(opts.args)}")
    return opts


def _parse_limit(text: str) -> int:
    try:
        limit = int(text)
    except ValueError:
        raise UsageError(f"--limit needs a whole number, got {text!r}") from None
    if limit < 0:
        raise UsageError(f"--limit cannot be negative, got {limit}")
    return limit


def _looks_numeric(arg: str) -> bool:
    # negative ids such as -5 are positional
    try:
        float(arg)
        return True
    except ValueError:
        return False


# ─── Argument decoding ─────────────────────────────────────────────────────

def parse_id(text: str) -> Any:
    """JSON numbers and quoted strings decode; anything else is a plain string id."""
    try:
        value = json.loads(text)
    except ValueError:
        return text
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return value
    return text


def parse_json_object(text: str, what: str) -> dict:
    try:
        value = json.loads(text)
    except ValueError as e:
        raise UsageError(f"{what} is not valid JSON: {e}") from e
    if not isinstance(value, dict):
        raise UsageError(f"{what} must be a JSON object")
    return value


def load_fields(spec: Optional[str]) -> list:
    """Field declarations from inline JSON or @path. None means no fields."""
    if not spec:
        return []
    if spec.startswith("@"):
        path = spec[1:]
        if not os.path.isfile(path):
            raise UsageError(f"Fields file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            spec = f.read()
    try:
        fields = json.loads(spec)
    except ValueError as e:
        raise UsageError(f"--fields is not valid JSON: {e}") from e
    if isinstance(fields, dict):
        fields = fields.get("fields", [])
    if not isinstance(fields, list):
        raise UsageError("--fields must be a JSON array of field declarations")
    return fields


# ─── Dispatch ──────────────────────────────────────────────────────────────

def run_command(table: Table, opts: Options, renderer: Renderer) -> None:
    """Execute one parsed command against table and render the outcome."""
    command, args = opts.command, opts.args

    if command == "count":
        renderer.render_value(table.count())
    elif command == "all":
        renderer.render_rows(table.all())
    elif command == "get":
        renderer.render_rows([table.get(parse_id(args[0]))])
    elif command == "exists":
        renderer.render_value(table.exists(parse_id(args[0])))
    elif command == "insert":
        row_id = parse_id(args[0])
        table.insert(row_id, parse_json_object(args[1], "Row data"))
        renderer.render_message(f"Inserted {row_id!r} into {table.table_name}")
    elif command == "update":
        row_id = parse_id(args[0])
        table.update(row_id, parse_json_object(args[1], "Row data"))
        renderer.render_message(f"Updated {row_id!r} in {table.table_name}")
    elif command == "delete":
        row_id = parse_id(args[0])
        table.delete(row_id)
        renderer.render_message(f"Deleted {row_id!r} from {table.table_name}")
    elif command == "filter":
        criteria = Declarative(parse_json_object(args[0], "Filter"), strict=opts.strict)
        renderer.render_rows(table.filter(criteria))
    elif command == "drop":
        table.drop()
        renderer.render_message(f"Dropped table {table.table_name}")
    else:
        raise UsageError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None, output: Optional[TextIO] = None) -> int:
    """Parse CLI arguments, run the command, return the exit status."""
    argv = sys.argv[1:] if argv is None else argv
    out = output or sys.stdout
    renderer = Renderer(out)

    try:
        opts = parse_args(argv)
    except UsageError as e:
        renderer.render_error(e)
        print(HELP_TEXT, file=out)
        return 2

    if opts.help:
        print(HELP_TEXT, file=out)
        return 0

    try:
        logging.basicConfig(
            level=config.log_level(opts.verbose),
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        renderer.set_mode(opts.mode)
        renderer.display_limit = opts.limit
        fields = load_fields(opts.fields)
        store = JSONFileStore(config.store_path(opts.store))
        table = Table(store, opts.table, fields)
        run_command(table, opts, renderer)
    except UsageError as e:
        renderer.render_error(e)
        return 2
    except (TableError, ValueError, TypeError, OSError) as e:
        logger.debug("Command %s failed", opts.command, exc_info=True)
        renderer.render_error(e)
        return 1

    return 0
