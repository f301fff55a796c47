"""
LocalTable CLI Tests
====================
Tests for argument parsing, command dispatch, rendering and configuration.
"""

import io
import json
import logging
import os
import shutil
import tempfile
import unittest
from unittest import mock

from localtable import config
from localtable.cli.main import main, parse_args, parse_id, load_fields, UsageError
from localtable.cli.renderer import Renderer
from localtable.errors import ValidationError
from localtable.storage.filestore import JSONFileStore

FIELDS = json.dumps([
    {"name": "firstName", "type": "str"},
    {"name": "loginCount", "type": "int", "default": 0},
])


class CLITestBase(unittest.TestCase):
    """Base with a temp store file."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix="localtable_cli_test_")
        self.store_path = os.path.join(self.test_dir, "store.json")

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def run_cli(self, *args, fields=FIELDS):
        out = io.StringIO()
        argv = ["--store", self.store_path, "--mode", "raw"]
        if fields is not None:
            argv += ["--fields", fields]
        code = main(argv + list(args), output=out)
        return code, out.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
# Argument Parsing
# ═══════════════════════════════════════════════════════════════════════════

class TestParseArgs(unittest.TestCase):

    def test_basic(self):
        opts = parse_args(["users", "get", "1"])
        self.assertEqual(opts.table, "users")
        self.assertEqual(opts.command, "get")
        self.assertEqual(opts.args, ["1"])

    def test_options(self):
        opts = parse_args(["--store", "x.json", "-v", "--strict", "t", "count"])
        self.assertEqual(opts.store, "x.json")
        self.assertTrue(opts.verbose)
        self.assertTrue(opts.strict)

    def test_negative_id_is_positional(self):
        opts = parse_args(["t", "delete", "-5"])
        self.assertEqual(opts.args, ["-5"])

    def test_help(self):
        self.assertTrue(parse_args(["--help"]).help)

    def test_errors(self):
        for argv in (["t"], ["t", "explode"], ["t", "get"], ["--bogus", "t", "all"], ["--store"]):
            with self.assertRaises(UsageError):
                parse_args(argv)

    def test_unknown_mode_is_usage_error(self):
        with self.assertRaises(UsageError):
            parse_args(["--mode", "fancy", "t", "count"])

    def test_limit(self):
        self.assertIsNone(parse_args(["t", "all"]).limit)
        self.assertEqual(parse_args(["--limit", "3", "t", "all"]).limit, 3)
        for argv in (["--limit", "x", "t", "all"], ["--limit", "-1", "t", "all"], ["--limit"]):
            with self.assertRaises(UsageError):
                parse_args(argv)

    def test_parse_id(self):
        self.assertEqual(parse_id("1"), 1)
        self.assertEqual(parse_id("2.5"), 2.5)
        self.assertEqual(parse_id("abc"), "abc")
        self.assertEqual(parse_id('"7"'), "7")
        self.assertEqual(parse_id("true"), "true")
        self.assertEqual(parse_id("[1]"), "[1]")

    def test_load_fields_inline_and_file(self):
        self.assertEqual(load_fields(None), [])
        self.assertEqual(len(load_fields(FIELDS)), 2)
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "fields.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write(json.dumps({"fields": [{"name": "a"}]}))
            self.assertEqual(load_fields("@" + path), [{"name": "a"}])
            with self.assertRaises(UsageError):
                load_fields("@" + os.path.join(d, "missing.json"))
        with self.assertRaises(UsageError):
            load_fields('"just a string"')


# ═══════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════

class TestCommands(CLITestBase):

    def test_insert_get(self):
        code, out = self.run_cli("users", "insert", "1", '{"firstName": "John"}')
        self.assertEqual(code, 0)
        self.assertIn("Inserted 1", out)

        code, out = self.run_cli("users", "get", "1")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0], "id|firstName|loginCount")
        self.assertEqual(lines[1], "1|John|0")

    def test_count_and_exists(self):
        self.run_cli("users", "insert", "a", '{"firstName": "Ann"}')
        self.assertEqual(self.run_cli("users", "count")[1].strip(), "1")
        self.assertEqual(self.run_cli("users", "exists", "a")[1].strip(), "true")
        self.assertEqual(self.run_cli("users", "exists", "b")[1].strip(), "false")

    def test_filter_and_all(self):
        self.run_cli("users", "insert", "1", '{"firstName": "John", "loginCount": 5}')
        self.run_cli("users", "insert", "2", '{"firstName": "Jane", "loginCount": 2}')
        code, out = self.run_cli("users", "filter", '{"loginCount": {">=": 4}}')
        self.assertEqual(code, 0)
        self.assertIn("1|John|5", out)
        self.assertNotIn("Jane", out)
        self.assertIn("1 row(s) returned", out)

        code, out = self.run_cli("users", "all")
        self.assertIn("2 row(s) returned", out)

    def test_update_delete_drop(self):
        self.run_cli("users", "update", "1", '{"firstName": "New"}')
        self.assertEqual(self.run_cli("users", "count")[1].strip(), "1")
        self.run_cli("users", "delete", "1")
        self.assertEqual(self.run_cli("users", "count")[1].strip(), "0")
        code, out = self.run_cli("users", "drop")
        self.assertEqual(code, 0)
        self.assertIn("Dropped table users", out)
        self.assertEqual(JSONFileStore(self.store_path).keys(), [])

    def test_not_found(self):
        code, out = self.run_cli("users", "get", "404")
        self.assertEqual(code, 1)
        self.assertTrue(out.startswith("NotFound:"))

    def test_validation_error(self):
        code, out = self.run_cli("users", "insert", "1", '{"loginCount": "x"}')
        self.assertEqual(code, 1)
        self.assertIn("ValidationError", out)
        self.assertIn("  - Missing data for firstName", out)

    def test_duplicate(self):
        self.run_cli("users", "insert", "1", '{"firstName": "A"}')
        code, out = self.run_cli("users", "insert", "1", '{"firstName": "B"}')
        self.assertEqual(code, 1)
        self.assertIn("AlreadyExists", out)

    def test_invalid_lookup(self):
        code, out = self.run_cli("users", "filter", '{"firstName": {"~=": "J"}}')
        self.assertEqual(code, 1)
        self.assertIn("QueryError", out)

    def test_bad_json_is_usage_error(self):
        code, out = self.run_cli("users", "insert", "1", "{oops")
        self.assertEqual(code, 2)
        self.assertIn("UsageError", out)

    def test_usage_error_prints_help(self):
        code, out = self.run_cli("users")
        self.assertEqual(code, 2)
        self.assertIn("Commands:", out)

    def test_unknown_mode_exit_two(self):
        out = io.StringIO()
        code = main(["--store", self.store_path, "--mode", "fancy", "users", "count"], output=out)
        self.assertEqual(code, 2)
        self.assertIn("UsageError", out.getvalue())
        self.assertFalse(os.path.exists(self.store_path))

    def test_limit_caps_rows_shown(self):
        for i in range(3):
            self.run_cli("users", "insert", str(i), '{"firstName": "U"}')
        code, out = self.run_cli("--limit", "2", "users", "all")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[1:3], ["0|U|0", "1|U|0"])
        self.assertNotIn("2|U|0", out)
        self.assertIn("display limit 2 reached", out)
        self.assertIn("3 row(s) returned", out)

    def test_help_exit_zero(self):
        out = io.StringIO()
        self.assertEqual(main(["--help"], output=out), 0)
        self.assertIn("Usage:", out.getvalue())

    def test_store_from_environment(self):
        env_path = os.path.join(self.test_dir, "env_store.json")
        out = io.StringIO()
        with mock.patch.dict(os.environ, {"LOCALTABLE_STORE": env_path}):
            code = main(["--fields", FIELDS, "users", "insert", "1", '{"firstName": "E"}'],
                        output=out)
        self.assertEqual(code, 0)
        self.assertIsNotNone(JSONFileStore(env_path).get("users_detail_1"))


# ═══════════════════════════════════════════════════════════════════════════
# Renderer
# ═══════════════════════════════════════════════════════════════════════════

class TestRenderer(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.renderer = Renderer(self.out)

    def test_table_mode(self):
        count = self.renderer.render_rows([{"id": 1, "name": "John"}, {"id": 22, "name": "Jo"}])
        self.assertEqual(count, 2)
        lines = self.out.getvalue().splitlines()
        self.assertEqual(lines[0], "+----+------+")
        self.assertEqual(lines[1], "| id | name |")
        self.assertEqual(lines[3], "|  1 | John |")
        self.assertEqual(lines[4], "| 22 | Jo   |")

    def test_vertical_mode(self):
        self.renderer.set_mode("vertical")
        self.renderer.render_rows([{"id": 1, "tags": ["a"], "ok": True, "note": None}])
        text = self.out.getvalue()
        self.assertIn("*** Row 1 ***", text)
        self.assertIn('tags: ["a"]', text)
        self.assertIn("ok: true", text)
        self.assertIn("note: null", text)

    def test_id_column_first(self):
        self.renderer.set_mode("raw")
        self.renderer.render_rows([{"b": 1, "id": "x"}])
        self.assertEqual(self.out.getvalue().splitlines()[0], "id|b")

    def test_display_limit(self):
        self.renderer.set_mode("raw")
        self.renderer.display_limit = 1
        shown = self.renderer.render_rows([{"id": 1}, {"id": 2}])
        self.assertEqual(shown, 1)
        self.assertIn("display limit 1 reached", self.out.getvalue())

    def test_headers_and_row_count_always_printed(self):
        self.renderer.set_mode("raw")
        self.renderer.render_rows([{"id": 1, "a": 2}])
        self.assertEqual(self.out.getvalue().splitlines(), ["id|a", "1|2", "", "1 row(s) returned"])

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            self.renderer.set_mode("fancy")

    def test_render_error_lists_details(self):
        self.renderer.render_error(ValidationError(["Missing data for a", "Missing data for b"]))
        lines = self.out.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("ValidationError:"))
        self.assertEqual(lines[1:], ["  - Missing data for a", "  - Missing data for b"])

    def test_unclassified_error(self):
        self.renderer.render_error(RuntimeError("boom"))
        self.assertEqual(self.out.getvalue().strip(), "Error[RuntimeError]: boom")


# ═══════════════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════════════

class TestConfig(unittest.TestCase):

    def test_store_path_override(self):
        self.assertEqual(config.store_path("x.json"), os.path.abspath("x.json"))

    def test_store_path_default(self):
        with mock.patch.dict(os.environ, {"LOCALTABLE_STORE": ""}):
            self.assertEqual(config.store_path(),
                             os.path.join(os.getcwd(), config.DEFAULT_STORE_FILE))

    def test_log_level(self):
        self.assertEqual(config.log_level(verbose=True), logging.DEBUG)
        with mock.patch.dict(os.environ, {"LOCALTABLE_LOG_LEVEL": "info"}):
            self.assertEqual(config.log_level(), logging.INFO)
        with mock.patch.dict(os.environ, {"LOCALTABLE_LOG_LEVEL": ""}):
            self.assertEqual(config.log_level(), logging.WARNING)
        with mock.patch.dict(os.environ, {"LOCALTABLE_LOG_LEVEL": "chatty"}):
            with self.assertRaises(ValueError):
                config.log_level()


if __name__ == "__main__":
    unittest.main()
