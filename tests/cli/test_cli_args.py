# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import json
import tempfile
import unittest
from pathlib import Path

from usertests.cli.args import (
    ParseError,
    environment,
    parse_header_pairs,
    parse_invocation,
    parse_json_or_file,
)
from usertests.cli.registry import CommandGroup, Subcommand, flag, option, positional, variadic
from usertests.lib.errors import CliError
from test_utils import config_env


def _noop(inv):
    return 0


SUB = Subcommand(
    "create",
    "",
    _noop,
    arguments=(
        positional("project_id", "<projectId>"),
        option("name", "<name>", required=True),
        option("description", "<text>"),
        option("header", "<key:value>", repeatable=True),
        flag("dry-run"),
    ),
)
GROUP = CommandGroup("project", "", subcommands=(SUB,))


def parse(*tokens: str):
    return parse_invocation(GROUP, SUB, list(tokens))


class ParseInvocationTests(unittest.TestCase):
    def test_space_and_equals_forms_are_equivalent(self) -> None:
        a = parse("p1", "--name", "Demo")
        b = parse("p1", "--name=Demo")
        self.assertEqual(a.values, b.values)
        self.assertEqual(a["name"], "Demo")
        self.assertEqual(a["project_id"], "p1")

    def test_defaults(self) -> None:
        inv = parse("p1", "--name", "Demo")
        self.assertIsNone(inv.values["description"])
        self.assertEqual(inv.values["header"], [])
        self.assertIs(inv.values["dry_run"], False)

    def test_flag_consumes_no_value(self) -> None:
        inv = parse("--dry-run", "p1", "--name", "Demo")
        self.assertIs(inv["dry_run"], True)
        self.assertEqual(inv["project_id"], "p1")

    def test_flag_with_inline_value_fails(self) -> None:
        with self.assertRaises(ParseError):
            parse("p1", "--name", "Demo", "--dry-run=yes")

    def test_repeatable_option_accumulates(self) -> None:
        inv = parse("p1", "--name", "D", "--header", "a:1", "--header=b:2")
        self.assertEqual(inv["header"], ["a:1", "b:2"])

    def test_missing_positional_names_placeholder(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("--name", "Demo")
        self.assertIn("<projectId>", ctx.exception.message)

    def test_missing_required_option_names_flag(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("p1")
        self.assertIn("--name", ctx.exception.message)

    def test_option_without_value_fails(self) -> None:
        with self.assertRaises(ParseError):
            parse("p1", "--name")
        with self.assertRaises(ParseError):
            parse("p1", "--name", "--dry-run")

    def test_unknown_option_names_token(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("p1", "--name", "D", "--bogus", "x")
        self.assertIn("--bogus", ctx.exception.message)

    def test_extra_positionals_rejected(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("p1", "p2", "--name", "D")
        self.assertIn("p2", ctx.exception.message)

    def test_help_short_circuits_validation(self) -> None:
        for token in ("--help", "-h"):
            inv = parse("--bogus", token)
            self.assertTrue(inv.help_requested)
            self.assertEqual(inv.values, {})

    def test_double_dash_ends_options(self) -> None:
        inv = parse("p1", "--name", "D", "--", "--help", "extra")
        self.assertFalse(inv.help_requested)
        self.assertEqual(inv.residual, ["--help", "extra"])

    def test_parse_error_is_cli_error(self) -> None:
        self.assertTrue(issubclass(ParseError, CliError))

    def test_variadic_collects_remaining(self) -> None:
        sub = Subcommand("run", "", _noop, arguments=(positional("a", "<a>"), variadic("rest", "<arg>")))
        group = CommandGroup("g", "", subcommands=(sub,))
        inv = parse_invocation(group, sub, ["x", "y", "z"])
        self.assertEqual(inv["a"], "x")
        self.assertEqual(inv["rest"], ["y", "z"])


class ValueHelperTests(unittest.TestCase):
    def test_parse_json_inline(self) -> None:
        self.assertEqual(parse_json_or_file('{"a": 1}', "--data"), {"a": 1})
        self.assertEqual(parse_json_or_file("[1, 2]", "--data"), [1, 2])
        self.assertEqual(parse_json_or_file("42", "--data"), 42)
        self.assertIs(parse_json_or_file("true", "--data"), True)

    def test_parse_json_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "body.json"
            path.write_text(json.dumps({"name": "Demo"}), encoding="utf-8")
            self.assertEqual(parse_json_or_file(f"@{path}", "--data"), {"name": "Demo"})
            self.assertEqual(parse_json_or_file(str(path), "--data"), {"name": "Demo"})

    def test_parse_json_invalid(self) -> None:
        with self.assertRaises(CliError) as ctx:
            parse_json_or_file("{not json", "--data")
        self.assertIn("--data", ctx.exception.message)
        with self.assertRaises(CliError):
            parse_json_or_file("@/nonexistent/body.json", "--data")

    def test_parse_header_pairs(self) -> None:
        self.assertEqual(
            parse_header_pairs(["x-a: 1", "Authorization:Bearer t:x"]),
            {"x-a": "1", "Authorization": "Bearer t:x"},
        )

    def test_parse_header_pairs_rejects_malformed(self) -> None:
        for raw in ("novalue", ":x", "k:"):
            with self.assertRaises(CliError) as ctx:
                parse_header_pairs([raw])
            self.assertIn("key:value", ctx.exception.message)

    def test_environment_from_options(self) -> None:
        sub = Subcommand("list", "", _noop, arguments=(option("env", "<env>"), flag("local")))
        group = CommandGroup("g", "", subcommands=(sub,))
        with config_env():
            self.assertEqual(environment(parse_invocation(group, sub, [])), "stage")
            self.assertEqual(environment(parse_invocation(group, sub, ["--env", "staging"])), "stage")
            self.assertEqual(environment(parse_invocation(group, sub, ["--env=production"])), "production")
            self.assertEqual(environment(parse_invocation(group, sub, ["--local"])), "local")
            with self.assertRaises(CliError):
                environment(parse_invocation(group, sub, ["--env", "moon"]))
