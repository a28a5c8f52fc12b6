# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import unittest
import unittest.mock
from contextlib import contextmanager

import requests

from usertests.cli.main import REGISTRY
from usertests.cli.registry import Alias, CommandGroup, CommandRegistry, Subcommand, flag, option
from usertests.lib.errors import HttpError, fail
from test_utils import config_env, run_cli


def _registry(handler, *, alias_token: str = "go") -> CommandRegistry:
    run_sub = Subcommand(
        "run",
        "Run it",
        handler,
        arguments=(option("name", "<name>", required=True), flag("fast")),
    )
    return CommandRegistry(
        [CommandGroup("job", "Jobs", subcommands=(run_sub,))],
        aliases=(Alias(alias_token, "job", "run"),),
    )


@contextmanager
def _swap_handler(sub: Subcommand, handler):
    """Temporarily replace the handler of a (frozen) Subcommand."""
    original = sub.handler
    object.__setattr__(sub, "handler", handler)
    try:
        yield handler
    finally:
        object.__setattr__(sub, "handler", original)


class UnknownCommandTests(unittest.TestCase):
    def test_unknown_command_names_token(self) -> None:
        code, out, err = run_cli(["bogus"])
        self.assertEqual(code, 1)
        self.assertIn("Unknown command: bogus", err)
        self.assertIn("usertests help", err)
        self.assertEqual(out, "")

    def test_unknown_subcommand(self) -> None:
        code, _, err = run_cli(["project", "explode"])
        self.assertEqual(code, 1)
        self.assertIn("Unknown project command: explode", err)

    def test_parse_failure_exits_one(self) -> None:
        code, _, err = run_cli(["project", "get"])
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)
        self.assertIn("<projectId>", err)

    def test_version(self) -> None:
        with unittest.mock.patch(
            "usertests.cli.main.get_version_info", return_value=("1.2.3", None)
        ):
            code, out, _ = run_cli(["--version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "usertests 1.2.3")


class AliasDispatchTests(unittest.TestCase):
    def test_alias_parses_like_target(self) -> None:
        seen = []
        registry = _registry(lambda inv: seen.append(inv) or 0)
        self.assertEqual(run_cli(["go", "--name", "x", "--fast"], registry=registry)[0], 0)
        self.assertEqual(run_cli(["job", "run", "--name", "x", "--fast"], registry=registry)[0], 0)
        self.assertEqual(len(seen), 2)
        self.assertEqual(seen[0].values, seen[1].values)
        self.assertIs(seen[0].subcommand, seen[1].subcommand)
        self.assertEqual(seen[0].group.name, "job")

    def test_builtin_login_alias_dispatches_auth_login(self) -> None:
        _, sub = REGISTRY.resolve_alias("login")
        login = unittest.mock.Mock(return_value=None)
        with _swap_handler(sub, login), config_env():
            code_alias = run_cli(["login", "--env", "production"])[0]
            code_full = run_cli(["auth", "login", "--env", "production"])[0]
        self.assertEqual((code_alias, code_full), (0, 0))
        self.assertEqual(login.call_count, 2)
        first, second = (c.args[0] for c in login.call_args_list)
        self.assertEqual(first.values, second.values)
        self.assertEqual(first.values["env"], "production")

    def test_group_wins_over_alias_with_same_token(self) -> None:
        group_handler = unittest.mock.Mock(return_value=0)
        alias_handler = unittest.mock.Mock(return_value=0)
        registry = CommandRegistry(
            [
                CommandGroup("job", "", subcommands=(Subcommand("run", "", group_handler),)),
                CommandGroup("other", "", subcommands=(Subcommand("job", "", alias_handler),)),
            ],
            aliases=(Alias("job", "other", "job"),),
        )
        code, _, _ = run_cli(["job", "run"], registry=registry)
        self.assertEqual(code, 0)
        group_handler.assert_called_once()
        alias_handler.assert_not_called()


class ErrorBoundaryTests(unittest.TestCase):
    def test_handler_return_value_is_exit_code(self) -> None:
        self.assertEqual(run_cli(["job", "run", "--name", "x"], registry=_registry(lambda inv: None))[0], 0)
        self.assertEqual(run_cli(["job", "run", "--name", "x"], registry=_registry(lambda inv: 3))[0], 3)

    def test_cli_error_uses_its_exit_code(self) -> None:
        def handler(inv):
            fail("nope", exit_code=4)

        with config_env():
            code, _, err = run_cli(["job", "run", "--name", "x"], registry=_registry(handler))
        self.assertEqual(code, 4)
        self.assertIn("Error: nope", err)

    def test_http_error(self) -> None:
        def handler(inv):
            raise HttpError(404, "Project not found")

        with config_env():
            code, _, err = run_cli(["job", "run", "--name", "x"], registry=_registry(handler))
        self.assertEqual(code, 1)
        self.assertIn("HTTP 404: Project not found", err)

    def test_network_error(self) -> None:
        def handler(inv):
            raise requests.ConnectionError("connection refused")

        with config_env():
            code, _, err = run_cli(["job", "run", "--name", "x"], registry=_registry(handler))
        self.assertEqual(code, 1)
        self.assertIn("connection refused", err)

    def test_keyboard_interrupt(self) -> None:
        def handler(inv):
            raise KeyboardInterrupt

        with config_env():
            code, _, _ = run_cli(["job", "run", "--name", "x"], registry=_registry(handler))
        self.assertEqual(code, 130)

    def test_unexpected_exception_is_reported_and_logged(self) -> None:
        def handler(inv):
            raise RuntimeError("boom")

        with config_env() as ctx:
            code, _, err = run_cli(["job", "run", "--name", "x"], registry=_registry(handler))
            log = (ctx.state_dir / "usertests.log").read_text(encoding="utf-8")
        self.assertEqual(code, 1)
        self.assertIn("unexpected failure: boom", err)
        self.assertIn("RuntimeError: boom", log)

    def test_parse_failure_does_not_call_handler(self) -> None:
        handler = unittest.mock.Mock(return_value=0)
        with config_env():
            code, _, err = run_cli(["job", "run"], registry=_registry(handler))
        self.assertEqual(code, 1)
        self.assertIn("--name", err)
        handler.assert_not_called()
