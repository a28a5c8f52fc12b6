# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import stat
import unittest

import yaml

from usertests.lib.credentials import (
    StoredToken,
    credentials_path,
    load_credentials,
    remove_credentials,
)
from usertests.lib.errors import CliError
from test_utils import config_env, store_token


class CredentialStoreTests(unittest.TestCase):
    def test_save_and_load(self) -> None:
        with config_env():
            saved = store_token("stage", access_token="abc")
            loaded = load_credentials("stage")
        self.assertEqual(loaded, saved)

    def test_file_layout_and_mode(self) -> None:
        with config_env() as ctx:
            store_token("production")
            path = credentials_path()
            self.assertEqual(path, ctx.config_root / "credentials.yml")
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
            mode = stat.S_IMODE(path.stat().st_mode)
        self.assertEqual(list(data["configs"]), ["production"])
        self.assertEqual(data["configs"]["production"]["token"]["access_token"], "tok_123")
        self.assertEqual(mode, 0o600)

    def test_environments_are_independent(self) -> None:
        with config_env():
            store_token("stage", access_token="s")
            store_token("production", access_token="p")
            self.assertEqual(load_credentials("stage").token.access_token, "s")
            self.assertEqual(load_credentials("production").token.access_token, "p")
            self.assertIsNone(load_credentials("local"))

    def test_missing_file(self) -> None:
        with config_env():
            self.assertIsNone(load_credentials("stage"))
            with self.assertRaises(FileNotFoundError):
                remove_credentials()
            with self.assertRaises(FileNotFoundError):
                remove_credentials("stage")

    def test_remove_last_environment_removes_file(self) -> None:
        with config_env():
            store_token("stage")
            store_token("local")
            remove_credentials("stage")
            self.assertTrue(credentials_path().is_file())
            self.assertIsNone(load_credentials("stage"))
            remove_credentials("local")
            self.assertFalse(credentials_path().exists())

    def test_malformed_entry(self) -> None:
        with config_env() as ctx:
            ctx.config_root.mkdir(parents=True)
            credentials_path().write_text("configs:\n  stage:\n    environment: stage\n", encoding="utf-8")
            with self.assertRaises(CliError) as exc:
                load_credentials("stage")
        self.assertIn("malformed", exc.exception.message)

    def test_token_expiry(self) -> None:
        token = StoredToken(access_token="t", expires_at=100.0, issued_at=0.0)
        self.assertTrue(token.is_expired(now=100.0))
        self.assertFalse(token.is_expired(now=99.0))
