# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import json
import unittest
import unittest.mock
from importlib import metadata

from usertests.lib.core import version


class VersionTests(unittest.TestCase):
    def test_format_version_string(self) -> None:
        self.assertEqual(version.format_version_string("1.0.0", None), "1.0.0")
        self.assertEqual(version.format_version_string("1.0.0", "abc1234"), "1.0.0 [abc1234]")

    def _dist(self, direct_url: str | None):
        dist = unittest.mock.Mock()
        dist.read_text.return_value = direct_url
        return dist

    def test_pep610_revision_from_vcs_install(self) -> None:
        payload = json.dumps({"url": "https://example.test/repo.git", "vcs_info": {"vcs": "git", "commit_id": "deadbeef"}})
        with unittest.mock.patch.object(metadata, "distribution", return_value=self._dist(payload)):
            self.assertEqual(version._get_pep610_revision(), "deadbeef")

    def test_pep610_missing(self) -> None:
        with unittest.mock.patch.object(
            metadata, "distribution", side_effect=metadata.PackageNotFoundError("usertests")
        ):
            self.assertIsNone(version._get_pep610_revision())
        with unittest.mock.patch.object(metadata, "distribution", return_value=self._dist(None)):
            self.assertIsNone(version._get_pep610_revision())
        with unittest.mock.patch.object(metadata, "distribution", return_value=self._dist("not json")):
            self.assertIsNone(version._get_pep610_revision())

    def test_get_version_info(self) -> None:
        with unittest.mock.patch.object(version, "_get_pep610_revision", return_value=None):
            ver, rev = version.get_version_info()
        self.assertIsInstance(ver, str)
        self.assertIsNone(rev)
