# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import json
import unittest
import unittest.mock

from usertests.lib.errors import CliError, HttpError
from usertests.lib.http import (
    ApiRequest,
    extract_error_details,
    quote_segment,
    request_json,
    request_raw,
    resolve_token,
)
from test_utils import config_env, fake_response, store_token


class RequestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ctx = self.enterContext(config_env())
        patcher = unittest.mock.patch("usertests.lib.http.requests.request")
        self.request = patcher.start()
        self.addCleanup(patcher.stop)

    def test_required_auth_injects_bearer(self) -> None:
        store_token("stage", access_token="tok_abc")
        self.request.return_value = fake_response(200, {"projects": []})
        data = request_json(ApiRequest(env="stage", method="get", path="api/projects"))

        self.assertEqual(data, {"projects": []})
        args, kwargs = self.request.call_args
        self.assertEqual(args, ("GET", "https://usertests-stage.krasnoperov.me/api/projects"))
        self.assertEqual(kwargs["headers"]["authorization"], "Bearer tok_abc")
        self.assertEqual(kwargs["headers"]["accept"], "application/json")
        self.assertIsNone(kwargs["data"])
        self.assertTrue(kwargs["verify"])
        self.assertEqual(kwargs["timeout"], 30.0)

    def test_required_auth_without_credentials_fails_before_request(self) -> None:
        with self.assertRaises(CliError) as ctx:
            request_json(ApiRequest(env="production", method="GET", path="/api/projects"))
        self.assertIn('auth login --env production', ctx.exception.message)
        self.request.assert_not_called()

    def test_project_key_and_body(self) -> None:
        self.request.return_value = fake_response(200, {"ok": True})
        request_json(
            ApiRequest(
                env="stage",
                method="POST",
                path="/api/sdk/interview/s1/message",
                body={"content": "hi"},
                auth_mode="none",
                project_key="pk_1",
            )
        )
        kwargs = self.request.call_args.kwargs
        self.assertEqual(kwargs["headers"]["X-Project-Key"], "pk_1")
        self.assertEqual(kwargs["headers"]["content-type"], "application/json")
        self.assertNotIn("authorization", kwargs["headers"])
        self.assertEqual(json.loads(kwargs["data"]), {"content": "hi"})

    def test_caller_content_type_kept_regardless_of_case(self) -> None:
        self.request.return_value = fake_response(200, {})
        request_raw(
            ApiRequest(
                env="stage",
                method="POST",
                path="/api/x",
                body={"a": 1},
                headers={"Content-Type": "application/merge-patch+json"},
                auth_mode="none",
            )
        )
        headers = self.request.call_args.kwargs["headers"]
        self.assertEqual(headers["Content-Type"], "application/merge-patch+json")
        self.assertNotIn("content-type", headers)

    def test_local_disables_tls_verification(self) -> None:
        self.request.return_value = fake_response(200, {})
        request_raw(ApiRequest(env="local", method="GET", path="/x", auth_mode="none"))
        self.assertFalse(self.request.call_args.kwargs["verify"])

    def test_error_status_raises_http_error(self) -> None:
        store_token("stage")
        self.request.return_value = fake_response(403, {"error": "Forbidden project"})
        with self.assertRaises(HttpError) as ctx:
            request_json(ApiRequest(env="stage", method="GET", path="/api/projects/p1"))
        self.assertEqual(ctx.exception.status, 403)
        self.assertEqual(ctx.exception.message, "HTTP 403: Forbidden project")

    def test_non_json_response_returns_text(self) -> None:
        self.request.return_value = fake_response(200, text="pong", content_type="text/plain")
        self.assertEqual(request_json(ApiRequest(env="stage", method="GET", path="/ping", auth_mode="none")), "pong")

    def test_raw_response_keeps_status(self) -> None:
        self.request.return_value = fake_response(500, text="oops", content_type="text/plain")
        resp = request_raw(ApiRequest(env="stage", method="GET", path="/x", auth_mode="optional"))
        self.assertFalse(resp.ok)
        self.assertEqual(resp.status, 500)
        self.assertIsNone(resp.json)
        self.assertEqual(resp.text, "oops")

    def test_requests_are_logged(self) -> None:
        self.request.return_value = fake_response(200, {})
        request_raw(ApiRequest(env="stage", method="GET", path="/x", auth_mode="none"))
        log = (self.ctx.state_dir / "usertests.log").read_text(encoding="utf-8")
        self.assertIn("GET https://usertests-stage.krasnoperov.me/x -> 200", log)


class TokenResolutionTests(unittest.TestCase):
    def test_modes(self) -> None:
        with config_env():
            self.assertIsNone(resolve_token("stage", "optional"))
            self.assertIsNone(resolve_token("stage", "none"))
            store_token("stage", access_token="t1")
            self.assertEqual(resolve_token("stage", "optional"), "t1")
            self.assertIsNone(resolve_token("stage", "none"))

    def test_expired_token(self) -> None:
        with config_env():
            store_token("stage", expires_in=-1)
            self.assertIsNone(resolve_token("stage", "optional"))
            with self.assertRaises(CliError) as ctx:
                resolve_token("stage", "required")
            self.assertIn("expired", ctx.exception.message)


class HelperTests(unittest.TestCase):
    def test_extract_error_details(self) -> None:
        self.assertEqual(extract_error_details({"error": "E", "message": "M"}, "t"), "E")
        self.assertEqual(extract_error_details({"message": "M"}, "t"), "M")
        self.assertEqual(extract_error_details(None, "  body \n"), "body")
        self.assertEqual(extract_error_details({"error": ""}, ""), "Request failed")

    def test_quote_segment(self) -> None:
        self.assertEqual(quote_segment("a/b?c"), "a%2Fb%3Fc")
        self.assertEqual(quote_segment(12), "12")
