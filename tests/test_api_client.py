"""Tests for the async API client: token refresh, error mapping and the domain services."""

import asyncio
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from relief_hub.client import (
    ApiClient,
    ApiError,
    AuthService,
    CampService,
    DonationService,
    FileTokenStore,
    HelpRequestService,
    MemoryTokenStore,
)
from relief_hub.client.api_client import error_message
from relief_hub.client.help_request_service import positive_items

BASE_URL = "http://relief.test"


def _envelope(data=None, status_code: int = 200, **extra) -> httpx.Response:
    body = {"success": status_code < 400, **extra}
    if data is not None:
        body["data"] = data
    return httpx.Response(status_code, json=body)


class FakeBackend:
    """Accepts one access token; /api/auth/refresh swaps it for the next one."""

    def __init__(self, valid_token: str = "fresh-access", refresh_ok: bool = True, refresh_delay: float = 0.0):
        self.valid_token = valid_token
        self.refresh_ok = refresh_ok
        self.refresh_delay = refresh_delay
        self.refresh_calls = 0
        self.protected_calls = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/auth/refresh":
            self.refresh_calls += 1
            if self.refresh_delay:
                await asyncio.sleep(self.refresh_delay)
            if not self.refresh_ok:
                return _envelope(status_code=401, error="Invalid or expired refresh token")
            return _envelope({"accessToken": self.valid_token, "refreshToken": "rotated-refresh"})
        self.protected_calls += 1
        if request.headers.get("Authorization") != f"Bearer {self.valid_token}":
            return _envelope(status_code=401, error="Access token expired")
        return _envelope([], count=0)


def _client(handler, tokens=None) -> ApiClient:
    store = MemoryTokenStore(tokens if tokens is not None else {"accessToken": "stale", "refreshToken": "refresh-1"})
    return ApiClient(BASE_URL, token_store=store, transport=httpx.MockTransport(handler))


class TestTokenRefresh(unittest.TestCase):
    def test_refresh_then_retry_once(self):
        backend = FakeBackend()

        async def run():
            async with _client(backend) as client:
                body = await client.get("/api/help-requests/my")
                self.assertTrue(body["success"])
                self.assertEqual(client.access_token, "fresh-access")
                self.assertEqual(client.token_store.get("refreshToken"), "rotated-refresh")

        asyncio.run(run())
        self.assertEqual(backend.refresh_calls, 1)
        self.assertEqual(backend.protected_calls, 2)

    def test_persistent_401_clears_tokens_after_single_retry(self):
        backend = FakeBackend(valid_token="never-accepted")

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/auth/refresh":
                backend.refresh_calls += 1
                return _envelope({"accessToken": "still-wrong", "refreshToken": "r2"})
            backend.protected_calls += 1
            return _envelope(status_code=401, error="Access token expired")

        async def run():
            async with _client(handler) as client:
                with self.assertRaises(ApiError) as ctx:
                    await client.get("/api/auth/me")
                self.assertEqual(ctx.exception.status_code, 401)
                self.assertEqual(ctx.exception.message, "Access token expired")
                self.assertIsNone(client.access_token)
                self.assertIsNone(client.token_store.get("refreshToken"))

        asyncio.run(run())
        self.assertEqual(backend.refresh_calls, 1)
        self.assertEqual(backend.protected_calls, 2)

    def test_failed_refresh_clears_tokens(self):
        backend = FakeBackend(refresh_ok=False)

        async def run():
            async with _client(backend) as client:
                with self.assertRaises(ApiError):
                    await client.get("/api/auth/me")
                self.assertIsNone(client.access_token)

        asyncio.run(run())
        self.assertEqual(backend.protected_calls, 1)

    def test_concurrent_401s_share_one_refresh(self):
        backend = FakeBackend(refresh_delay=0.05)

        async def run():
            async with _client(backend) as client:
                results = await asyncio.gather(*(client.get("/api/help-requests/my") for _ in range(5)))
                self.assertTrue(all(r["success"] for r in results))

        asyncio.run(run())
        self.assertEqual(backend.refresh_calls, 1)

    def test_skip_auth_never_refreshes(self):
        backend = FakeBackend()

        async def run():
            async with _client(backend) as client:
                with self.assertRaises(ApiError) as ctx:
                    await client.get("/api/auth/me", skip_auth=True)
                self.assertEqual(ctx.exception.status_code, 401)
                self.assertEqual(client.access_token, "stale")

        asyncio.run(run())
        self.assertEqual(backend.refresh_calls, 0)


class TestErrorMapping(unittest.TestCase):
    def test_error_message_prefers_first_constraint(self):
        body = {
            "success": False,
            "error": "Validation failed",
            "details": [{"field": "shortNote", "constraints": {"string_too_long": "Note too long"}}],
        }
        self.assertEqual(error_message(body, 400), "Note too long")
        self.assertEqual(error_message({"error": "Nope"}, 403), "Nope")
        self.assertEqual(error_message(None, 502), "HTTP error! status: 502")

    def test_connection_error_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async def run():
            async with _client(handler, tokens={}) as client:
                with self.assertRaises(ApiError) as ctx:
                    await client.get("/api/items")
                self.assertIsNone(ctx.exception.status_code)
                self.assertEqual(
                    ctx.exception.message,
                    f"Unable to connect to the API server at {BASE_URL}. "
                    "Please make sure the backend server is running.",
                )

        asyncio.run(run())

    def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>gateway</html>")

        async def run():
            async with _client(handler, tokens={}) as client:
                with self.assertRaises(ApiError) as ctx:
                    await client.get("/api/items")
                self.assertEqual(ctx.exception.message, "Invalid JSON response from server")

        asyncio.run(run())

    def test_none_params_are_dropped(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(dict(request.url.params))
            return _envelope([], count=0)

        async def run():
            async with _client(handler, tokens={}) as client:
                result = await HelpRequestService(client).get_all(
                    {"urgency": "High", "district": None, "min_lat": 6.5, "page": 2}
                )
                self.assertTrue(result.success)

        asyncio.run(run())
        self.assertEqual(seen, {"urgency": "High", "minLat": "6.5", "page": "2"})


class TestServices(unittest.TestCase):
    def test_services_return_failures_instead_of_raising(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _envelope(
                status_code=400,
                error="Validation failed",
                details=[{"field": "rationItems", "constraints": {"min": "Quantities must be positive"}}],
            )

        async def run():
            async with _client(handler, tokens={}) as client:
                result = await DonationService(client).create(3, {"rationItems": {"dry_rations": 0}})
                self.assertFalse(result.success)
                self.assertEqual(result.error, "Quantities must be positive")
                self.assertEqual(result.details[0]["field"], "rationItems")

        asyncio.run(run())

    def test_service_parses_typed_data(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return _envelope(
                [
                    {
                        "id": 5,
                        "helpRequestId": 3,
                        "donatorId": 9,
                        "rationItems": {"dry_rations": 2},
                        "donatorMarkedScheduled": True,
                        "donatorMarkedCompleted": False,
                        "ownerMarkedCompleted": False,
                        "status": "Scheduled",
                    }
                ],
                count=1,
            )

        async def run():
            async with _client(handler, tokens={}) as client:
                result = await DonationService(client).get_by_help_request(3)
                self.assertTrue(result.success)
                self.assertEqual(result.count, 1)
                self.assertEqual(result.data[0].donator_id, 9)
                self.assertIsNone(result.data[0].donator_name)

        asyncio.run(run())

    def test_camp_transition_path(self):
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append((request.method, request.url.path))
            return _envelope(status_code=404, error="Donation 8 not found")

        async def run():
            async with _client(handler, tokens={}) as client:
                service = DonationService(client)
                await service.mark_as_completed_by_owner(None, 8, camp_id=4)
                await service.mark_as_scheduled(2, 8)

        asyncio.run(run())
        self.assertEqual(
            paths,
            [("PATCH", "/api/camps/4/donations/8/complete-owner"), ("PATCH", "/api/help-requests/2/donations/8/schedule")],
        )

    def test_create_help_request_drops_non_positive_items(self):
        sent = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent.update(json.loads(request.content))
            return _envelope(status_code=401, error="Authentication required")

        async def run():
            async with _client(handler, tokens={}) as client:
                result = await HelpRequestService(client).create(
                    {"shortNote": "Roof gone", "rationItems": {"dry_rations": 3, "towels": 0}}
                )
                self.assertFalse(result.success)

        asyncio.run(run())
        self.assertEqual(sent["rationItems"], {"dry_rations": 3})
        self.assertEqual(positive_items({"a": 1, "b": -2, "c": True}), {"a": 1})
        self.assertEqual(positive_items({"a": 0.5, "b": 2.9}), {"b": 2})

    def test_login_remembers_tokens_and_donor(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/auth/logout":
                return _envelope(message="Logged out")
            return _envelope(
                {
                    "user": {"id": 12, "username": "kamal", "role": "USER", "status": "ACTIVE"},
                    "accessToken": "access-12",
                    "refreshToken": "refresh-12",
                }
            )

        async def run():
            async with _client(handler, tokens={}) as client:
                auth = AuthService(client)
                result = await auth.login("kamal")
                self.assertTrue(result.success)
                self.assertEqual(client.access_token, "access-12")
                self.assertEqual(auth.donor_user(), {"name": "kamal", "identifier": "12", "loggedIn": True})
                await auth.logout()
                self.assertIsNone(client.access_token)
                self.assertIsNone(auth.donor_user())

        asyncio.run(run())


class TestCampService(unittest.TestCase):
    def test_filters_become_query_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return _envelope([], count=0)

        async def run():
            async with _client(handler, tokens={}) as client:
                result = await CampService(client).get_all(
                    {"camp_type": "Community", "needs": ["Food", "Water"], "district": "Galle"}
                )
                self.assertTrue(result.success)
                self.assertEqual(result.data, [])

        asyncio.run(run())
        self.assertEqual(seen["path"], "/api/camps")
        self.assertEqual(seen["params"], {"campType": "Community", "needs": "Food,Water", "district": "Galle"})


class TestDatabaseIsolation(unittest.TestCase):
    def test_tests_never_use_the_project_database(self):
        from relief_hub import config

        self.assertNotIn(str(config.DATA_DIR), config.DATABASE_URL)
        self.assertTrue(config.DATABASE_URL.startswith("sqlite:///"))


class TestFileTokenStore(unittest.TestCase):
    def test_persists_across_instances(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "session.json"
            store = FileTokenStore(path)
            self.assertIsNone(store.get("accessToken"))
            store.set("accessToken", "abc")
            store.set("donor_user", {"name": "kamal", "identifier": "12", "loggedIn": True})

            reopened = FileTokenStore(path)
            self.assertEqual(reopened.get("accessToken"), "abc")
            self.assertTrue(reopened.get("donor_user")["loggedIn"])
            reopened.remove("accessToken")
            self.assertIsNone(store.get("accessToken"))

    def test_corrupt_file_reads_as_empty(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "session.json"
            path.write_text("{not json", encoding="utf-8")
            store = FileTokenStore(path)
            self.assertIsNone(store.get("accessToken"))
            store.set("accessToken", "xyz")
            self.assertEqual(FileTokenStore(path).get("accessToken"), "xyz")


if __name__ == "__main__":
    unittest.main()
