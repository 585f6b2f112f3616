"""Tests for registration, login, refresh rotation, logout and the error envelope."""

import os
import sys
import tempfile
import unittest
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient
from sqlalchemy import select
from typer.testing import CliRunner

from relief_hub.api.server import create_app
from relief_hub.auth.security import create_access_token, decode_access_token, InvalidTokenError
from relief_hub.cli import app as cli_app
from relief_hub.db import get_session, init_db
from relief_hub.db.models import RefreshToken
from relief_hub.db.repositories import user_repo
from relief_hub.services import auth_service


def _name(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class TestTokens(unittest.TestCase):
    def test_access_token_round_trip(self):
        token = create_access_token(7, "nimal", "USER")
        payload = decode_access_token(token)
        self.assertEqual(payload["id"], 7)
        self.assertEqual(payload["role"], "USER")

    def test_tampered_token_rejected(self):
        token = create_access_token(7, "nimal", "USER")
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token[:-2] + "xx")

    def test_expired_token_rejected(self):
        token = create_access_token(7, "nimal", "USER")
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token, max_age_seconds=-1)


class TestAuthRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        cls.client = TestClient(create_app())

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)

    def test_register_returns_tokens_and_user(self):
        username = _name()
        resp = self.client.post("/api/users/register", json={"username": username, "password": "secret1"})
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["user"]["username"], username)
        self.assertEqual(body["data"]["user"]["role"], "USER")
        self.assertNotIn("passwordHash", body["data"]["user"])
        self.assertTrue(body["data"]["accessToken"])
        self.assertTrue(body["data"]["refreshToken"])

    def test_duplicate_username_conflicts(self):
        username = _name()
        self.client.post("/api/users/register", json={"username": username})
        resp = self.client.post("/api/users/register", json={"username": username})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"success": False, "error": "Username already exists"})

    def test_register_validation_envelope(self):
        resp = self.client.post("/api/users/register", json={"username": "ab"})
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Validation failed")
        self.assertEqual(body["details"][0]["field"], "username")

    def test_login_without_password_for_passwordless_account(self):
        username = _name()
        self.client.post("/api/users/register", json={"username": username})
        resp = self.client.post("/api/auth/login", json={"username": username})
        self.assertEqual(resp.status_code, 200)

    def test_login_checks_password_when_set(self):
        username = _name()
        self.client.post("/api/users/register", json={"username": username, "password": "secret1"})
        self.assertEqual(self.client.post("/api/auth/login", json={"username": username}).status_code, 401)
        wrong = self.client.post("/api/auth/login", json={"username": username, "password": "nope123"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json()["error"], "Invalid credentials")
        ok = self.client.post("/api/auth/login", json={"username": username, "password": "secret1"})
        self.assertEqual(ok.status_code, 200)

    def test_login_unknown_user(self):
        resp = self.client.post("/api/auth/login", json={"username": _name("ghost")})
        self.assertEqual(resp.status_code, 401)

    def test_refresh_rotates_token(self):
        data = self.client.post("/api/users/register", json={"username": _name()}).json()["data"]
        first = self.client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
        self.assertEqual(first.status_code, 200)
        rotated = first.json()["data"]["refreshToken"]
        self.assertNotEqual(rotated, data["refreshToken"])

        reused = self.client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
        self.assertEqual(reused.status_code, 401)
        self.assertEqual(reused.json()["error"], "Invalid or expired refresh token")
        self.assertEqual(
            self.client.post("/api/auth/refresh", json={"refreshToken": rotated}).status_code, 200
        )

    def test_logout_revokes_refresh_token(self):
        data = self.client.post("/api/users/register", json={"username": _name()}).json()["data"]
        resp = self.client.post("/api/auth/logout", json={"refreshToken": data["refreshToken"]})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["success"])
        again = self.client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
        self.assertEqual(again.status_code, 401)
        self.assertEqual(self.client.post("/api/auth/logout").status_code, 200)

    def test_purge_tokens_command_removes_only_expired(self):
        data = self.client.post("/api/users/register", json={"username": _name()}).json()["data"]
        expired = f"expired-{uuid.uuid4().hex}"
        user_repo.store_refresh_token(data["user"]["id"], expired, datetime.now(timezone.utc) - timedelta(days=1))

        result = CliRunner().invoke(cli_app, ["purge-tokens"])
        self.assertEqual(result.exit_code, 0, result.output)

        with get_session() as session:
            self.assertIsNone(session.scalars(select(RefreshToken).where(RefreshToken.token == expired)).first())
        refreshed = self.client.post("/api/auth/refresh", json={"refreshToken": data["refreshToken"]})
        self.assertEqual(refreshed.status_code, 200)

    def test_me(self):
        username = _name()
        data = self.client.post("/api/users/register", json={"username": username}).json()["data"]
        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["username"], username)

    def test_me_rejects_missing_and_bad_tokens(self):
        missing = self.client.get("/api/auth/me")
        self.assertEqual(missing.status_code, 401)
        self.assertEqual(missing.json(), {"success": False, "error": "Authentication required"})
        bad = self.client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(bad.status_code, 401)

    def test_ensure_admin_creates_then_promotes(self):
        username = _name("admin")
        user, created = auth_service.ensure_admin(username, "admin-secret")
        self.assertTrue(created)
        self.assertEqual(user.role, "SYSTEM_ADMINISTRATOR")
        again, created_again = auth_service.ensure_admin(username, None)
        self.assertFalse(created_again)
        self.assertEqual(again.id, user.id)
        login = self.client.post("/api/auth/login", json={"username": username, "password": "admin-secret"})
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json()["data"]["user"]["role"], "SYSTEM_ADMINISTRATOR")

    def test_unknown_route_uses_envelope(self):
        resp = self.client.get("/api/nowhere")
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.json()["success"])

    def test_item_catalog(self):
        resp = self.client.get("/api/items")
        self.assertEqual(resp.status_code, 200)
        codes = [item["code"] for item in resp.json()["data"]]
        self.assertIn("dry_rations", codes)
        self.assertEqual(len(codes), len(set(codes)))


if __name__ == "__main__":
    unittest.main()
