"""Tests for volunteer club administration and the membership request flow."""

import os
import sys
import tempfile
import unittest
import uuid
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from relief_hub.api.server import create_app
from relief_hub.db import init_db
from relief_hub.services import auth_service


def _register(client: TestClient, prefix: str) -> tuple[dict[str, str], dict]:
    username = f"{prefix}_{uuid.uuid4().hex[:8]}"
    resp = client.post("/api/users/register", json={"username": username})
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return {"Authorization": f"Bearer {data['accessToken']}"}, data["user"]


class TestVolunteerClubs(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        cls.client = TestClient(create_app())
        admin_name = f"admin_{uuid.uuid4().hex[:8]}"
        auth_service.ensure_admin(admin_name, "admin-secret")
        resp = cls.client.post("/api/auth/login", json={"username": admin_name, "password": "admin-secret"})
        cls.admin = {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}

    def _create_club(self, **body) -> dict:
        body.setdefault("name", f"Club {uuid.uuid4().hex[:8]}")
        resp = self.client.post("/api/volunteer-clubs", json=body, headers=self.admin)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def test_only_admins_create_clubs(self):
        user, _ = _register(self.client, "plain")
        resp = self.client.post("/api/volunteer-clubs", json={"name": "Nope"}, headers=user)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.post("/api/volunteer-clubs", json={"name": "Nope"}).status_code, 401)

    def test_create_assigns_and_promotes_owner(self):
        headers, user = _register(self.client, "owner")
        club = self._create_club(userId=user["id"], contactNumber="0771112223")
        self.assertEqual(club["userId"], user["id"])
        self.assertEqual(club["status"], "ACTIVE")

        me = self.client.get("/api/auth/me", headers=headers).json()["data"]
        self.assertEqual(me["role"], "VOLUNTEER_CLUB")
        mine = self.client.get("/api/volunteer-clubs/me", headers=headers)
        self.assertEqual(mine.status_code, 200)
        self.assertEqual(mine.json()["data"]["id"], club["id"])

    def test_owner_cannot_hold_two_clubs(self):
        _, user = _register(self.client, "greedy")
        self._create_club(userId=user["id"])
        resp = self.client.post(
            "/api/volunteer-clubs",
            json={"name": f"Second {uuid.uuid4().hex[:6]}", "userId": user["id"]},
            headers=self.admin,
        )
        self.assertEqual(resp.status_code, 409)

    def test_unknown_owner(self):
        resp = self.client.post(
            "/api/volunteer-clubs", json={"name": f"Ghost {uuid.uuid4().hex[:6]}", "userId": 987654}, headers=self.admin
        )
        self.assertEqual(resp.status_code, 404)

    def test_duplicate_name_is_case_insensitive(self):
        club = self._create_club()
        resp = self.client.post("/api/volunteer-clubs", json={"name": club["name"].upper()}, headers=self.admin)
        self.assertEqual(resp.status_code, 409)

    def test_public_read_update_and_delete(self):
        club = self._create_club(description="Flood response")
        path = f"/api/volunteer-clubs/{club['id']}"
        self.assertEqual(self.client.get(path).json()["data"]["description"], "Flood response")
        listed = self.client.get("/api/volunteer-clubs").json()
        self.assertIn(club["id"], [c["id"] for c in listed["data"]])
        self.assertEqual(listed["count"], len(listed["data"]))

        updated = self.client.put(path, json={"address": "12 Lake Road", "status": "INACTIVE"}, headers=self.admin)
        self.assertEqual(updated.status_code, 200, updated.text)
        self.assertEqual(updated.json()["data"]["address"], "12 Lake Road")
        self.assertEqual(updated.json()["data"]["status"], "INACTIVE")

        self.assertEqual(self.client.delete(path, headers=self.admin).status_code, 200)
        self.assertEqual(self.client.get(path).status_code, 404)

    def test_club_with_camps_cannot_be_deleted(self):
        headers, user = _register(self.client, "camp_owner")
        club = self._create_club(userId=user["id"])
        camp = self.client.post(
            "/api/camps",
            json={
                "lat": 6.9,
                "lng": 79.9,
                "campType": "Community",
                "name": "Wellawatte hall",
                "peopleRange": "1-10",
                "needs": ["Clothing"],
                "shortNote": "Small shelter",
            },
            headers=headers,
        )
        self.assertEqual(camp.status_code, 201, camp.text)
        resp = self.client.delete(f"/api/volunteer-clubs/{club['id']}", headers=self.admin)
        self.assertEqual(resp.status_code, 409)

    def test_membership_flow(self):
        owner_headers, owner = _register(self.client, "reviewer")
        club = self._create_club(userId=owner["id"])
        member_headers, member = _register(self.client, "member")
        outsider, _ = _register(self.client, "outsider")

        self.assertEqual(
            self.client.post("/api/memberships/request", json={"volunteerClubId": 987654}, headers=member_headers).status_code,
            404,
        )
        requested = self.client.post(
            "/api/memberships/request", json={"volunteerClubId": club["id"]}, headers=member_headers
        )
        self.assertEqual(requested.status_code, 201)
        membership = requested.json()["data"]
        self.assertEqual(membership["status"], "PENDING")
        duplicate = self.client.post(
            "/api/memberships/request", json={"volunteerClubId": club["id"]}, headers=member_headers
        )
        self.assertEqual(duplicate.status_code, 409)

        self.assertEqual(
            self.client.get(f"/api/memberships/club/{club['id']}", headers=outsider).status_code, 403
        )
        pending = self.client.get(f"/api/memberships/club/{club['id']}", headers=owner_headers).json()["data"]
        self.assertEqual([m["userId"] for m in pending], [member["id"]])

        review_path = f"/api/memberships/{membership['id']}/review"
        self.assertEqual(
            self.client.put(review_path, json={"status": "APPROVED"}, headers=outsider).status_code, 403
        )
        self.assertEqual(
            self.client.put(review_path, json={"status": "PENDING"}, headers=owner_headers).status_code, 400
        )
        rejected = self.client.put(
            review_path, json={"status": "REJECTED", "notes": "Full for now"}, headers=owner_headers
        )
        self.assertEqual(rejected.status_code, 200)
        self.assertEqual(rejected.json()["data"]["reviewedBy"], owner["id"])

        again = self.client.post(
            "/api/memberships/request", json={"volunteerClubId": club["id"]}, headers=member_headers
        )
        self.assertEqual(again.status_code, 201)
        self.assertEqual(again.json()["data"]["id"], membership["id"])
        self.assertEqual(again.json()["data"]["status"], "PENDING")

        approved = self.client.put(review_path, json={"status": "APPROVED"}, headers=self.admin)
        self.assertEqual(approved.json()["data"]["status"], "APPROVED")
        mine = self.client.get("/api/memberships/me", headers=member_headers).json()["data"]
        self.assertEqual([(m["volunteerClubId"], m["status"]) for m in mine], [(club["id"], "APPROVED")])
        member_again = self.client.post(
            "/api/memberships/request", json={"volunteerClubId": club["id"]}, headers=member_headers
        )
        self.assertEqual(member_again.status_code, 409)


if __name__ == "__main__":
    unittest.main()
