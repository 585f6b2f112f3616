"""Tests for help request endpoints: round trip, listing, pagination, summary, ownership."""

import os
import sys
import tempfile
import unittest
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from pathlib import Path

_test_db_file = tempfile.NamedTemporaryFile(suffix=".sqlite", delete=False)
_test_db_file.close()
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_file.name}"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from relief_hub.api.server import create_app
from relief_hub.db import get_session, init_db
from relief_hub.db.models.help_request import HelpRequest
from relief_hub.models.responses import total_pages


def _auth(client: TestClient, prefix: str = "user") -> dict[str, str]:
    username = f"{prefix}_{uuid.uuid4().hex[:8]}"
    resp = client.post("/api/users/register", json={"username": username})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}


def _help_request(area: str, **overrides) -> dict:
    body = {
        "lat": 6.9271,
        "lng": 79.8612,
        "urgency": "High",
        "shortNote": "Family of four stranded",
        "approxArea": area,
        "contactType": "Phone",
        "contact": "0771234567",
        "name": "Nimal",
        "totalPeople": 4,
        "elders": 1,
        "children": 2,
        "pets": 0,
        "rationItems": {"dry_rations": 5},
    }
    body.update(overrides)
    return body


class TestHelpRequestRoutes(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        init_db()
        cls.app = create_app()
        cls.client = TestClient(cls.app)
        cls.owner = _auth(cls.client, "owner")

    def _create(self, headers=None, **body) -> dict:
        resp = self.client.post("/api/help-requests", json=body, headers=headers or self.owner)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def test_create_requires_auth(self):
        resp = self.client.post("/api/help-requests", json=_help_request("Colombo"))
        self.assertEqual(resp.status_code, 401)
        self.assertFalse(resp.json()["success"])

    def test_round_trip_codes_and_inventory(self):
        created = self._create(**_help_request("Round Trip Colombo"))
        self.assertEqual(created["rationItems"], ["dry_rations"])

        fetched = self.client.get(f"/api/help-requests/{created['id']}").json()["data"]
        self.assertIn("dry_rations", fetched["rationItems"])
        self.assertFalse(fetched["isOwner"])

        inventory = self.client.get(f"/api/help-requests/{created['id']}/inventory").json()["data"]
        row = next(r for r in inventory if r["itemName"] == "dry_rations")
        self.assertEqual(row["quantityNeeded"], 5)
        self.assertEqual(row["quantityPending"], 0)
        self.assertEqual(row["quantityRemaining"], 5)
        self.assertEqual(row["helpRequestId"], created["id"])

    def test_is_owner_flag(self):
        created = self._create(**_help_request("Owner Flag Town"))
        as_owner = self.client.get(f"/api/help-requests/{created['id']}", headers=self.owner).json()["data"]
        self.assertTrue(as_owner["isOwner"])
        other = _auth(self.client, "other")
        as_other = self.client.get(f"/api/help-requests/{created['id']}", headers=other).json()["data"]
        self.assertFalse(as_other["isOwner"])

    def test_non_positive_items_are_not_declared(self):
        created = self._create(**_help_request("Filter Town", rationItems={"dry_rations": 2, "blankets": 0}))
        self.assertEqual(created["rationItems"], ["dry_rations"])

    def test_unknown_item_code_is_rejected(self):
        resp = self.client.post(
            "/api/help-requests",
            json=_help_request("Bad Item Town", rationItems={"caviar": 1}),
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["error"], "Validation failed")
        self.assertTrue(any(d["field"].startswith("rationItems") for d in body["details"]))

    def test_oversized_numbers_are_rejected(self):
        resp = self.client.post(
            "/api/help-requests",
            json=_help_request("Huge Town", rationItems={"dry_rations": 10**20}, totalPeople=10**20),
            headers=self.owner,
        )
        self.assertEqual(resp.status_code, 400)
        fields = [d["field"] for d in resp.json()["details"]]
        self.assertIn("rationItems.dry_rations", fields)
        self.assertIn("totalPeople", fields)

    def test_short_note_length_is_validated(self):
        resp = self.client.post(
            "/api/help-requests", json=_help_request("Long Note Town", shortNote="x" * 161), headers=self.owner
        )
        self.assertEqual(resp.status_code, 400)
        fields = [d["field"] for d in resp.json()["details"]]
        self.assertIn("shortNote", fields)

    def test_pagination_count_is_total(self):
        area = f"Pagetown-{uuid.uuid4().hex[:6]}"
        for i in range(23):
            self._create(**_help_request(area, shortNote=f"Request {i}"))
        first = self.client.get("/api/help-requests", params={"district": area, "limit": 9}).json()
        self.assertEqual(first["count"], 23)
        self.assertEqual(len(first["data"]), 9)
        self.assertEqual(total_pages(first["count"], 9), 3)
        third = self.client.get("/api/help-requests", params={"district": area, "limit": 9, "page": 3}).json()
        self.assertEqual(len(third["data"]), 5)
        # newest first
        self.assertEqual(first["data"][0]["shortNote"], "Request 22")

    def test_district_filter_is_case_insensitive(self):
        area = f"Ratnapura-{uuid.uuid4().hex[:6]}"
        self._create(**_help_request(area))
        resp = self.client.get("/api/help-requests", params={"district": area.upper()}).json()
        self.assertEqual(resp["count"], 1)

    def test_listing_excludes_closed_and_old(self):
        area = f"Window-{uuid.uuid4().hex[:6]}"
        kept = self._create(**_help_request(area))
        closed = self._create(**_help_request(area))
        old = self._create(**_help_request(area))
        resp = self.client.put(f"/api/help-requests/{closed['id']}", json={"status": "CLOSED"}, headers=self.owner)
        self.assertEqual(resp.status_code, 200, resp.text)
        with get_session() as session:
            row = session.get(HelpRequest, old["id"])
            row.created_at = datetime.now(timezone.utc) - timedelta(days=31)

        listed = self.client.get("/api/help-requests", params={"district": area}).json()
        self.assertEqual([r["id"] for r in listed["data"]], [kept["id"]])

        mine = self.client.get("/api/help-requests/my", headers=self.owner).json()["data"]
        mine_ids = {r["id"] for r in mine}
        self.assertTrue({kept["id"], closed["id"], old["id"]} <= mine_ids)

    def test_bounds_filter_and_invalid_bounds_ignored(self):
        area = f"Bounds-{uuid.uuid4().hex[:6]}"
        inside = self._create(**_help_request(area, lat=7.0, lng=80.0))
        self._create(**_help_request(area, lat=9.5, lng=80.0))
        bounded = self.client.get(
            "/api/help-requests",
            params={"district": area, "minLat": 6.5, "maxLat": 7.5, "minLng": 79.5, "maxLng": 80.5},
        ).json()
        self.assertEqual([r["id"] for r in bounded["data"]], [inside["id"]])
        inverted = self.client.get(
            "/api/help-requests",
            params={"district": area, "minLat": 7.5, "maxLat": 6.5, "minLng": 79.5, "maxLng": 80.5},
        ).json()
        self.assertEqual(inverted["count"], 2)

    def test_update_by_other_user_is_forbidden(self):
        created = self._create(**_help_request("Forbidden Town"))
        other = _auth(self.client, "intruder")
        resp = self.client.put(f"/api/help-requests/{created['id']}", json={"shortNote": "hijack"}, headers=other)
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(resp.json()["success"])

    def test_update_replaces_needs(self):
        created = self._create(**_help_request("Update Town", rationItems={"dry_rations": 5, "blankets": 2}))
        resp = self.client.put(
            f"/api/help-requests/{created['id']}",
            json={"rationItems": {"bottled_water": 4}, "urgency": "Low"},
            headers=self.owner,
        )
        data = resp.json()["data"]
        self.assertEqual(data["rationItems"], ["bottled_water"])
        self.assertEqual(data["urgency"], "Low")
        inventory = self.client.get(f"/api/help-requests/{created['id']}/inventory").json()["data"]
        needed = {r["itemName"]: r["quantityNeeded"] for r in inventory}
        self.assertEqual(needed, {"dry_rations": 0, "blankets": 0, "bottled_water": 4})

    def test_missing_help_request_is_404(self):
        resp = self.client.get("/api/help-requests/999999")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "error": "Help request 999999 not found"})

    def test_summary_reflects_new_request(self):
        before = self.client.get("/api/help-requests/summary").json()["data"]
        self._create(
            **_help_request(
                "Near Kandy town",
                urgency="Medium",
                totalPeople=3,
                elders=2,
                children=1,
                pets=4,
                rationItems={"medicines": 6},
            )
        )
        after = self.client.get("/api/help-requests/summary").json()["data"]
        self.assertEqual(after["total"], before["total"] + 1)
        self.assertEqual(after["byUrgency"]["Medium"], before["byUrgency"]["Medium"] + 1)
        self.assertEqual(after["byStatus"]["OPEN"], before["byStatus"]["OPEN"] + 1)
        self.assertEqual(after["byDistrict"].get("Kandy", 0), before["byDistrict"].get("Kandy", 0) + 1)
        self.assertEqual(after["people"]["combinedTotal"], before["people"]["combinedTotal"] + 6)
        self.assertEqual(after["people"]["pets"], before["people"]["pets"] + 4)
        med_before = before["rationItems"].get("medicines", {"quantityNeeded": 0, "requestCount": 0})
        med_after = after["rationItems"]["medicines"]
        self.assertEqual(med_after["quantityNeeded"], med_before["quantityNeeded"] + 6)
        self.assertEqual(med_after["requestCount"], med_before["requestCount"] + 1)
        self.assertGreaterEqual(after["totalRationItemTypes"], 1)

    def test_concurrent_donations_overcommit(self):
        created = self._create(**_help_request("Overcommit Town", rationItems={"bottled_water": 3}))
        donors = [_auth(self.client, "donor") for _ in range(2)]

        def donate(headers):
            return TestClient(self.app).post(
                f"/api/help-requests/{created['id']}/donations",
                json={"donatorName": "Donor", "donatorMobileNumber": "0710000000", "rationItems": {"bottled_water": 2}},
                headers=headers,
            )

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(donate, donors))
        self.assertEqual([r.status_code for r in results], [201, 201])

        inventory = self.client.get(f"/api/help-requests/{created['id']}/inventory").json()["data"]
        water = next(r for r in inventory if r["itemName"] == "bottled_water")
        self.assertEqual(water["quantityPending"], 4)
        self.assertEqual(water["quantityRemaining"], 0)


if __name__ == "__main__":
    unittest.main()
