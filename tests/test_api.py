"""Tests for the HTTP API: on-demand checks, WhatsApp contact updates, notifications and summary."""

import shutil
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient

from rh_notifier.api.server import create_app
from rh_notifier.db import reset_db
from rh_notifier.db.repositories import user_repo
from rh_notifier.db.seed_data import seed_demo_data
from rh_notifier.whatsapp import MockWhatsAppProvider


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        reset_db()
        self.admin, self.user = seed_demo_data()
        self.tmp = tempfile.mkdtemp(prefix="rh_notifier_api_")
        self.provider = MockWhatsAppProvider(outbox_path=Path(self.tmp) / "outbox.json")
        self.client = TestClient(create_app(provider=self.provider))

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)


class TestCheckNotifications(ApiTestCase):
    def test_missing_user_id(self):
        r = self.client.post("/api/check-notifications", json={})
        self.assertEqual(r.status_code, 400)

    def test_unknown_user(self):
        r = self.client.post("/api/check-notifications", json={"userId": "missing"})
        self.assertEqual(r.status_code, 404)

    def test_sends_summary(self):
        r = self.client.post("/api/check-notifications", json={"userId": self.admin.id})
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data["success"])
        self.assertEqual((data["sent"], data["failed"]), (1, 0))
        [sent] = self.provider.list_sent()
        self.assertEqual(sent.target, "6281234567890")
        self.assertIn("Aqua 600ml", sent.message)
        self.assertLess(sent.message.index("SUDAH JATUH RH"), sent.message.index("WAJIB RETUR (H-14)"))

    def test_user_with_nothing_to_send(self):
        r = self.client.post("/api/check-notifications", json={"userId": self.user.id})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["sent"], 0)
        self.assertEqual(self.provider.list_sent(), [])

    def test_delivery_failure_is_500_with_details(self):
        self.provider.fail_mode = "transport"
        r = self.client.post("/api/check-notifications", json={"userId": self.admin.id})
        self.assertEqual(r.status_code, 500)
        data = r.json()
        self.assertFalse(data["success"])
        self.assertEqual(data["failed"], 1)
        self.assertTrue(data["details"][0].startswith("Failed for user admin:"))

    def test_items_without_whatsapp(self):
        user_repo.update_whatsapp(self.admin.id, None)
        r = self.client.post("/api/check-notifications", json={"userId": self.admin.id})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["details"], ["User admin has no WhatsApp number"])

    def test_status(self):
        r = self.client.get("/api/check-notifications", params={"userId": self.admin.id})
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data["hasWhatsApp"])
        self.assertEqual(data["whatsappNumber"], "628-1234-567890")
        self.assertEqual(self.client.get("/api/check-notifications").status_code, 400)


class TestWhatsAppRoutes(ApiTestCase):
    def test_update_whatsapp_normalizes(self):
        r = self.client.post(
            "/api/user/update-whatsapp",
            json={"userId": self.user.id, "whatsapp": "0812-9999-8888"},
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["user"]["whatsapp"], "628-1299-998888")
        self.assertEqual(user_repo.get_by_id(self.user.id).whatsapp, "6281299998888")

    def test_update_whatsapp_errors(self):
        r = self.client.post("/api/user/update-whatsapp", json={"userId": self.user.id, "whatsapp": "0812"})
        self.assertEqual(r.status_code, 400)
        r = self.client.post("/api/user/update-whatsapp", json={"userId": "missing", "whatsapp": "081299998888"})
        self.assertEqual(r.status_code, 404)
        r = self.client.post("/api/user/update-whatsapp", json={"userId": self.user.id})
        self.assertEqual(r.status_code, 400)

    def test_send_free_form_message(self):
        r = self.client.post("/api/send-whatsapp", json={"userId": self.user.id, "message": "Halo"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["provider"], "mock")
        self.assertEqual(self.provider.list_sent()[0].target, "6289876543210")
        r = self.client.post("/api/send-whatsapp", json={"userId": self.user.id})
        self.assertEqual(r.status_code, 400)

    def test_send_rejected(self):
        self.provider.fail_mode = "reject"
        r = self.client.post("/api/send-whatsapp", json={"userId": self.user.id, "message": "Halo"})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["kind"], "delivery")

    def test_send_test_message(self):
        r = self.client.get("/api/send-whatsapp", params={"userId": self.admin.id})
        self.assertEqual(r.status_code, 200)
        self.assertIn("pesan TES", r.json()["content"])
        self.assertEqual(self.client.get("/api/send-whatsapp", params={"userId": "missing"}).status_code, 404)


class TestNotificationRoutes(ApiTestCase):
    def test_generate_is_idempotent(self):
        r = self.client.post("/api/notifications/generate", json={"userId": self.admin.id})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["raised"], 3)
        r = self.client.post("/api/notifications/generate", json={"userId": self.admin.id})
        self.assertEqual(r.json()["raised"], 0)

        listing = self.client.get("/api/notifications", params={"userId": self.admin.id}).json()
        self.assertEqual(len(listing["items"]), 3)
        self.assertEqual(listing["unread"], 3)
        self.assertEqual({i["type"] for i in listing["items"]}, {"warning", "expired"})

    def test_mark_read(self):
        self.client.post("/api/notifications/generate", json={"userId": self.admin.id})
        items = self.client.get("/api/notifications", params={"userId": self.admin.id}).json()["items"]
        target = items[0]["id"]

        r = self.client.post(f"/api/notifications/{target}/read")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["isRead"])
        self.assertEqual(self.client.post(f"/api/notifications/{target}/read").status_code, 200)

        unread = self.client.get("/api/notifications", params={"userId": self.admin.id, "unreadOnly": True}).json()
        self.assertEqual(len(unread["items"]), 2)
        self.assertEqual(unread["unread"], 2)
        self.assertEqual(self.client.post("/api/notifications/missing/read").status_code, 404)

    def test_list_requires_known_user(self):
        self.assertEqual(self.client.get("/api/notifications").status_code, 400)
        self.assertEqual(self.client.get("/api/notifications", params={"userId": "missing"}).status_code, 404)

    def test_summary(self):
        data = self.client.get("/api/summary", params={"userId": self.admin.id}).json()
        self.assertEqual(
            (data["totalSafe"], data["totalWarning"], data["totalExpired"], data["totalProducts"]),
            (2, 2, 1, 3),
        )
        empty = self.client.get("/api/summary", params={"userId": self.user.id}).json()
        self.assertEqual(empty["totalProducts"], 0)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
