"""Tests for the batch run coordinator: per-user isolation, skips, recording, fatal store errors."""

import sys
import unittest
from datetime import date, timedelta
from pathlib import Path
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rh_notifier.coordinator import Coordinator, RunResult, UserOutcome
from rh_notifier.db import reset_db
from rh_notifier.db.repositories import notification_repo, product_repo, user_repo
from rh_notifier.errors import NotFoundError, StoreUnavailableError
from rh_notifier.whatsapp import Dispatcher, ProviderResponse

TODAY = date(2026, 10, 1)


class RecordingProvider:
    """Accepts every send and records (target, message)."""

    name = "recording"

    def __init__(self, reject_targets=()):
        self.calls = []
        self.reject_targets = set(reject_targets)

    def is_configured(self):
        return True

    def send(self, target, message):
        self.calls.append((target, message))
        if target in self.reject_targets:
            return ProviderResponse(status_code=200, payload={"status": False, "reason": "target invalid"})
        return ProviderResponse(status_code=200, payload={"status": True})


def _coordinator(provider, rh_days=14):
    return Coordinator(Dispatcher(provider), rh_days=rh_days, today=lambda: TODAY)


def _user_with_batch(username, whatsapp, offset, barcode):
    user = user_repo.create_user(username, name=username.title(), whatsapp=whatsapp)
    product_repo.create_product(user.id, barcode, f"Produk {username}", batches=[(TODAY + timedelta(days=offset), 10)])
    return user


class TestRunResult(unittest.TestCase):
    def test_counts_one_failure_per_user(self):
        result = RunResult()
        result.add(UserOutcome(user_id="1", username="a", status="sent", items=2))
        result.add(UserOutcome(user_id="2", username="b", status="failed", items=3, error="boom"))
        result.add(UserOutcome(user_id="3", username="c", status="skipped"))
        self.assertEqual((result.sent, result.failed, result.total), (1, 1, 2))
        self.assertEqual(result.errors, ["boom"])
        self.assertFalse(result.success)


class TestCoordinatorRun(unittest.TestCase):
    def setUp(self):
        reset_db()

    def test_failures_do_not_stop_other_users(self):
        ok = _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        _user_with_batch("budi", None, 3, "8990000000002")
        _user_with_batch("citra", "6282222222222", -1, "8990000000003")
        _user_with_batch("dodi", "081233334444", 3, "8990000000004")
        provider = RecordingProvider(reject_targets={"6282222222222"})

        result = _coordinator(provider).run()

        self.assertEqual(result.sent, 1)
        self.assertEqual(result.failed, 3)
        self.assertEqual(len(result.errors), 3)
        self.assertIn("User budi has no WhatsApp number", result.errors)
        self.assertTrue(any(e.startswith("Failed for user citra:") for e in result.errors))
        self.assertTrue(any(e.startswith("Failed for user dodi:") for e in result.errors))
        self.assertEqual([c[0] for c in provider.calls], ["6281111111111", "6282222222222"])
        statuses = {o.username: o.status for o in result.outcomes}
        self.assertEqual(statuses, {"ani": "sent", "budi": "failed", "citra": "failed", "dodi": "failed"})
        self.assertEqual(provider.calls[0][1].count("PLU001"), 1)
        self.assertIn("Halo Ani,", provider.calls[0][1])
        self.assertEqual(ok.id, result.outcomes[0].user_id)

    def test_nothing_to_send_never_calls_provider(self):
        _user_with_batch("ani", "6281111111111", 60, "8990000000001")
        user_repo.create_user("kosong", whatsapp="6283333333333")
        provider = RecordingProvider()

        result = _coordinator(provider).run()

        self.assertEqual(provider.calls, [])
        self.assertEqual((result.sent, result.failed), (0, 0))
        self.assertTrue(result.success)
        self.assertEqual({o.status for o in result.outcomes}, {"skipped"})

    def test_user_without_whatsapp_and_no_items_is_skipped(self):
        user_repo.create_user("baru")
        result = _coordinator(RecordingProvider()).run()
        self.assertEqual(result.outcomes[0].status, "skipped")
        self.assertTrue(result.success)

    def test_record_raises_notifications_once(self):
        user = _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        provider = RecordingProvider()
        coordinator = _coordinator(provider)

        first = coordinator.run()
        second = coordinator.run()

        self.assertEqual(first.outcomes[0].raised, 1)
        self.assertEqual(second.outcomes[0].raised, 0)
        self.assertEqual(len(notification_repo.list_for_user(user.id)), 1)
        # each run still sends its summary
        self.assertEqual(len(provider.calls), 2)

    def test_no_record(self):
        user = _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        result = _coordinator(RecordingProvider()).run(record=False)
        self.assertEqual(result.outcomes[0].raised, 0)
        self.assertEqual(notification_repo.list_for_user(user.id), [])

    def test_rh_days_override(self):
        _user_with_batch("ani", "6281111111111", 20, "8990000000001")
        provider = RecordingProvider()
        self.assertEqual(_coordinator(provider).run().sent, 0)
        self.assertEqual(_coordinator(provider).run(rh_days=30).sent, 1)
        self.assertIn("H-30", provider.calls[0][1])

    def test_unexpected_exception_isolated(self):
        _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        provider = RecordingProvider()
        with patch("rh_notifier.coordinator.compose", side_effect=RuntimeError("template broke")):
            result = _coordinator(provider).run()
        self.assertEqual(result.failed, 1)
        self.assertEqual(result.errors, ["Exception for user ani: template broke"])

    def test_store_unavailable_is_fatal(self):
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch("rh_notifier.coordinator.user_repo.list_all", side_effect=error):
            with self.assertRaises(StoreUnavailableError):
                _coordinator(RecordingProvider()).run()

    def test_notification_write_failure_is_per_user(self):
        for index, name in enumerate(("ani", "budi", "citra"), 1):
            _user_with_batch(name, f"628111111111{index}", 3, f"899000000000{index}")
        real_insert = notification_repo.insert_many
        calls = []

        def flaky_insert(rows):
            calls.append(rows)
            if len(calls) == 2:
                raise OperationalError("INSERT", {}, Exception("database is locked"))
            return real_insert(rows)

        provider = RecordingProvider()
        with patch("rh_notifier.db.repositories.notification_repo.insert_many", side_effect=flaky_insert):
            result = _coordinator(provider).run()

        self.assertEqual((result.sent, result.failed), (2, 1))
        statuses = {o.username: o.status for o in result.outcomes}
        self.assertEqual(statuses, {"ani": "sent", "budi": "failed", "citra": "sent"})
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].startswith("Failed for user budi: could not record notifications"))
        self.assertEqual([c[0] for c in provider.calls], ["6281111111111", "6281111111113"])

    def test_fatal_error_keeps_outcomes_so_far(self):
        _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        budi = _user_with_batch("budi", "6282222222222", 3, "8990000000002")
        real_list = product_repo.list_for_user

        def failing_for_budi(user_id):
            if user_id == budi.id:
                raise OperationalError("SELECT", {}, Exception("disk I/O error"))
            return real_list(user_id)

        with patch("rh_notifier.coordinator.product_repo.list_for_user", side_effect=failing_for_budi):
            with self.assertRaises(StoreUnavailableError) as ctx:
                _coordinator(RecordingProvider()).run()
        self.assertEqual(ctx.exception.partial.sent, 1)
        self.assertEqual(ctx.exception.partial.outcomes[0].username, "ani")

    def test_product_read_failure_is_fatal(self):
        _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        error = OperationalError("SELECT", {}, Exception("disk I/O error"))
        with patch("rh_notifier.coordinator.product_repo.list_for_user", side_effect=error):
            with self.assertRaises(StoreUnavailableError):
                _coordinator(RecordingProvider()).run()


class TestCoordinatorOnDemand(unittest.TestCase):
    def setUp(self):
        reset_db()

    def test_check_user_sends_without_recording(self):
        user = _user_with_batch("ani", "6281111111111", 3, "8990000000001")
        provider = RecordingProvider()
        result = _coordinator(provider).check_user(user.id)
        self.assertEqual(result.sent, 1)
        self.assertEqual(notification_repo.list_for_user(user.id), [])

    def test_check_user_unknown(self):
        with self.assertRaises(NotFoundError):
            _coordinator(RecordingProvider()).check_user("missing")

    def test_send_message_without_whatsapp(self):
        user = user_repo.create_user("baru")
        provider = RecordingProvider()
        result = _coordinator(provider).send_message(user.id, "Halo")
        self.assertFalse(result.success)
        self.assertEqual(result.error_kind, "invalid_address")
        self.assertEqual(provider.calls, [])

    def test_send_test_message(self):
        user = user_repo.create_user("ani", name="Ani", whatsapp="6281111111111")
        provider = RecordingProvider()
        result, message = _coordinator(provider).send_test(user.id)
        self.assertTrue(result.success)
        self.assertEqual(provider.calls, [("6281111111111", message)])
        self.assertIn("Ani", message)


if __name__ == "__main__":
    unittest.main()
