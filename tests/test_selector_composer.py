"""Tests for attention selection and WhatsApp message composition."""

import sys
import unittest
from datetime import date, timedelta
from pathlib import Path
from types import SimpleNamespace

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from rh_notifier.rh.composer import (
    compose,
    compose_test_message,
    format_long_date,
    format_short_date,
    notification_line,
)
from rh_notifier.rh.selector import AttentionItem, select_attention

TODAY = date(2026, 10, 19)


def _product(pid, name, batches):
    return SimpleNamespace(
        id=pid,
        name=name,
        barcode=f"899{pid}",
        plu=f"PLU{pid}",
        batches=[
            SimpleNamespace(batch_number=number, expiry_date=TODAY + timedelta(days=offset), quantity=10)
            for number, offset in batches
        ],
    )


def _item(status, name="Aqua 600ml", batch_number="BATCH001", offset=-1):
    expiry = TODAY + timedelta(days=offset)
    return AttentionItem(
        product_id="p1",
        product_name=name,
        barcode="8999876543210",
        plu="PLU002",
        batch_number=batch_number,
        expiry_date=expiry,
        rh_date=expiry - timedelta(days=14),
        status=status,
        quantity=200,
    )


class TestSelectAttention(unittest.TestCase):
    def test_keeps_only_warning_and_expired(self):
        products = [
            _product("1", "Indomie", [("BATCH001", 10), ("BATCH002", 90)]),
            _product("2", "Aqua", [("BATCH001", -3)]),
            _product("3", "Empty", []),
        ]
        items = select_attention(products, 14, TODAY)
        self.assertEqual([(i.product_id, i.batch_number, i.status) for i in items], [
            ("1", "BATCH001", "warning"),
            ("2", "BATCH001", "expired"),
        ])
        self.assertEqual(items[0].rh_date, TODAY + timedelta(days=10 - 14))

    def test_boundary_is_warning(self):
        items = select_attention([_product("1", "X", [("BATCH001", 14)])], 14, TODAY)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].status, "warning")

    def test_order_is_stable(self):
        products = [_product(str(n), f"P{n}", [("BATCH001", n - 3), ("BATCH002", n)]) for n in range(1, 6)]
        first = select_attention(products, 14, TODAY)
        second = select_attention(products, 14, TODAY)
        self.assertEqual([i.key for i in first], [i.key for i in second])


class TestCompose(unittest.TestCase):
    def test_empty_returns_none(self):
        self.assertIsNone(compose("Admin", [], 14))

    def test_expired_group_precedes_warning_group(self):
        items = [
            _item("warning", name="Indomie Goreng", offset=10),
            _item("expired", name="Aqua 600ml", offset=-1),
            _item("warning", name="Susu UHT", batch_number="BATCH004", offset=5),
        ]
        message = compose("Admin", items, 14)
        self.assertTrue(message)
        self.assertIn("Halo Admin", message)
        expired_at = message.index("PRODUK SUDAH JATUH RH")
        warning_at = message.index("PRODUK WAJIB RETUR (H-14)")
        self.assertLess(expired_at, warning_at)
        self.assertLess(message.index("1. Aqua 600ml"), warning_at)
        # numbering restarts per group
        self.assertGreater(message.index("1. Indomie Goreng"), warning_at)
        self.assertGreater(message.index("2. Susu UHT"), warning_at)
        self.assertTrue(message.endswith("© Copyright Safir"))
        self.assertIn("Mohon segera lakukan pengecekan", message)

    def test_item_fields_in_order(self):
        message = compose("Admin", [_item("expired", offset=-1)], 14)
        expiry = TODAY - timedelta(days=1)
        block = message[message.index("1. Aqua 600ml"):]
        labels = ["Barcode: 8999876543210", "PLU: PLU002", "Batch: BATCH001",
                  f"Tgl Kadaluarsa: {format_long_date(expiry)}",
                  f"Tgl RH: {format_long_date(expiry - timedelta(days=14))}", "Jumlah: 200"]
        positions = [block.index(label) for label in labels]
        self.assertEqual(positions, sorted(positions))
        self.assertNotIn("WAJIB RETUR", message)

    def test_date_formats(self):
        self.assertEqual(format_long_date(date(2026, 10, 5)), "5 Oktober 2026")
        self.assertEqual(format_short_date(date(2026, 10, 5)), "05 Okt 2026")

    def test_notification_line(self):
        self.assertEqual(
            notification_line(_item("warning", offset=10)),
            f"BATCH001 wajib diretur sebelum {format_short_date(TODAY - timedelta(days=4))}",
        )
        self.assertTrue(notification_line(_item("expired")).startswith("BATCH001 telah jatuh RH pada"))

    def test_test_message(self):
        message = compose_test_message("Admin", 14, TODAY)
        self.assertIn("pesan TES", message)
        self.assertLess(message.index("Contoh Produk 2"), message.index("Contoh Produk 1"))


if __name__ == "__main__":
    unittest.main()
