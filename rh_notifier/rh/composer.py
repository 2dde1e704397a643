"""WhatsApp message rendering for batches needing attention.

Expired batches are always listed before warning batches, each group numbered
from 1. Dates use Indonesian month names; field order and labels are fixed.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from rh_notifier.rh.selector import AttentionItem

MONTHS_ID = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)
MONTHS_ID_SHORT = ("Jan", "Feb", "Mar", "Apr", "Mei", "Jun", "Jul", "Agu", "Sep", "Okt", "Nov", "Des")

HEADER = "🔔 *NOTIFIKASI RH KADALUARSA*"
EXPIRED_HEADING = "❌ *PRODUK SUDAH JATUH RH*"
WARNING_HEADING = "⚠️ *PRODUK WAJIB RETUR (H-{rh_days})*"
CALL_TO_ACTION = "Mohon segera lakukan pengecekan dan tindaklanjuti."
FOOTER = "Terima kasih,\n📱 Sistem RH KADALUARSA\n© Copyright Safir"


def format_long_date(value: date) -> str:
    """19 Oktober 2026"""
    return f"{value.day} {MONTHS_ID[value.month - 1]} {value.year}"


def format_short_date(value: date) -> str:
    """19 Okt 2026"""
    return f"{value.day:02d} {MONTHS_ID_SHORT[value.month - 1]} {value.year}"


def _render_group(heading: str, items: list[AttentionItem]) -> str:
    lines = [heading]
    for index, item in enumerate(items, 1):
        lines.append("")
        lines.append(f"{index}. {item.product_name}")
        lines.append(f"   Barcode: {item.barcode}")
        lines.append(f"   PLU: {item.plu}")
        lines.append(f"   Batch: {item.batch_number}")
        lines.append(f"   Tgl Kadaluarsa: {format_long_date(item.expiry_date)}")
        lines.append(f"   Tgl RH: {format_long_date(item.rh_date)}")
        lines.append(f"   Jumlah: {item.quantity}")
    return "\n".join(lines) + "\n\n"


def _render(intro: str, items: list[AttentionItem], rh_days: int, closing: str) -> str:
    expired = [i for i in items if i.status == "expired"]
    warning = [i for i in items if i.status == "warning"]
    message = f"{HEADER}\n\n{intro}\n\n"
    if expired:
        message += _render_group(EXPIRED_HEADING, expired)
    if warning:
        message += _render_group(WARNING_HEADING.format(rh_days=rh_days), warning)
    return message + closing


def compose(user_name: str, items: Iterable[AttentionItem], rh_days: int) -> Optional[str]:
    """Render the summary message, or None when there is nothing to send."""
    items = list(items)
    if not items:
        return None
    intro = f"Halo {user_name}, berikut produk yang perlu perhatian:"
    return _render(intro, items, rh_days, f"{CALL_TO_ACTION}\n\n{FOOTER}")


def compose_test_message(user_name: str, rh_days: int = 14, today: date | None = None) -> str:
    """Provider check message with two sample items (one expired, one warning)."""
    today = today or date.today()
    samples = [
        AttentionItem(
            product_id="sample-1",
            product_name="Contoh Produk 1",
            barcode="8991234567890",
            plu="PLU001",
            batch_number="BATCH001",
            expiry_date=today + timedelta(days=rh_days),
            rh_date=today,
            status="warning",
            quantity=100,
        ),
        AttentionItem(
            product_id="sample-2",
            product_name="Contoh Produk 2",
            barcode="8999876543210",
            plu="PLU002",
            batch_number="BATCH002",
            expiry_date=today - timedelta(days=1),
            rh_date=today - timedelta(days=1 + rh_days),
            status="expired",
            quantity=50,
        ),
    ]
    intro = f"Halo {user_name}, ini adalah pesan TES dari sistem."
    closing = (
        "*Ini adalah pesan TES untuk memastikan notifikasi berfungsi.*\n\n"
        "Sistem akan mengirim notifikasi otomatis untuk produk yang memang perlu perhatian.\n\n"
        "© RH KADALUARSA"
    )
    return _render(intro, samples, rh_days, closing)


def notification_line(item: AttentionItem) -> str:
    """Short in-app text stored on a raised notification."""
    if item.status == "warning":
        return f"{item.batch_number} wajib diretur sebelum {format_short_date(item.rh_date)}"
    return f"{item.batch_number} telah jatuh RH pada {format_short_date(item.rh_date)}"
