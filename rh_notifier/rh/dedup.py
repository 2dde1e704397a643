"""Notification deduplication: one notification per (product_id, batch_number), ever.

Existing notifications are never updated by a later raise: not their read flag,
type or snapshot dates, and not when the batch has since returned to safe.
"""

from datetime import date, datetime, timezone
from typing import Iterable

from rh_notifier.db.models.notification import Notification
from rh_notifier.db.repositories import notification_repo, product_repo
from rh_notifier.rh.composer import notification_line
from rh_notifier.rh.selector import AttentionItem, select_attention
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.rh.dedup")


def raise_notifications(
    pending: Iterable[AttentionItem],
    existing: Iterable,
    user_id: str | None = None,
    now: datetime | None = None,
) -> list[Notification]:
    """Build (unsaved) notifications for pending items whose key is not already raised.

    `existing` items need product_id and batch_number attributes.
    """
    now = now or datetime.now(timezone.utc)
    seen = {(n.product_id, n.batch_number) for n in existing}
    created = []
    for item in pending:
        if item.key in seen:
            continue
        seen.add(item.key)
        created.append(
            Notification(
                user_id=user_id,
                product_id=item.product_id,
                batch_number=item.batch_number,
                type=item.status,
                product_name=item.product_name,
                barcode=item.barcode,
                expiry_date=item.expiry_date,
                rh_date=item.rh_date,
                message=notification_line(item),
                is_read=False,
                created_at=now,
                updated_at=now,
            )
        )
    return created


def raise_for_items(user_id: str, items: list[AttentionItem]) -> list[Notification]:
    """Persist notifications for newly qualifying items; returns only the rows inserted."""
    if not items:
        return []
    existing = notification_repo.list_for_products({item.product_id for item in items})
    new_rows = raise_notifications(items, existing, user_id=user_id)
    inserted = notification_repo.insert_many(new_rows)
    if inserted:
        logger.info("dedup.raised", user_id=user_id, count=len(inserted))
    return inserted


def raise_for_user(user_id: str, rh_days: int, today: date | None = None) -> list[Notification]:
    products = product_repo.list_for_user(user_id)
    return raise_for_items(user_id, select_attention(products, rh_days, today))


def mark_read(notification_id: str) -> Notification:
    return notification_repo.mark_read(notification_id)
