"""Notification repository: listing, idempotent inserts and read-flag updates."""

from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from rh_notifier.db import get_session
from rh_notifier.db.models.notification import Notification
from rh_notifier.errors import NotFoundError
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.db.notification_repo")


def list_for_user(user_id: str, unread_only: bool = False) -> list[Notification]:
    """Newest first."""
    with get_session() as session:
        q = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            q = q.where(Notification.is_read == False)  # noqa: E712
        q = q.order_by(Notification.created_at.desc(), Notification.batch_number)
        return list(session.scalars(q).all())


def list_for_products(product_ids: Iterable[str]) -> list[Notification]:
    """All notifications (read or unread) referencing any of these products."""
    ids = list(product_ids)
    if not ids:
        return []
    with get_session() as session:
        q = select(Notification).where(Notification.product_id.in_(ids))
        return list(session.scalars(q).all())


def get_by_id(notification_id: str) -> Optional[Notification]:
    with get_session() as session:
        return session.get(Notification, notification_id)


def get_by_product_batch(product_id: str, batch_number: str) -> Optional[Notification]:
    with get_session() as session:
        q = (
            select(Notification)
            .where(Notification.product_id == product_id)
            .where(Notification.batch_number == batch_number)
        )
        return session.scalars(q).first()


def insert_many(rows: Iterable[Notification]) -> list[Notification]:
    """Insert each row in its own transaction; rows hitting the (product_id, batch_number)
    unique constraint were raised concurrently and are skipped."""
    inserted = []
    for row in rows:
        try:
            with get_session() as session:
                session.add(row)
                session.flush()
            inserted.append(row)
        except IntegrityError:
            logger.info(
                "notification_repo.duplicate_skipped",
                product_id=row.product_id,
                batch_number=row.batch_number,
            )
    return inserted


def mark_read(notification_id: str) -> Notification:
    """Set is_read. Marking an already-read notification is a no-op."""
    with get_session() as session:
        row = session.get(Notification, notification_id)
        if row is None:
            raise NotFoundError(f"Notification {notification_id} not found")
        if not row.is_read:
            row.is_read = True
            session.flush()
        return row


def count_unread(user_id: str) -> int:
    with get_session() as session:
        q = (
            select(func.count(Notification.id))
            .where(Notification.user_id == user_id)
            .where(Notification.is_read == False)  # noqa: E712
        )
        return session.scalar(q) or 0
