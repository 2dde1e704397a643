"""ORM model for raised RH notifications.

Product and batch fields are snapshotted at raise time so the row reads the
same even if the batch later changes or the product is deleted.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rh_notifier.db.base import Base, TimestampMixin, new_id

NOTIFICATION_TYPES = ("warning", "expired")


class Notification(Base, TimestampMixin):
    """One alert per (product_id, batch_number); the unique constraint backstops concurrent raises."""

    __tablename__ = "notifications"
    __table_args__ = (
        UniqueConstraint("product_id", "batch_number", name="uq_notifications_product_batch"),
        CheckConstraint(
            "type IN (" + ", ".join(f"'{t}'" for t in NOTIFICATION_TYPES) + ")",
            name="ck_notifications_type",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    product_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    batch_number: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)

    product_name: Mapped[str] = mapped_column(String(256), nullable=False)
    barcode: Mapped[str] = mapped_column(String(64), nullable=False)
    expiry_date: Mapped[date] = mapped_column(nullable=False)
    rh_date: Mapped[date] = mapped_column(nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
