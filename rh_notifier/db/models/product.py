"""ORM models for products and their batches.

Batch status and RH date are not stored: they depend on the current date and
the configured RH window, so they are computed by rh_notifier.rh.status on read.
"""

from datetime import date
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rh_notifier.db.base import Base, TimestampMixin, new_id


class Product(Base, TimestampMixin):
    """Product identified by barcode, with a store-local PLU code (PLU001, PLU002, ...)."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    barcode: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    plu_seq: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    plu: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    # Highest batch sequence ever assigned for this product; never decreases
    batch_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped["User"] = relationship("User", back_populates="products")  # noqa: F821
    batches: Mapped[list["Batch"]] = relationship(
        "Batch",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Batch.seq",
    )


class Batch(Base, TimestampMixin):
    """A quantity of one product sharing an expiry date."""

    __tablename__ = "batches"
    __table_args__ = (
        UniqueConstraint("product_id", "seq", name="uq_batches_product_seq"),
        UniqueConstraint("product_id", "batch_number", name="uq_batches_product_batch_number"),
        CheckConstraint("quantity > 0", name="ck_batches_quantity_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    product_id: Mapped[str] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    batch_number: Mapped[str] = mapped_column(String(32), nullable=False)
    expiry_date: Mapped[date] = mapped_column(nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="batches")
