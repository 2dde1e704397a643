"""Attention selection: which (product, batch) pairs need action today."""

from datetime import date
from typing import Iterable, Literal

from pydantic import BaseModel

from rh_notifier.rh.status import compute_status, rh_date


class AttentionItem(BaseModel):
    """A batch in warning or expired status, flattened with its product fields."""

    product_id: str
    product_name: str
    barcode: str
    plu: str
    batch_number: str
    expiry_date: date
    rh_date: date
    status: Literal["warning", "expired"]
    quantity: int

    @property
    def key(self) -> tuple[str, str]:
        return (self.product_id, self.batch_number)


def select_attention(products: Iterable, rh_days: int, today: date | None = None) -> list[AttentionItem]:
    """Return warning/expired batches in product order, then batch order.

    Products are duck-typed: anything with id, name, barcode, plu and a batches
    list of objects with batch_number, expiry_date and quantity.
    """
    today = today or date.today()
    items = []
    for product in products:
        for batch in product.batches:
            status = compute_status(batch.expiry_date, today, rh_days)
            if not status.needs_attention:
                continue
            items.append(
                AttentionItem(
                    product_id=product.id,
                    product_name=product.name,
                    barcode=product.barcode,
                    plu=product.plu,
                    batch_number=batch.batch_number,
                    expiry_date=batch.expiry_date,
                    rh_date=rh_date(batch.expiry_date, rh_days),
                    status=status.value,
                    quantity=batch.quantity,
                )
            )
    return items
