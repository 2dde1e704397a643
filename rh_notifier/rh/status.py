"""Batch status calculation: the only place a batch's RH status is derived.

    days_until_expiry <= 0            -> expired
    0 < days_until_expiry <= rh_days  -> warning (boundary inclusive)
    otherwise                         -> safe

Both dates are reduced to calendar days before subtracting.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from pydantic import BaseModel


class RHStatus(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    EXPIRED = "expired"

    @property
    def needs_attention(self) -> bool:
        return self is not RHStatus.SAFE


class RHSummary(BaseModel):
    """Batch counts per status plus product count. Recomputed on every request."""

    total_safe: int = 0
    total_warning: int = 0
    total_expired: int = 0
    total_products: int = 0


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until_expiry(expiry_date: date | datetime, today: date | datetime) -> int:
    return (_as_date(expiry_date) - _as_date(today)).days


def compute_status(expiry_date: date | datetime, today: date | datetime, rh_days: int) -> RHStatus:
    days = days_until_expiry(expiry_date, today)
    if days <= 0:
        return RHStatus.EXPIRED
    if days <= rh_days:
        return RHStatus.WARNING
    return RHStatus.SAFE


def rh_date(expiry_date: date | datetime, rh_days: int) -> date:
    """The return deadline: expiry date minus the RH window."""
    return _as_date(expiry_date) - timedelta(days=rh_days)


def summarize(products: Iterable, today: date, rh_days: int) -> RHSummary:
    summary = RHSummary()
    for product in products:
        summary.total_products += 1
        for batch in product.batches:
            status = compute_status(batch.expiry_date, today, rh_days)
            if status is RHStatus.SAFE:
                summary.total_safe += 1
            elif status is RHStatus.WARNING:
                summary.total_warning += 1
            else:
                summary.total_expired += 1
    return summary
