"""Notification API: list, generate (dedup raise), mark read, RH summary."""

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from rh_notifier.api.models import GenerateNotificationsRequest
from rh_notifier.config import RH_DAYS
from rh_notifier.db.models.notification import Notification
from rh_notifier.db.repositories import notification_repo, product_repo, user_repo
from rh_notifier.errors import NotFoundError
from rh_notifier.rh.dedup import mark_read, raise_for_user
from rh_notifier.rh.status import summarize

router = APIRouter(prefix="/api", tags=["notifications"])


def notification_to_dict(row: Notification) -> dict[str, Any]:
    return {
        "id": row.id,
        "type": row.type,
        "productId": row.product_id,
        "productName": row.product_name,
        "barcode": row.barcode,
        "batchNumber": row.batch_number,
        "expiryDate": row.expiry_date.isoformat(),
        "rhDate": row.rh_date.isoformat(),
        "message": row.message,
        "isRead": row.is_read,
        "createdAt": row.created_at.isoformat() if row.created_at else None,
    }


def _require_user_id(user_id: Optional[str]) -> str:
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=400, detail="userId is required")
    user_id = user_id.strip()
    if user_repo.get_by_id(user_id) is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user_id


@router.get("/notifications")
def list_notifications(
    user_id: Optional[str] = Query(None, alias="userId"),
    unread_only: bool = Query(False, alias="unreadOnly"),
) -> dict[str, Any]:
    """Notifications for a user, newest first, with the unread count."""
    user_id = _require_user_id(user_id)
    rows = notification_repo.list_for_user(user_id, unread_only=unread_only)
    return {
        "items": [notification_to_dict(r) for r in rows],
        "unread": notification_repo.count_unread(user_id),
    }


@router.post("/notifications/generate")
def generate_notifications(body: GenerateNotificationsRequest) -> dict[str, Any]:
    """Raise notifications for this user's newly qualifying batches. Repeat calls add nothing."""
    user_id = _require_user_id(body.user_id)
    rh_days = RH_DAYS if body.rh_days is None else body.rh_days
    inserted = raise_for_user(user_id, rh_days)
    return {
        "raised": len(inserted),
        "items": [notification_to_dict(r) for r in inserted],
    }


@router.post("/notifications/{notification_id}/read")
def mark_notification_read(notification_id: str) -> dict[str, Any]:
    try:
        row = mark_read(notification_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return notification_to_dict(row)


@router.get("/summary")
def rh_summary(
    user_id: Optional[str] = Query(None, alias="userId"),
    rh_days: int = Query(RH_DAYS, alias="rhDays", ge=0),
) -> dict[str, Any]:
    """Batch counts per status. Without userId, covers every product."""
    if user_id:
        products = product_repo.list_for_user(_require_user_id(user_id))
    else:
        products = product_repo.list_all()
    summary = summarize(products, date.today(), rh_days)
    return {
        "totalSafe": summary.total_safe,
        "totalWarning": summary.total_warning,
        "totalExpired": summary.total_expired,
        "totalProducts": summary.total_products,
        "rhDays": rh_days,
    }
