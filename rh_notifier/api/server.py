"""FastAPI app: on-demand notification checks and WhatsApp contact management."""

from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse

from rh_notifier import __version__
from rh_notifier.api.models import (
    CheckNotificationsRequest,
    SendWhatsAppRequest,
    UpdateWhatsAppRequest,
)
from rh_notifier.api.notification_routes import router as notification_router
from rh_notifier.config import RH_DAYS
from rh_notifier.coordinator import Coordinator
from rh_notifier.db import init_db
from rh_notifier.db.repositories import user_repo
from rh_notifier.errors import InvalidAddressError, NotFoundError
from rh_notifier.utils.logger import get_logger
from rh_notifier.whatsapp import Dispatcher, get_provider
from rh_notifier.whatsapp.models import DeliveryResult
from rh_notifier.whatsapp.phone import format_display, to_international
from rh_notifier.whatsapp.protocol import WhatsAppProvider

logger = get_logger("rh_notifier.api.server")


def _require(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise HTTPException(status_code=400, detail=f"{field} is required")
    return value.strip()


def _delivery_payload(result: DeliveryResult, user_whatsapp: str, message: str, provider: str) -> dict[str, Any]:
    return {
        "success": True,
        "message": "WhatsApp message sent",
        "to": user_whatsapp,
        "content": message,
        "provider": provider,
        "response": result.response,
    }


def create_app(
    provider: WhatsAppProvider | None = None,
    coordinator: Coordinator | None = None,
) -> FastAPI:
    """
    Create the FastAPI app. Pass a coordinator (or just a provider) to override
    the one built from configuration; tests pass a mock provider.
    """
    init_db()
    if coordinator is None:
        coordinator = Coordinator(Dispatcher(provider or get_provider()), rh_days=RH_DAYS)

    app = FastAPI(title="RH Notifier", version=__version__)
    app.state.coordinator = coordinator
    app.include_router(notification_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/check-notifications")
    def check_notifications(body: CheckNotificationsRequest):
        """Check one user's batches and send a WhatsApp summary if any need attention."""
        user_id = _require(body.user_id, "userId")
        log = logger.bind(route="check-notifications", user_id=user_id)
        try:
            result = app.state.coordinator.check_user(user_id, rh_days=body.rh_days)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        except Exception as e:
            log.exception("api.check_notifications.error")
            raise HTTPException(status_code=500, detail="Internal error while checking notifications") from e

        if not result.success:
            log.warning("api.check_notifications.failed", errors=result.errors)
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Notification check failed",
                    "sent": result.sent,
                    "failed": result.failed,
                    "details": result.errors,
                },
            )
        return {
            "success": True,
            "message": "Notification check complete",
            "sent": result.sent,
            "failed": result.failed,
            "details": result.errors or None,
        }

    @app.get("/api/check-notifications")
    def notification_status(user_id: Optional[str] = Query(None, alias="userId")) -> dict[str, Any]:
        """Whether the user can receive WhatsApp notifications."""
        user_id = _require(user_id, "userId")
        user = user_repo.get_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")
        has_whatsapp = bool(user.whatsapp)
        return {
            "userId": user.id,
            "userName": user.name,
            "hasWhatsApp": has_whatsapp,
            "whatsappNumber": format_display(user.whatsapp) if has_whatsapp else "",
            "notificationEnabled": has_whatsapp,
        }

    @app.post("/api/send-whatsapp")
    def send_whatsapp(body: SendWhatsAppRequest):
        """Send a free-form message to the user's WhatsApp number."""
        user_id = _require(body.user_id, "userId")
        message = _require(body.message, "message")
        user = user_repo.get_by_id(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")
        if not user.whatsapp:
            raise HTTPException(status_code=400, detail=f"User {user.username} has no WhatsApp number")
        result = app.state.coordinator.send_message(user_id, message)
        if not result.success:
            return JSONResponse(status_code=500, content={"error": result.error, "kind": result.error_kind})
        return _delivery_payload(result, user.whatsapp, message, app.state.coordinator.dispatcher.provider.name)

    @app.get("/api/send-whatsapp")
    def send_test_whatsapp(user_id: Optional[str] = Query(None, alias="userId")):
        """Send the sample message to verify the provider setup."""
        user_id = _require(user_id, "userId")
        try:
            result, message = app.state.coordinator.send_test(user_id)
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        if not result.success:
            return JSONResponse(status_code=500, content={"error": result.error, "kind": result.error_kind})
        user = user_repo.get_by_id(user_id)
        return _delivery_payload(result, user.whatsapp, message, app.state.coordinator.dispatcher.provider.name)

    @app.post("/api/user/update-whatsapp")
    def update_whatsapp(body: UpdateWhatsAppRequest) -> dict[str, Any]:
        """Normalize and store a user's WhatsApp number (0812... becomes 62812...)."""
        user_id = _require(body.user_id, "userId")
        raw = _require(body.whatsapp, "whatsapp")
        try:
            number = to_international(raw, app.state.coordinator.dispatcher.country_code)
            user = user_repo.update_whatsapp(user_id, number)
        except InvalidAddressError as e:
            raise HTTPException(status_code=400, detail=e.message) from e
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=e.message) from e
        logger.info("api.update_whatsapp", user_id=user.id)
        return {
            "success": True,
            "message": "WhatsApp number updated",
            "user": {
                "id": user.id,
                "username": user.username,
                "name": user.name,
                "whatsapp": format_display(user.whatsapp),
            },
        }

    return app
