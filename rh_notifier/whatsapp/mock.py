"""Mock WhatsApp provider: appends messages to an outbox JSON file instead of sending."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rh_notifier.config import WHATSAPP_COUNTRY_CODE
from rh_notifier.errors import TransportError
from rh_notifier.whatsapp.models import OutboxMessage, ProviderResponse
from rh_notifier.whatsapp.phone import mask
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.whatsapp.mock")


class MockWhatsAppProvider:
    """File-backed provider for local runs and tests.

    fail_mode: None (accept), "reject" (200 with status false), "http_error" (500),
    or "transport" (raise TransportError).
    """

    name = "mock"

    def __init__(
        self,
        outbox_path: Path,
        country_code: str = WHATSAPP_COUNTRY_CODE,
        fail_mode: Optional[str] = None,
    ):
        self._outbox_path = Path(outbox_path)
        self._country_code = country_code
        self.fail_mode = fail_mode
        logger.info("mock_provider.init", outbox_path=str(self._outbox_path))

    def is_configured(self) -> bool:
        return True

    def _load_outbox(self) -> list[dict[str, Any]]:
        if not self._outbox_path.exists():
            return []
        with self._outbox_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, list) else []

    def _save_outbox(self, items: list[dict[str, Any]]) -> None:
        self._outbox_path.parent.mkdir(parents=True, exist_ok=True)
        with self._outbox_path.open("w", encoding="utf-8") as f:
            json.dump(items, f, indent=2, ensure_ascii=False)

    def list_sent(self) -> list[OutboxMessage]:
        return [OutboxMessage.model_validate(item) for item in self._load_outbox()]

    def send(self, target: str, message: str) -> ProviderResponse:
        if self.fail_mode == "transport":
            raise TransportError("Mock provider unreachable")
        if self.fail_mode == "http_error":
            return ProviderResponse(status_code=500, payload={"status": False, "reason": "mock server error"})
        if self.fail_mode == "reject":
            return ProviderResponse(status_code=200, payload={"status": False, "reason": "target invalid"})

        items = self._load_outbox()
        record = OutboxMessage(
            target=target,
            message=message,
            country_code=self._country_code,
            sent_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        )
        items.append(record.model_dump())
        self._save_outbox(items)
        logger.info("mock_provider.sent", target=mask(target), outbox_count=len(items))
        return ProviderResponse(
            status_code=200,
            payload={"status": True, "detail": "success! message in queue", "id": [str(len(items))], "process": "pending"},
        )
