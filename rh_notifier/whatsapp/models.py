"""Pydantic models for provider responses and delivery results."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ProviderResponse(BaseModel):
    """Raw outcome of one provider call: HTTP-equivalent status plus the decoded JSON envelope."""

    status_code: int
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def accepted(self) -> bool:
        """Provider-level success flag (Fonnte: "status": true)."""
        return self.payload.get("status") is True

    @property
    def reason(self) -> Optional[str]:
        reason = self.payload.get("reason") or self.payload.get("message") or self.payload.get("detail")
        return str(reason) if reason else None


class DeliveryResult(BaseModel):
    """Classified outcome of Dispatcher.send."""

    success: bool
    target: Optional[str] = None
    response: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # configuration | invalid_address | transport | delivery


class OutboxMessage(BaseModel):
    """One message captured by the mock provider."""

    target: str
    message: str
    country_code: str
    sent_at: str
