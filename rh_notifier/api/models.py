"""Pydantic request bodies for the HTTP API (camelCase on the wire)."""

from typing import Optional

from pydantic import BaseModel, Field


class _Body(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}


class CheckNotificationsRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    rh_days: Optional[int] = Field(None, alias="rhDays", ge=0)


class SendWhatsAppRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    message: Optional[str] = None


class UpdateWhatsAppRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    whatsapp: Optional[str] = None


class GenerateNotificationsRequest(_Body):
    user_id: Optional[str] = Field(None, alias="userId")
    rh_days: Optional[int] = Field(None, alias="rhDays", ge=0)
