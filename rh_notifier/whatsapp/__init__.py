"""WhatsApp delivery: provider protocol, Fonnte and mock providers, dispatcher."""

from rh_notifier.config import WHATSAPP_OUTBOX_PATH, WHATSAPP_PROVIDER
from rh_notifier.whatsapp.dispatcher import Dispatcher
from rh_notifier.whatsapp.fonnte import FonnteProvider
from rh_notifier.whatsapp.mock import MockWhatsAppProvider
from rh_notifier.whatsapp.models import DeliveryResult, OutboxMessage, ProviderResponse
from rh_notifier.whatsapp.protocol import WhatsAppProvider


def get_provider(kind: str | None = None) -> WhatsAppProvider:
    """Build the provider selected by WHATSAPP_PROVIDER (or `kind`)."""
    kind = (kind or WHATSAPP_PROVIDER).lower()
    if kind == "mock":
        return MockWhatsAppProvider(outbox_path=WHATSAPP_OUTBOX_PATH)
    if kind == "fonnte":
        return FonnteProvider()
    raise ValueError(f"Unknown WhatsApp provider: {kind!r}. Expected 'fonnte' or 'mock'")


__all__ = [
    "DeliveryResult",
    "Dispatcher",
    "FonnteProvider",
    "MockWhatsAppProvider",
    "OutboxMessage",
    "ProviderResponse",
    "WhatsAppProvider",
    "get_provider",
]
