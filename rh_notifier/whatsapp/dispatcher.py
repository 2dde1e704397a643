"""Delivery dispatcher: validate, normalize, send once, classify.

    configured? -> normalize address -> prefix ok? -> provider.send -> classify

There is no retry here. A failed send is reported to the caller and the next
scheduled run composes a fresh message.
"""

from rh_notifier.config import WHATSAPP_COUNTRY_CODE
from rh_notifier.errors import (
    ConfigurationError,
    DeliveryError,
    InvalidAddressError,
    RhNotifierError,
)
from rh_notifier.utils.logger import get_logger
from rh_notifier.utils.tracing import get_tracer
from rh_notifier.whatsapp.models import DeliveryResult, ProviderResponse
from rh_notifier.whatsapp.phone import clean_number, has_prefix, mask
from rh_notifier.whatsapp.protocol import WhatsAppProvider

logger = get_logger("rh_notifier.whatsapp.dispatcher")


class Dispatcher:
    def __init__(self, provider: WhatsAppProvider, country_code: str = WHATSAPP_COUNTRY_CODE):
        self.provider = provider
        self.country_code = country_code

    def deliver(self, address: str, message: str) -> ProviderResponse:
        """Run the state machine, raising the matching RhNotifierError on any failure."""
        if not self.provider.is_configured():
            raise ConfigurationError(
                "WhatsApp API belum dikonfigurasi. Set FONNTE_TOKEN di environment variables."
            )
        target = clean_number(address)
        if not target or not has_prefix(target, self.country_code):
            raise InvalidAddressError(
                f"Format nomor WhatsApp tidak valid (harus mulai dengan {self.country_code})"
            )

        response = self.provider.send(target, message)

        if not response.ok:
            raise DeliveryError(
                response.reason or f"Provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                response=response.payload,
            )
        if not response.accepted:
            raise DeliveryError(
                response.reason or f"Provider returned non-success status: {response.payload.get('status')}",
                status_code=response.status_code,
                response=response.payload,
            )
        return response

    def send(self, address: str, message: str) -> DeliveryResult:
        """Deliver and convert the outcome into a DeliveryResult (never raises RhNotifierError)."""
        target = clean_number(address)
        log = logger.bind(provider=self.provider.name, target=mask(target))
        with get_tracer().start_as_current_span(
            "dispatcher.send",
            attributes={"whatsapp.provider": self.provider.name},
        ) as span:
            try:
                response = self.deliver(address, message)
            except RhNotifierError as e:
                span.set_attribute("whatsapp.error_kind", e.kind)
                log.warning("dispatcher.failed", error_kind=e.kind, error=e.message)
                return DeliveryResult(
                    success=False,
                    target=target or None,
                    response=getattr(e, "response", None),
                    error=e.message,
                    error_kind=e.kind,
                )
            log.info("dispatcher.sent", status_code=response.status_code)
            return DeliveryResult(success=True, target=target, response=response.payload)
