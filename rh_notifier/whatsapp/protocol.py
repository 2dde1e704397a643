"""WhatsApp provider protocol: the capability the dispatcher is written against."""

from typing import Protocol

from rh_notifier.whatsapp.models import ProviderResponse


class WhatsAppProvider(Protocol):
    """Abstract outbound messaging gateway."""

    name: str

    def is_configured(self) -> bool:
        """False when the credential is missing or a placeholder."""
        ...

    def send(self, target: str, message: str) -> ProviderResponse:
        """Send one message to a digit-only international number.

        Returns the provider's status and JSON body without judging them.
        Raises TransportError when the provider cannot be reached or times out.
        """
        ...
