"""Error taxonomy for the notification engine.

Per-user errors are caught by the coordinator and reported; only
StoreUnavailableError aborts a whole run.
"""

from typing import Any


class RhNotifierError(Exception):
    """Base class for all engine errors. `kind` is a stable machine-readable tag."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(RhNotifierError):
    """Provider credential missing or still the placeholder value."""

    kind = "configuration"


class InvalidAddressError(RhNotifierError):
    """Contact address failed normalization or country-prefix validation."""

    kind = "invalid_address"


class TransportError(RhNotifierError):
    """Provider unreachable or the call timed out."""

    kind = "transport"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class DeliveryError(RhNotifierError):
    """Provider reachable but rejected the send."""

    kind = "delivery"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class NotFoundError(RhNotifierError):
    """Referenced user, product or notification does not exist."""

    kind = "not_found"


class StoreUnavailableError(RhNotifierError):
    """The user/product collection could not be read at all.

    `partial` holds the outcomes of users processed before the failure, when there were any.
    """

    kind = "store_unavailable"

    def __init__(self, message: str, partial: Any = None):
        super().__init__(message)
        self.partial = partial
