"""Fonnte WhatsApp gateway client (https://fonnte.com)."""

from typing import Any, Optional

import httpx

from rh_notifier.config import (
    FONNTE_API_URL,
    FONNTE_TOKEN,
    FONNTE_TOKEN_MIN_LENGTH,
    FONNTE_TOKEN_PLACEHOLDER,
    WHATSAPP_COUNTRY_CODE,
    WHATSAPP_TIMEOUT_SECONDS,
)
from rh_notifier.errors import TransportError
from rh_notifier.whatsapp.models import ProviderResponse
from rh_notifier.whatsapp.phone import mask
from rh_notifier.utils.logger import get_logger

logger = get_logger("rh_notifier.whatsapp.fonnte")


class FonnteProvider:
    """Sends through Fonnte's /send endpoint with the device token in the Authorization header.

    `transport` lets tests substitute httpx.MockTransport.
    """

    name = "fonnte"

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = FONNTE_API_URL,
        country_code: str = WHATSAPP_COUNTRY_CODE,
        timeout: float = WHATSAPP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._token = FONNTE_TOKEN if token is None else token
        self._api_url = api_url
        self._country_code = country_code
        self._timeout = timeout
        self._transport = transport

    def is_configured(self) -> bool:
        token = (self._token or "").strip()
        if not token or token == FONNTE_TOKEN_PLACEHOLDER:
            return False
        return len(token) >= FONNTE_TOKEN_MIN_LENGTH

    def send(self, target: str, message: str) -> ProviderResponse:
        body = {
            "target": target,
            "message": message,
            "countryCode": self._country_code,
        }
        headers = {"Authorization": self._token, "Content-Type": "application/json"}
        log = logger.bind(target=mask(target))
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.post(self._api_url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            log.warning("fonnte.timeout", timeout=self._timeout)
            raise TransportError(f"Fonnte API timed out after {self._timeout:g}s", cause=e) from e
        except httpx.HTTPError as e:
            log.warning("fonnte.transport_error", error=str(e))
            raise TransportError(f"Fonnte API unreachable: {e}", cause=e) from e

        payload = _decode(resp)
        log.debug("fonnte.response", status_code=resp.status_code, payload=payload)
        return ProviderResponse(status_code=resp.status_code, payload=payload)


def _decode(resp: httpx.Response) -> dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {"raw": resp.text}
    if isinstance(data, dict):
        return data
    return {"raw": data}
