"""Typed failures raised by the background-removal gateway."""

from __future__ import annotations

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class GatewayError(Exception):
    """Base class for every gateway failure."""

    kind = "gateway"
    retryable = False


class ConfigurationError(GatewayError):
    """The provider API key is not configured."""

    kind = "configuration"


class DecodeError(GatewayError):
    """The submitted data URI is malformed or not an allowed image."""

    kind = "decode"


class ProviderHttpError(GatewayError):
    """The provider answered with a non-2xx status."""

    kind = "provider_http"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Eden AI API request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code in RETRYABLE_STATUS_CODES


class ProviderContractError(GatewayError):
    """HTTP success, but the payload reports a failure or lacks the image URL."""

    kind = "provider_contract"


class ProviderTimeoutError(GatewayError):
    kind = "provider_timeout"
    retryable = True


class ProviderConnectionError(GatewayError):
    kind = "provider_connection"
    retryable = True
