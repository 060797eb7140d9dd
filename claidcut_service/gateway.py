"""
Background-removal gateway backed by the Eden AI API.

`BackgroundRemovalGateway.remove_background` is the main entry point used by
the HTTP API, the batch runner and the local test script:
data URI in -> decode -> multipart POST -> response validation -> URI out.

The gateway keeps no per-request state. The only thing shared between calls
is the `requests.Session` connection pool.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from . import config
from .encoding import DecodedImage, decode_data_uri
from .errors import (
    ConfigurationError,
    ProviderConnectionError,
    ProviderContractError,
    ProviderHttpError,
    ProviderTimeoutError,
)
from .providers import extract_image_url
from .retry import RetryPolicy
from .schemas import RemovalRequest, RemovalResult

logger = logging.getLogger(__name__)

UPLOAD_FILENAME = "image.png"


class BackgroundRemovalGateway:
    def __init__(
        self,
        settings: Optional[config.Settings] = None,
        session: Optional[requests.Session] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or config.get_settings()
        self.session = session or requests.Session()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            backoff_seconds=self.settings.retry_backoff_seconds,
        )

    def _form_fields(self) -> dict:
        return {
            "providers": self.settings.removal_provider.value,
            "response_as_dict": "true",
            "attributes_as_list": "false",
            "output_format": self.settings.output_format,
        }

    def _post(self, api_key: str, image: DecodedImage) -> requests.Response:
        files = {"file": (UPLOAD_FILENAME, image.data, image.mime_type)}
        try:
            response = self.session.post(
                self.settings.eden_ai_endpoint,
                headers={"Authorization": f"Bearer {api_key}"},
                data=self._form_fields(),
                files=files,
                timeout=self.settings.timeout,
            )
        except requests.Timeout as exc:
            raise ProviderTimeoutError(
                f"Eden AI did not respond within {self.settings.request_timeout_seconds:g}s."
            ) from exc
        except requests.RequestException as exc:
            raise ProviderConnectionError(f"Could not connect to Eden AI: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.error("Eden AI API error %s: %s", response.status_code, response.text)
            raise ProviderHttpError(response.status_code, response.text)
        return response

    def remove_background(self, request: RemovalRequest) -> RemovalResult:
        """
        Submit one image to Eden AI and return the processed image URI.

        Raises:
            ConfigurationError: no API key is configured (no network call).
            DecodeError: the data URI is malformed (no network call).
            ProviderHttpError: non-2xx response, carries status and raw body.
            ProviderTimeoutError / ProviderConnectionError: transport failures.
            ProviderContractError: 2xx response with a failed or malformed payload.
        """
        api_key = self.settings.eden_ai_api_key
        if not api_key:
            raise ConfigurationError("EDEN_AI_API_KEY is not set in environment variables.")

        image = decode_data_uri(request.imageDataUri, max_bytes=self.settings.max_image_bytes)
        provider = self.settings.removal_provider
        logger.info(
            "Submitting %d byte %s image to Eden AI provider=%s",
            len(image.data),
            image.mime_type,
            provider.value,
        )

        response = self.retry_policy.call(lambda: self._post(api_key, image))
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Eden AI returned non-JSON body: %s", response.text)
            raise ProviderContractError("Eden AI returned a response that is not valid JSON.") from exc

        image_url = extract_image_url(payload, provider)
        logger.info("Eden AI provider=%s returned a processed image", provider.value)
        return RemovalResult(processedImageUri=image_url)

    def close(self) -> None:
        self.session.close()


def remove_background(request: RemovalRequest) -> RemovalResult:
    """One-shot helper using environment settings and a fresh session."""
    gateway = BackgroundRemovalGateway()
    try:
        return gateway.remove_background(request)
    finally:
        gateway.close()
