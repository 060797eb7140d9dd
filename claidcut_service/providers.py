"""
Eden AI response contract.

Eden AI fans a request out to named sub-providers and, with
`response_as_dict=true`, answers with one JSON object keyed by provider name:

    {"clipdrop": {"status": "success", "image_resource_url": "https://..."}}

The payload is untrusted input, so extraction checks every step explicitly.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import Any

from .errors import ProviderContractError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = frozenset({"png", "jpg", "webp"})
SUCCESS_STATUS = "success"
IMAGE_URL_FIELD = "image_resource_url"


class Provider(str, Enum):
    """Background-removal backends selectable through Eden AI."""

    CLIPDROP = "clipdrop"
    API4AI = "api4ai"
    PHOTOROOM = "photoroom"
    PICSART = "picsart"
    SENTISIGHT = "sentisight"
    STABILITYAI = "stabilityai"


def extract_image_url(payload: Any, provider: Provider) -> str:
    """
    Return the processed image location reported for `provider`.

    Raises:
        ProviderContractError: the payload is not an object, has no entry for
            the provider, reports a non-success status, or lacks the image URL.
    """
    if not isinstance(payload, dict):
        raise ProviderContractError("Eden AI returned a response that is not a JSON object.")

    result = payload.get(provider.value)
    if result is None:
        logger.error("Eden AI response has no entry for provider %s: keys=%s", provider.value, list(payload))
        raise ProviderContractError(f"Eden AI response has no result for unknown provider key '{provider.value}'.")
    if not isinstance(result, dict):
        raise ProviderContractError(f"Eden AI result for '{provider.value}' is not an object.")

    status = result.get("status")
    if status != SUCCESS_STATUS:
        logger.error("Eden AI provider %s reported status=%r: %s", provider.value, status, result)
        error = result.get("error")
        detail = f": {error}" if error else ""
        raise ProviderContractError(f"Eden AI provider '{provider.value}' reported status '{status}'{detail}")

    image_url = result.get(IMAGE_URL_FIELD)
    if not isinstance(image_url, str) or not image_url:
        logger.error("Eden AI provider %s succeeded without %s: %s", provider.value, IMAGE_URL_FIELD, result)
        raise ProviderContractError(f"Eden AI response is missing {IMAGE_URL_FIELD}.")
    return image_url
