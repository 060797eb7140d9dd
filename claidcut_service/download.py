"""
Helpers for saving a processed image.

Eden AI hands back short-lived URLs (or, for some providers, data URIs), so
the caller should fetch the cut-out soon after the gateway returns.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import PurePath
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DOWNLOAD_PREFIX = "ClaidCut"


def download_filename(original_name: Optional[str]) -> str:
    """`photo.jpg` -> `ClaidCut_photo_bg_removed.png`."""
    stem = PurePath(original_name).name.split(".")[0] if original_name else ""
    return f"{DOWNLOAD_PREFIX}_{stem or 'image'}_bg_removed.png"


def fetch_processed_image(
    uri: str,
    session: Optional[requests.Session] = None,
    timeout: tuple[float, float] = (5, 60),
) -> bytes:
    """Return the bytes behind a processed image URI (http(s) URL or base64 data URI)."""
    if uri.startswith("data:"):
        header, sep, payload = uri.partition(",")
        if not sep or ";base64" not in header:
            raise ValueError("Processed image data URI is not base64 encoded")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("Processed image data URI is not valid base64") from exc

    if not uri.startswith(("http://", "https://")):
        raise ValueError(f"Unsupported processed image URI: {uri[:32]}")

    http = session or requests
    resp = http.get(uri, timeout=timeout)
    resp.raise_for_status()
    logger.info("Downloaded %d bytes of processed image", len(resp.content))
    return resp.content
