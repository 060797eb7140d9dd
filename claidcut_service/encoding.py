"""
Data-URI encoding for images crossing the client/server boundary.

The encoder performs no image processing: bytes in, `data:<mime>;base64,...`
out. `decode_data_uri` is its inverse and is where untrusted client input is
validated before anything is sent to the provider.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO

from PIL import Image

from .config import DEFAULT_MAX_IMAGE_BYTES
from .errors import DecodeError

ALLOWED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
_PIL_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp"}
_DATA_PREFIX = "data:"


class ImageValidationError(ValueError):
    """The selected file cannot be submitted for background removal."""


@dataclass(frozen=True)
class DecodedImage:
    mime_type: str
    data: bytes


def encode_image(file_bytes: bytes, mime_type: str) -> str:
    """Return `file_bytes` as a base64 data URI tagged with `mime_type`."""
    if not file_bytes:
        raise ValueError("Cannot encode an empty image")
    mime_type = mime_type.lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValueError(f"Unsupported image type: {mime_type}")
    payload = base64.b64encode(file_bytes).decode("ascii")
    return f"{_DATA_PREFIX}{mime_type};base64,{payload}"


def decode_data_uri(data_uri: str, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> DecodedImage:
    """
    Split a data URI into its mime type and raw bytes.

    Raises:
        DecodeError: when the URI is malformed, not base64, not an allowed
            image type, empty, or larger than `max_bytes` once decoded.
    """
    if not isinstance(data_uri, str) or not data_uri.startswith(_DATA_PREFIX):
        raise DecodeError("Image must be a data URI starting with 'data:'.")

    header, sep, payload = data_uri.partition(",")
    if not sep:
        raise DecodeError("Image data URI is missing the ',' separator.")

    params = header[len(_DATA_PREFIX):].split(";")
    mime_type = params[0].strip().lower()
    if "base64" not in (p.strip().lower() for p in params[1:]):
        raise DecodeError("Image data URI must use base64 encoding.")
    if mime_type not in ALLOWED_MIME_TYPES:
        raise DecodeError(f"Unsupported image type '{mime_type}'; use PNG, JPEG or WEBP.")

    payload = payload.strip()
    if not payload:
        raise DecodeError("Image data URI has an empty payload.")
    # Reject obviously oversized payloads before allocating the decoded buffer.
    if len(payload) // 4 * 3 > max_bytes + 3:
        raise DecodeError(f"Image exceeds the {max_bytes} byte limit.")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Image data URI payload is not valid base64.") from exc

    if len(data) > max_bytes:
        raise DecodeError(f"Image exceeds the {max_bytes} byte limit.")
    return DecodedImage(mime_type=mime_type, data=data)


def validate_upload(file_bytes: bytes, mime_type: str, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> str:
    """
    Selection-time checks for a user-supplied file; returns the normalized mime type.

    Pillow only identifies the container format here, the pixels are never decoded.
    """
    if not file_bytes:
        raise ImageValidationError("The selected file is empty.")
    if len(file_bytes) > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise ImageValidationError(f"Please upload an image smaller than {limit_mb}MB.")

    mime_type = (mime_type or "").lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ImageValidationError("Select an image file (PNG, JPG, WEBP).")

    try:
        with Image.open(BytesIO(file_bytes)) as image:
            detected = _PIL_FORMATS.get(image.format or "")
            image.verify()
    except Exception as exc:  # noqa: BLE001
        raise ImageValidationError("Invalid image data") from exc
    if detected is None:
        raise ImageValidationError("Select an image file (PNG, JPG, WEBP).")
    return mime_type
