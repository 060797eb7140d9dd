"""
FastAPI layer exposing the Eden AI background-removal gateway.

Endpoints:
 - GET /health
 - POST /remove-background          JSON {"imageDataUri": "..."}
 - POST /remove-background/upload   multipart "file"
"""

from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .encoding import ImageValidationError, encode_image, validate_upload
from .errors import (
    ConfigurationError,
    DecodeError,
    GatewayError,
    ProviderTimeoutError,
)
from .gateway import BackgroundRemovalGateway
from .schemas import ErrorResponse, RemovalRequest, RemovalResult

settings = config.get_settings()
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="ClaidCut Background Removal Service", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@lru_cache()
def get_gateway() -> BackgroundRemovalGateway:
    return BackgroundRemovalGateway(settings)


def _status_for(exc: GatewayError) -> int:
    if isinstance(exc, DecodeError):
        return 400
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, ProviderTimeoutError):
        return 504
    return 502


def _error_response(exc: GatewayError) -> JSONResponse:
    if isinstance(exc, ConfigurationError):
        # Do not tell untrusted clients which secret is missing.
        message = "Background removal failed: the service is not configured."
    else:
        message = f"Background removal failed: {exc}"
    body = ErrorResponse(error=message, kind=exc.kind)
    return JSONResponse(status_code=_status_for(exc), content=body.model_dump())


def _remove(gateway: BackgroundRemovalGateway, request: RemovalRequest):
    try:
        return gateway.remove_background(request)
    except ConfigurationError as exc:
        logger.error("Gateway misconfigured: %s", exc)
        return _error_response(exc)
    except DecodeError as exc:
        logger.info("Rejected image data URI: %s", exc)
        return _error_response(exc)
    except GatewayError as exc:
        logger.exception("Background removal failed (%s): %s", exc.kind, exc)
        return _error_response(exc)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/remove-background", response_model=RemovalResult, responses=ERROR_RESPONSES)
def remove_background(
    body: RemovalRequest,
    gateway: BackgroundRemovalGateway = Depends(get_gateway),
):
    return _remove(gateway, body)


@app.post("/remove-background/upload", response_model=RemovalResult, responses=ERROR_RESPONSES)
def remove_background_upload(
    file: UploadFile = File(...),
    gateway: BackgroundRemovalGateway = Depends(get_gateway),
):
    # One byte past the cap is enough to reject oversized files.
    image_bytes = file.file.read(settings.max_image_bytes + 1)
    try:
        mime_type = validate_upload(image_bytes, file.content_type, max_bytes=settings.max_image_bytes)
    except ImageValidationError as exc:
        logger.info("Rejected upload %s: %s", file.filename, exc)
        body = ErrorResponse(error=str(exc), kind="validation")
        return JSONResponse(status_code=400, content=body.model_dump())

    logger.info("Accepted upload %s (%d bytes)", file.filename, len(image_bytes))
    return _remove(gateway, RemovalRequest(imageDataUri=encode_image(image_bytes, mime_type)))
