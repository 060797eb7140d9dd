from io import BytesIO
import json
import threading

from PIL import Image
import pytest
import requests

from claidcut_service.config import Settings
from claidcut_service.gateway import BackgroundRemovalGateway
from claidcut_service.retry import RetryPolicy

SUCCESS_BODY = {"clipdrop": {"status": "success", "image_resource_url": "https://example.com/out.png"}}


def make_response(status_code, body, content_type="application/json"):
    resp = requests.Response()
    resp.status_code = status_code
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp.headers["Content-Type"] = content_type
    resp.encoding = "utf-8"
    return resp


class FakeSession:
    """Stands in for `requests.Session`; replays queued responses or exceptions."""

    def __init__(self, *outcomes, handler=None):
        self.outcomes = list(outcomes)
        self.handler = handler
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def post(self, url, **kwargs):
        with self._lock:
            self.calls.append({"url": url, **kwargs})
            outcome = None if self.handler else self.outcomes.pop(0)
        if self.handler:
            outcome = self.handler(url, **kwargs)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url, **kwargs):
        return self.post(url, **kwargs)

    def close(self):
        self.closed = True


def image_bytes(fmt="PNG", size=(4, 4)):
    buf = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def settings():
    return Settings(_env_file=None, eden_ai_api_key="test-key")


@pytest.fixture
def png_bytes():
    return image_bytes("PNG")


@pytest.fixture
def make_gateway(settings):
    def _make(*outcomes, handler=None, settings_override=None, retry_policy=None):
        session = FakeSession(*outcomes, handler=handler)
        gateway = BackgroundRemovalGateway(
            settings_override or settings,
            session=session,
            retry_policy=retry_policy or RetryPolicy(sleep=lambda _: None),
        )
        return gateway, session

    return _make
