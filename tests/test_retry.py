import pytest

from claidcut_service.encoding import encode_image
from claidcut_service.errors import ProviderContractError, ProviderHttpError, ProviderTimeoutError
from claidcut_service.retry import NO_RETRY, RetryPolicy
from claidcut_service.schemas import RemovalRequest

from conftest import SUCCESS_BODY, make_response


class Flaky:
    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "done"


def test_default_policy_never_retries():
    func = Flaky(ProviderTimeoutError("slow"))
    with pytest.raises(ProviderTimeoutError):
        NO_RETRY.call(func)
    assert func.calls == 1


def test_retries_transient_errors_with_backoff():
    delays = []
    policy = RetryPolicy(max_attempts=3, backoff_seconds=0.5, sleep=delays.append)
    func = Flaky(ProviderHttpError(503, "busy"), ProviderTimeoutError("slow"))

    assert policy.call(func) == "done"
    assert func.calls == 3
    assert delays == [0.5, 1.0]


def test_gives_up_after_max_attempts():
    policy = RetryPolicy(max_attempts=2, sleep=lambda _: None)
    func = Flaky(ProviderHttpError(429, "slow down"), ProviderHttpError(502, "bad gateway"), ProviderHttpError(503, "busy"))
    with pytest.raises(ProviderHttpError) as excinfo:
        policy.call(func)
    assert excinfo.value.status_code == 502
    assert func.calls == 2


@pytest.mark.parametrize("error", [ProviderHttpError(401, "bad key"), ProviderContractError("failed")])
def test_permanent_errors_are_not_retried(error):
    policy = RetryPolicy(max_attempts=5, sleep=lambda _: pytest.fail("should not sleep"))
    func = Flaky(error)
    with pytest.raises(type(error)):
        policy.call(func)
    assert func.calls == 1


def test_invalid_policy():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(backoff_seconds=-1)


def test_gateway_retries_through_policy(make_gateway, png_bytes):
    policy = RetryPolicy(max_attempts=2, sleep=lambda _: None)
    gateway, session = make_gateway(
        make_response(503, "try later", "text/plain"),
        make_response(200, SUCCESS_BODY),
        retry_policy=policy,
    )
    result = gateway.remove_background(RemovalRequest(imageDataUri=encode_image(png_bytes, "image/png")))
    assert result.processedImageUri == "https://example.com/out.png"
    assert len(session.calls) == 2
