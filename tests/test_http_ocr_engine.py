import base64
import json

import httpx
import pytest

from docextract.core.interfaces.ocr_engine import OCRServiceError, OCRServiceUnavailable
from docextract.infrastructure.ocr.http_ocr_engine import HttpOCREngine


def _engine(handler, attempts=3):
    return HttpOCREngine(
        base_url="http://ocr.test/",
        retry_attempts=attempts,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )


class _Script:
    """Responde (status, kwargs) na ordem, repetindo o último; registra as requisições."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        status, kwargs = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        return httpx.Response(status, **kwargs)


@pytest.mark.asyncio
async def test_returns_text_and_sends_base64_image():
    script = _Script((200, {"json": {"text": "UNIMED\n0 994 910825083001 5"}}))
    engine = _engine(script)

    text = await engine.extract_text(b"\x89PNG-bytes")
    await engine.aclose()

    assert text == "UNIMED\n0 994 910825083001 5"
    request = script.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/ocr"
    assert json.loads(request.content) == {"image_b64": base64.b64encode(b"\x89PNG-bytes").decode()}


@pytest.mark.asyncio
async def test_retries_on_cold_start():
    script = _Script(
        (503, {"json": {"detail": "warming up"}}),
        (200, {"json": {"text": "ok"}}),
    )
    assert await _engine(script).extract_text(b"img") == "ok"
    assert len(script.requests) == 2


@pytest.mark.asyncio
async def test_gives_up_after_attempts():
    script = _Script((503, {}))
    with pytest.raises(OCRServiceUnavailable):
        await _engine(script, attempts=2).extract_text(b"img")
    assert len(script.requests) == 2


@pytest.mark.asyncio
async def test_connection_error_is_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(OCRServiceUnavailable):
        await _engine(handler, attempts=3).extract_text(b"img")
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_client_error_is_not_retried():
    script = _Script((401, {"json": {"detail": "Invalid API key"}}))
    with pytest.raises(OCRServiceError, match="Invalid API key"):
        await _engine(script).extract_text(b"img")
    assert len(script.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    (200, {"text": "not json"}),
    (200, {"json": {"lines": []}}),
])
async def test_malformed_body(response):
    with pytest.raises(OCRServiceError):
        await _engine(_Script(response)).extract_text(b"img")


@pytest.mark.asyncio
async def test_health_never_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    health = await _engine(handler).health()
    assert health["status"] == "unreachable"
