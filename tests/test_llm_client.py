import asyncio

import httpx
import pytest

from medscribe.core.errors import UpstreamApiError
from medscribe.models import extract_completion_text

from .samples import request_json


def run(coro):
    return asyncio.run(coro)


class TestExtractCompletionText:
    def test_message_content(self):
        data = {"choices": [{"message": {"role": "assistant", "content": "{}"}}]}
        assert extract_completion_text(data) == "{}"

    def test_falls_back_to_choice_text(self):
        assert extract_completion_text({"choices": [{"text": "abc"}]}) == "abc"

    def test_falls_back_to_error_message(self):
        assert extract_completion_text({"choices": [], "error": {"message": "rate limited"}}) == "rate limited"

    @pytest.mark.parametrize("data", [{}, {"choices": []}, {"choices": [{}]}, None, []])
    def test_nothing_usable(self, data):
        assert extract_completion_text(data) == ""


def test_fetch_completion_sends_chat_request(make_llm):
    llm = make_llm(content='{"ok": true}')
    out = run(llm.fetch_completion("system text", "user text"))

    assert out == '{"ok": true}'
    (request,) = llm.calls
    assert request.method == "POST"
    assert request.url.path == "/api/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer test-key"
    body = request_json(request)
    assert body["model"] == "test-model"
    assert body["messages"] == [
        {"role": "system", "content": "system text"},
        {"role": "user", "content": "user text"},
    ]


def test_error_status_raises_once(make_llm):
    llm = make_llm(status_code=500, body="boom")
    with pytest.raises(UpstreamApiError) as exc:
        run(llm.fetch_completion("s", "u"))
    assert exc.value.status == 500
    assert exc.value.body == "boom"
    assert exc.value.error_message == "API request failed"
    assert "HTTP 500" in exc.value.details
    assert len(llm.calls) == 1


def test_transport_failure_raises(make_llm):
    def _down(request):
        raise httpx.ConnectError("connection refused", request=request)

    llm = make_llm(handler=_down)
    with pytest.raises(UpstreamApiError) as exc:
        run(llm.fetch_completion("s", "u"))
    assert exc.value.status is None
    assert exc.value.details.startswith("transport error")


def test_non_json_body_raises(make_llm):
    llm = make_llm(status_code=200, body="<html>gateway</html>")
    with pytest.raises(UpstreamApiError) as exc:
        run(llm.fetch_completion("s", "u"))
    assert exc.value.status == 200


def test_long_error_bodies_are_truncated(make_llm):
    llm = make_llm(status_code=503, body="x" * 5000)
    with pytest.raises(UpstreamApiError) as exc:
        run(llm.fetch_completion("s", "u"))
    assert len(exc.value.details) <= 1000
