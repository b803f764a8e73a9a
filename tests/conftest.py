import httpx
import pytest

from medscribe.models import LLMClient
from medscribe.services.session_store import SessionStore

from .samples import chat_response

LLM_BASE_URL = "https://llm.test/api/v1"


@pytest.fixture
def make_llm():
    """Build an LLMClient backed by httpx.MockTransport; requests are recorded on `.calls`."""

    def _make(content="", status_code=200, body=None, handler=None):
        calls = []

        def _default(request):
            if body is not None:
                return httpx.Response(status_code, text=body)
            return chat_response(content, status_code)

        def _recording(request):
            calls.append(request)
            return (handler or _default)(request)

        client = LLMClient(LLM_BASE_URL, "test-key", "test-model", transport=httpx.MockTransport(_recording))
        client.calls = calls
        return client

    return _make


@pytest.fixture
def store(tmp_path):
    return SessionStore(str(tmp_path / "data"))
