"""
Tests for the text-generation client boundary.

The OpenAI SDK call is replaced on the client instance, so no request
leaves the process.
"""

from types import SimpleNamespace

import httpx
import openai
import pytest

from taskthread.exceptions import UpstreamCallError
from taskthread.services.llm import LLMClient


def make_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def llm_client():
    return LLMClient(api_key="test-key", model="test-model", timeout_seconds=1.0)


class TestLLMClientComplete:

    async def test_text_call_returns_content(self, llm_client, monkeypatch):
        requests = []

        async def create(**kwargs):
            requests.append(kwargs)
            return make_response("On track.")

        monkeypatch.setattr(llm_client._client.chat.completions, "create", create)

        assert await llm_client.complete("Summarize") == "On track."
        assert requests[0]["model"] == "test-model"
        assert requests[0]["messages"] == [{"role": "user", "content": "Summarize"}]
        assert "response_format" not in requests[0]

    async def test_json_call_requests_json_object(self, llm_client, monkeypatch):
        requests = []

        async def create(**kwargs):
            requests.append(kwargs)
            return make_response('{"relationship": "new"}')

        monkeypatch.setattr(llm_client._client.chat.completions, "create", create)

        assert await llm_client.complete("Classify", json_output=True) == '{"relationship": "new"}'
        assert requests[0]["response_format"] == {"type": "json_object"}

    async def test_sdk_error_is_wrapped(self, llm_client, monkeypatch):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        error = openai.APIConnectionError(request=request)

        async def create(**kwargs):
            raise error

        monkeypatch.setattr(llm_client._client.chat.completions, "create", create)

        with pytest.raises(UpstreamCallError) as exc_info:
            await llm_client.complete("Summarize")

        assert exc_info.value.__cause__ is error
        assert exc_info.value.status_code == 502

    @pytest.mark.parametrize("response", [
        make_response(None),
        make_response(""),
        SimpleNamespace(choices=[]),
    ])
    async def test_empty_content_raises(self, llm_client, monkeypatch, response):
        async def create(**kwargs):
            return response

        monkeypatch.setattr(llm_client._client.chat.completions, "create", create)

        with pytest.raises(UpstreamCallError):
            await llm_client.complete("Summarize")
