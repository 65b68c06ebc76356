import json

import pytest
import requests

from core.domain import ErrorCode
from core.exceptions import (
    RATE_LIMIT_MESSAGE, TOO_LARGE_MESSAGE, UpstreamError, upstream_error_from_message
)
from services import llm_service
from services.llm_service import DocumentSimplifier, LLMService, output_token_budget
from services.prompts import PromptOptions


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(response=self)

    def json(self):
        if self._payload is None:
            raise requests.exceptions.JSONDecodeError("Expecting value", self.text, 0)
        return self._payload


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def llm():
    return LLMService(
        base_url="https://llm.example/v1/",
        model="test-model",
        api_key="secret",
        temperature=0.0,
        timeout=5,
    )


def test_output_budget_is_clamped_and_monotonic():
    budgets = [output_token_budget(n, 4000, 12000) for n in range(0, 60000, 500)]

    assert budgets[0] == 4000
    assert budgets[-1] == 12000
    assert budgets == sorted(budgets)
    assert output_token_budget(10000, 4000, 12000) == 5000


def test_chat_posts_openai_compatible_request(llm, monkeypatch):
    captured = {}

    def fake_post(url, headers, json, timeout):
        captured.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(payload=completion("  hello  "))

    monkeypatch.setattr(llm_service.requests, "post", fake_post)

    content = llm.chat([{"role": "user", "content": "hi"}], max_tokens=4000)

    assert content == "hello"
    assert captured["url"] == "https://llm.example/v1/chat/completions"
    assert captured["headers"] == {"Authorization": "Bearer secret"}
    assert captured["json"]["model"] == "test-model"
    assert captured["json"]["temperature"] == 0.0
    assert captured["json"]["max_tokens"] == 4000
    assert captured["timeout"] == 5


def test_chat_without_api_key_fails_fast(monkeypatch):
    def fail_post(*args, **kwargs):
        raise AssertionError("should not be called")

    monkeypatch.setattr(llm_service.requests, "post", fail_post)
    service = LLMService("https://llm.example/v1", "m", api_key=None)

    with pytest.raises(UpstreamError):
        service.chat([], max_tokens=10)


@pytest.mark.parametrize("body, message, code", [
    ('{"error": {"code": "rate_limit_exceeded"}}', RATE_LIMIT_MESSAGE, ErrorCode.LLM_RATE_LIMITED),
    ('{"error": {"message": "Request too large: max tokens exceeded"}}', TOO_LARGE_MESSAGE, ErrorCode.DOCUMENT_TOO_LARGE),
])
def test_http_errors_are_remapped(llm, monkeypatch, body, message, code):
    monkeypatch.setattr(
        llm_service.requests, "post",
        lambda *a, **kw: FakeResponse(status_code=429, payload={}, text=body),
    )

    with pytest.raises(UpstreamError) as exc_info:
        llm.chat([], max_tokens=10)

    assert exc_info.value.message == message
    assert exc_info.value.error_code == code
    assert exc_info.value.status_code == 500


def test_timeout_becomes_upstream_error(llm, monkeypatch):
    def slow_post(*args, **kwargs):
        raise requests.exceptions.Timeout()

    monkeypatch.setattr(llm_service.requests, "post", slow_post)

    with pytest.raises(UpstreamError, match="timed out"):
        llm.chat([], max_tokens=10)


def test_non_json_body_is_malformed_response(llm, monkeypatch):
    monkeypatch.setattr(llm_service.requests, "post", lambda *a, **kw: FakeResponse(text="<html>oops</html>"))

    with pytest.raises(UpstreamError) as exc_info:
        llm.chat([], max_tokens=10)

    assert exc_info.value.message == "Malformed response from LLM service"


def test_base_url_without_scheme_is_reported_as_request_failure():
    llm = LLMService(base_url="llm.example/v1", model="test-model", api_key="secret")

    with pytest.raises(UpstreamError) as exc_info:
        llm.chat([], max_tokens=10)

    assert exc_info.value.message.startswith("Failed to simplify document:")
    assert "Malformed" not in exc_info.value.message


def test_empty_content_is_an_error(llm, monkeypatch):
    monkeypatch.setattr(llm_service.requests, "post", lambda *a, **kw: FakeResponse(payload=completion("")))

    with pytest.raises(UpstreamError) as exc_info:
        llm.chat([], max_tokens=10)

    assert exc_info.value.message == "Empty response from AI model"


def test_other_messages_pass_through():
    error = upstream_error_from_message("Failed to simplify document: 503 unavailable")

    assert error.message == "Failed to simplify document: 503 unavailable"
    assert error.error_code == ErrorCode.LLM_FAILED


class StubLLM:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def chat(self, messages, max_tokens):
        self.calls.append((messages, max_tokens))
        return self.content


@pytest.mark.asyncio
async def test_simplifier_builds_prompt_and_parses():
    stub = StubLLM('```json\n{"simplifiedText": "Simple.", "glossary": [{"term": "A-1", "definition": "Code."}]}\n```')
    simplifier = DocumentSimplifier(stub, PromptOptions(), strict_parsing=False)

    result = await simplifier.simplify("Original notice A-1 text.", "ta")

    assert result.simplified_text == "Simple."
    assert result.glossary[0].term == "A-1"
    messages, max_tokens = stub.calls[0]
    assert messages[0]["role"] == "system"
    assert "Tamil" in messages[1]["content"]
    assert "Original notice A-1 text." in messages[1]["content"]
    assert max_tokens == output_token_budget(len("Original notice A-1 text."))
