from dataclasses import replace
from types import SimpleNamespace

import httpx
import pytest

from studyreflect.services.llm import ollama_client
from studyreflect.services.llm.client import ChatCompletionError, build_chat_client
from studyreflect.services.llm.ollama_client import OllamaChatClient
from studyreflect.services.llm.openai_client import OpenAIChatClient


class FakeCompletions:
    def __init__(self, content="1. What is a cell?", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_openai_chat_sends_system_and_user_messages():
    completions = FakeCompletions()
    chat = OpenAIChatClient("sk-test", model="gpt-3.5-turbo", client=_openai(completions))

    out = chat.complete("Summarize this", system="You are a tutor", max_tokens=300, temperature=0.7)

    assert out == "1. What is a cell?"
    assert completions.kwargs["model"] == "gpt-3.5-turbo"
    assert completions.kwargs["max_tokens"] == 300
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "You are a tutor"},
        {"role": "user", "content": "Summarize this"},
    ]


def test_openai_chat_wraps_errors_and_empty_replies():
    with pytest.raises(ChatCompletionError):
        OpenAIChatClient("sk-test", client=_openai(FakeCompletions(error=RuntimeError("429")))).complete("x")

    with pytest.raises(ChatCompletionError):
        OpenAIChatClient("sk-test", client=_openai(FakeCompletions(content="   "))).complete("x")

    with pytest.raises(ChatCompletionError):
        OpenAIChatClient(None).complete("x")


def _mock_httpx(monkeypatch, handler):
    real_client = httpx.Client

    def factory(timeout):
        return real_client(transport=httpx.MockTransport(handler), timeout=timeout)

    monkeypatch.setattr(ollama_client.httpx, "Client", factory)


def test_ollama_generate(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(200, json={"response": " What is entropy? "})

    _mock_httpx(monkeypatch, handler)

    out = OllamaChatClient("http://ollama:11434/", model="qwen2.5:7b-instruct").complete("prompt", system="sys")

    assert out == "What is entropy?"
    assert seen["url"] == "http://ollama:11434/api/generate"
    assert b'"system":"sys"' in seen["body"].replace(b" ", b"")


def test_ollama_http_error_is_chat_error(monkeypatch):
    _mock_httpx(monkeypatch, lambda request: httpx.Response(500, text="model not loaded"))

    with pytest.raises(ChatCompletionError):
        OllamaChatClient("http://ollama:11434", model="m").complete("prompt")


def test_build_chat_client_picks_backend(settings):
    assert isinstance(build_chat_client(replace(settings, llm_backend="openai")), OpenAIChatClient)
    assert isinstance(build_chat_client(replace(settings, llm_backend="ollama")), OllamaChatClient)
    with pytest.raises(ValueError):
        build_chat_client(replace(settings, llm_backend="nope"))


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>proxy error</html>"),
        httpx.Response(200, json=[]),
        httpx.Response(200, json={"done": True}),
    ],
)
def test_ollama_malformed_reply_is_chat_error(monkeypatch, response):
    _mock_httpx(monkeypatch, lambda request: response)

    with pytest.raises(ChatCompletionError):
        OllamaChatClient("http://ollama:11434", model="m").complete("prompt")
