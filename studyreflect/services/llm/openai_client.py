from __future__ import annotations

from typing import Any

from studyreflect.services.llm.client import ChatClient, ChatCompletionError


def _build_openai_client(api_key: str | None, timeout_sec: float, max_retries: int):
    if not api_key:
        raise ChatCompletionError("OPENAI_API_KEY is missing")

    # OpenAI SDK v1+
    from openai import OpenAI

    return OpenAI(api_key=api_key, timeout=timeout_sec, max_retries=max_retries)


class OpenAIChatClient(ChatClient):
    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "gpt-3.5-turbo",
        timeout_sec: float = 180.0,
        max_retries: int = 2,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_sec = timeout_sec
        self.max_retries = max_retries
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = _build_openai_client(self.api_key, self.timeout_sec, self.max_retries)
        return self._client

    def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int = 400,
        temperature: float = 0.7,
    ) -> str:
        client = self._get_client()

        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            chat = client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except Exception as e:
            raise ChatCompletionError(f"OpenAI chat completion failed: {e}") from e

        raw_text = ((chat.choices[0].message.content if chat.choices else None) or "").strip()
        if not raw_text:
            raise ChatCompletionError("Empty response from OpenAI")
        return raw_text
