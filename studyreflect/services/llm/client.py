from __future__ import annotations

from abc import ABC, abstractmethod

from studyreflect.core.config import Settings


class ChatCompletionError(Exception):
    """Raised when a chat backend fails or returns no usable content."""


class ChatClient(ABC):
    """A chat-completion endpoint: prompt in, free-form text out."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int = 400,
        temperature: float = 0.7,
    ) -> str:
        """
        Raises:
            ChatCompletionError: on transport errors, error statuses or an
                empty reply.
        """


def build_chat_client(settings: Settings) -> ChatClient:
    backend = (settings.llm_backend or "openai").strip().lower()
    if backend == "ollama":
        from studyreflect.services.llm.ollama_client import OllamaChatClient

        return OllamaChatClient(settings.ollama_base_url, model=settings.ollama_model)
    if backend == "openai":
        from studyreflect.services.llm.openai_client import OpenAIChatClient

        return OpenAIChatClient(
            settings.openai_api_key,
            model=settings.openai_model,
            timeout_sec=settings.openai_timeout_sec,
            max_retries=settings.openai_max_retries,
        )
    raise ValueError(f"Unknown LLM backend: {settings.llm_backend}")
