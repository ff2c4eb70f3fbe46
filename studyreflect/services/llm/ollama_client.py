from __future__ import annotations

from typing import Any, Dict

import httpx

from studyreflect.services.llm.client import ChatClient, ChatCompletionError


class OllamaChatClient(ChatClient):
    """
    Minimal Ollama client for local generation.

    Uses /api/generate (simple) to keep integration stable.
    """

    def __init__(self, base_url: str, *, model: str, timeout_s: float = 120.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout_s = timeout_s

    def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int = 400,
        temperature: float = 0.7,
    ) -> str:
        url = f"{self.base_url}/api/generate"

        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }
        if system:
            payload["system"] = system

        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                r = client.post(url, json=payload)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ChatCompletionError(f"Ollama request failed: {e}") from e

        # Ollama returns {"response": "...", ...}
        if not isinstance(data, dict):
            raise ChatCompletionError(f"Unexpected Ollama payload: {type(data).__name__}")
        text = (data.get("response") or "").strip()
        if not text:
            raise ChatCompletionError("Empty response from Ollama")
        return text
