"""LLM providers implementing the LLMPort contract.

Adapters:
- DummyLLM: dependency-free canned/echo model for tests and offline use.
- OpenAIChatLLM: wraps langchain-openai ChatOpenAI; one user message in, text out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fusion_kb.core.settings import LLMConfig
from fusion_kb.exceptions import ConfigurationError


@dataclass
class DummyLLM:
    """Test double: returns ``reply`` when set, else echoes the prompt."""

    reply: str | None = None
    prompts: list[str] = field(default_factory=list)

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply if self.reply is not None else prompt


@dataclass
class OpenAIChatLLM:
    """OpenAI chat model via langchain-openai.

    Model and credentials come from constructor args. Each call is bounded by
    ``request_timeout`` and retried at most ``max_retries`` times by the client.
    """

    model: str
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.0
    request_timeout: float = 60.0
    max_retries: int = 2

    def __post_init__(self) -> None:
        from langchain_openai import ChatOpenAI

        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": float(self.temperature),
            "timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        self._chat = ChatOpenAI(**kwargs)

    def complete(self, prompt: str) -> str:
        resp = self._chat.invoke(prompt)
        text = getattr(resp, "content", None)
        if isinstance(text, str):
            return text
        # Content blocks: keep the text parts
        if isinstance(text, list):
            return "".join(
                b if isinstance(b, str) else str(b.get("text", "")) for b in text
            )
        return str(resp)


def build_llm(cfg: LLMConfig) -> DummyLLM | OpenAIChatLLM:
    if cfg.provider == "dummy":
        return DummyLLM()
    if cfg.provider == "openai":
        return OpenAIChatLLM(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            temperature=cfg.temperature,
            request_timeout=cfg.request_timeout,
            max_retries=cfg.max_retries,
        )
    raise ConfigurationError(f"Unsupported LLM provider: {cfg.provider}")


__all__ = ["DummyLLM", "OpenAIChatLLM", "build_llm"]
