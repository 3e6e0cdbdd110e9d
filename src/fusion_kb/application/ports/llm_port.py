from __future__ import annotations

from typing import Protocol


class LLMPort(Protocol):
    """Abstract language model: one prompt in, raw text out.

    Output may be malformed; callers parse it defensively.
    """

    def complete(self, prompt: str) -> str:  # pragma: no cover - interface
        ...
