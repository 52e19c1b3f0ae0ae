from __future__ import annotations

import os
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.ai.types import ChatMessage


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 45.0,
        max_retries: int = 2,
        temperature: float = 0.2,
        max_output_tokens: int = 1800,
    ):
        self._model = model
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._response_format = (os.getenv("OPENAI_RESPONSE_FORMAT") or "").strip().lower()
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # OPENAI_BASE_URL also covers OpenAI-compatible gateways such as Gemini's.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=float(os.getenv("OPENAI_TIMEOUT_S", str(timeout_s))),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", str(max_retries))),
        )

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        create_kwargs = {
            "model": self._model,
            "messages": payload,
            "temperature": self._temperature,
            "max_tokens": self._max_output_tokens,
        }
        if self._response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**create_kwargs)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
