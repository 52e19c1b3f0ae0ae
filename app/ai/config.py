import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    timeout_s: float
    temperature: float
    max_output_tokens: int


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = os.getenv("AI_MODEL", "gpt-4o-mini").strip()
    # The suggestion call is a single non-streaming completion, so the timeout
    # covers the whole reply.
    timeout_s = float(os.getenv("AI_TIMEOUT_S", "45"))
    temperature = float(os.getenv("AI_TEMPERATURE", "0.2"))
    max_output_tokens = int(os.getenv("AI_MAX_OUTPUT_TOKENS", "1800"))
    return AIConfig(
        provider=provider,
        model=model,
        timeout_s=timeout_s,
        temperature=temperature,
        max_output_tokens=max_output_tokens,
    )
