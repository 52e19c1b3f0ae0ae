from app.ai.config import load_ai_config
from app.ai.types import AIClient

from app.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            temperature=cfg.temperature,
            max_output_tokens=cfg.max_output_tokens,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
