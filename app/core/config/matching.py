from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

MATCHING_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "matching.yaml"

# Sections and keys the extractor and the suggestion prompt read.
_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "extraction": ("default_top_n", "technical_ratio", "min_token_length"),
    "suggestions": ("resume_prompt_chars", "job_description_prompt_chars"),
}

_matching_config: dict[str, Any] | None = None


def validate_matching_config(parsed: Any, source: str = "matching config") -> dict[str, Any]:
    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid {source}: expected a top-level mapping.")

    for section, keys in _REQUIRED_KEYS.items():
        values = parsed.get(section)
        if not isinstance(values, dict):
            raise RuntimeError(f"Invalid {source}: section '{section}' must be a mapping.")
        missing = [key for key in keys if key not in values]
        if missing:
            raise RuntimeError(f"Invalid {source}: '{section}' is missing {', '.join(missing)}.")

    extraction = parsed["extraction"]
    ratio = extraction["technical_ratio"]
    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)) or not 0 <= ratio <= 1:
        raise RuntimeError(f"Invalid {source}: extraction.technical_ratio must be between 0 and 1.")
    for key in ("default_top_n", "min_token_length"):
        value = extraction[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise RuntimeError(f"Invalid {source}: extraction.{key} must be a positive integer.")
    return parsed


def load_matching_config(path: Path = MATCHING_CONFIG_PATH) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeError(f"Matching config not found at '{path}'.") from exc
    except OSError as exc:
        raise RuntimeError(f"Failed to read matching config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in matching config '{path}': {exc}") from exc
    return validate_matching_config(parsed, source=f"matching config '{path}'")


def get_matching_config() -> dict[str, Any]:
    """Validated contents of config/matching.yaml, loaded once per process."""
    global _matching_config
    if _matching_config is None:
        _matching_config = load_matching_config()
    return _matching_config


def get_matching_value(path: str, default: Any = None) -> Any:
    if not path:
        return default

    current: Any = get_matching_config()
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
