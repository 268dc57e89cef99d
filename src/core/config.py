"""
Startup configuration: credentials, endpoint and the model alias table.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import ConfigError

DEFAULT_URL = "https://api.siliconflow.cn/v1/chat/completions"
DEFAULT_CONNECT_TIMEOUT = 3.0

MODEL_ALIASES: dict[str, str] = {
    "r1": "deepseek-ai/DeepSeek-R1",
    "q2_5-7": "Qwen/Qwen2-7B-Instruct",
    "ds-8": "deepseek-ai/DeepSeek-R1-Distill-Llama-8B",
}
DEFAULT_MODEL_ALIAS = "ds-8"


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    model: str
    url: str = DEFAULT_URL
    multi_lines: bool = False
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT


def resolve_model(alias: Optional[str]) -> tuple[str, bool]:
    """
    Map a short model alias to the full model identifier.

    Returns the identifier and whether the alias was known. Unknown aliases
    fall back to the default model.
    """
    name = alias if alias is not None else DEFAULT_MODEL_ALIAS
    if name in MODEL_ALIASES:
        return MODEL_ALIASES[name], True
    return MODEL_ALIASES[DEFAULT_MODEL_ALIAS], False


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_CONNECT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"CHAT_CONNECT_TIMEOUT must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"CHAT_CONNECT_TIMEOUT must not be negative, got {raw!r}")
    return value


def load_config(
    model: str,
    multi_lines: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> ClientConfig:
    """
    Build the client configuration once at startup.

    Args:
        model: the already resolved model identifier
        multi_lines: whether user input spans multiple lines
        env: environment to read from, os.environ by default

    Raises:
        ConfigError: API_KEY is missing or a value is malformed
    """
    env = os.environ if env is None else env

    api_key = env.get("API_KEY", "").strip()
    if not api_key:
        raise ConfigError("You must set the API_KEY environment variable")

    return ClientConfig(
        api_key=api_key,
        model=model,
        url=env.get("CHAT_API_URL") or DEFAULT_URL,
        multi_lines=multi_lines,
        connect_timeout=_parse_timeout(env.get("CHAT_CONNECT_TIMEOUT")),
    )
