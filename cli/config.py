from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings

DEFAULT_PROMPT = "You: "
DEFAULT_REPLY_PREFIX = "AI: "


@dataclass(frozen=True)
class CLIConfig:
    data_path: str
    color: bool = True
    seed: Optional[int] = None
    prompt: str = DEFAULT_PROMPT
    reply_prefix: str = DEFAULT_REPLY_PREFIX


def load_config(
    data_path: Optional[str] = None,
    color: Optional[bool] = None,
    seed: Optional[int] = None,
) -> CLIConfig:
    """Merge command line overrides over the environment-driven settings."""
    settings = get_settings()
    return CLIConfig(
        data_path=data_path or settings.data_path,
        color=settings.color if color is None else color,
        seed=settings.random_seed if seed is None else seed,
    )
