"""Environment-driven configuration for the bot."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime options. Durations are in seconds."""

    telegram_token: Optional[str] = None
    public_url: Optional[str] = None
    webhook_secret: str = ""
    webhook_path: str = "/webhook"
    sweep_interval: float = 60.0
    idle_timeout: float = 300.0
    replace_active_games: bool = False
    log_level: str = "INFO"

    @property
    def idle_timeout_delta(self) -> timedelta:
        return timedelta(seconds=self.idle_timeout)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            telegram_token=env.get("TELEGRAM_BOT_TOKEN"),
            public_url=env.get("PUBLIC_URL"),
            webhook_secret=env.get("WEBHOOK_SECRET", ""),
            webhook_path=env.get("WEBHOOK_PATH", "/webhook"),
            sweep_interval=_read_float(env, "GAME_SWEEP_INTERVAL", 60.0),
            idle_timeout=_read_float(env, "GAME_IDLE_TIMEOUT", 300.0),
            replace_active_games=env.get("GAME_REPLACE_ACTIVE", "").strip().lower() in _TRUE_VALUES,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["Settings"]
