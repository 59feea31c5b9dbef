"""Registration helpers for the board game handlers."""

from __future__ import annotations

import logging
from typing import Optional

from telegram.ext import Application, CommandHandler, MessageHandler, filters

from shared.settings import Settings

from ..state import GameRegistry
from .gameplay import (
    DIRECTORY_KEY,
    REGISTRY_KEY,
    SETTINGS_KEY,
    PlayerDirectory,
    game_command,
    sweep_idle_games_job,
    track_user,
)

logger = logging.getLogger(__name__)

BANG_COMMAND_FILTER = filters.Regex(r"(?i)^\s*!game(\s|$)")
SWEEP_JOB_NAME = "game_idle_sweep"


def register_handlers(
    application: Optional[Application],
    registry: Optional[GameRegistry] = None,
    settings: Optional[Settings] = None,
) -> Optional[GameRegistry]:
    """Attach the game handlers and the idle sweep to the application."""

    if not application:
        return None
    if settings is None:
        settings = Settings()
    # An empty registry is falsy, so test against None.
    if registry is None:
        registry = GameRegistry(replace_active=settings.replace_active_games)
    application.bot_data[REGISTRY_KEY] = registry
    application.bot_data[SETTINGS_KEY] = settings
    application.bot_data.setdefault(DIRECTORY_KEY, PlayerDirectory())

    application.add_handler(MessageHandler(filters.ALL, track_user, block=False), group=-1)
    application.add_handler(CommandHandler("game", game_command))
    application.add_handler(MessageHandler(filters.TEXT & BANG_COMMAND_FILTER, game_command))

    if application.job_queue:
        application.job_queue.run_repeating(
            sweep_idle_games_job,
            interval=settings.sweep_interval,
            first=settings.sweep_interval,
            name=SWEEP_JOB_NAME,
        )
    else:
        logger.warning("JobQueue is unavailable; idle games will not be swept")
    return registry


__all__ = ["BANG_COMMAND_FILTER", "SWEEP_JOB_NAME", "register_handlers"]
