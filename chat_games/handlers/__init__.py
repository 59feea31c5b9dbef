"""Telegram handlers for the board games."""

from .gameplay import PlayerDirectory, game_command, sweep_idle_games_job, track_user
from .router import register_handlers

__all__ = [
    "PlayerDirectory",
    "game_command",
    "register_handlers",
    "sweep_idle_games_job",
    "track_user",
]
