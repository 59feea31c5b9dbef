"""Recoverable, user-facing errors raised by the game engine."""

from __future__ import annotations


class GameError(Exception):
    """Base class for every rejected game command."""

    default_message = "❌ Something went wrong with this game."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class SelfPlayError(GameError):
    default_message = "❌ You cannot play against yourself!"


class NoActiveGameError(GameError):
    default_message = "❌ No active game in this chat. Start one with /game ttt @player or /game c4 @player."


class NotYourTurnError(GameError):
    default_message = "❌ Not your turn!"


class InvalidMoveError(GameError):
    default_message = "❌ Invalid move! Choose again."


class GameInProgressError(GameError):
    default_message = "❌ A game is already running in this chat. Finish it first."


class GameFinishedError(GameError):
    default_message = "❌ This game is already over."


__all__ = [
    "GameError",
    "GameFinishedError",
    "GameInProgressError",
    "InvalidMoveError",
    "NoActiveGameError",
    "NotYourTurnError",
    "SelfPlayError",
]
