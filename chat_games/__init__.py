"""Two-player board games (Tic-Tac-Toe, Connect Four) for chat bots."""

from .handlers import register_handlers
from .state import (
    ConnectFourSession,
    GameError,
    GameKind,
    GameRegistry,
    GameSession,
    MoveOutcome,
    MoveStatus,
    TicTacToeSession,
)

__all__ = [
    "ConnectFourSession",
    "GameError",
    "GameKind",
    "GameRegistry",
    "GameSession",
    "MoveOutcome",
    "MoveStatus",
    "TicTacToeSession",
    "register_handlers",
]
