"""Game engine primitives: sessions, boards and the room registry."""

from .connect_four import ConnectFourSession
from .errors import (
    GameError,
    GameFinishedError,
    GameInProgressError,
    InvalidMoveError,
    NoActiveGameError,
    NotYourTurnError,
    SelfPlayError,
)
from .manager import GameRegistry
from .models import GameKind, GameSession, Mark, MoveOutcome, MoveStatus
from .tictactoe import TicTacToeSession

__all__ = [
    "ConnectFourSession",
    "GameError",
    "GameFinishedError",
    "GameInProgressError",
    "GameKind",
    "GameRegistry",
    "GameSession",
    "InvalidMoveError",
    "Mark",
    "MoveOutcome",
    "MoveStatus",
    "NoActiveGameError",
    "NotYourTurnError",
    "SelfPlayError",
    "TicTacToeSession",
]
