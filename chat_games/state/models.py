"""Dataclasses describing a running board game and its outcomes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import ClassVar, Hashable, Optional, Tuple, Union

from .errors import GameFinishedError, NotYourTurnError, SelfPlayError

PlayerId = Union[int, str]
RoomId = Hashable


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Mark(str, Enum):
    EMPTY = "empty"
    A = "a"
    B = "b"


class GameKind(str, Enum):
    TIC_TAC_TOE = "ttt"
    CONNECT_FOUR = "c4"

    @property
    def title(self) -> str:
        return "Tic Tac Toe" if self is GameKind.TIC_TAC_TOE else "Connect Four"


class MoveStatus(str, Enum):
    CONTINUE = "continue"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Result of an accepted move."""

    status: MoveStatus
    winner: Optional[PlayerId] = None
    line: Tuple[object, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.status is not MoveStatus.CONTINUE


CONTINUE = MoveOutcome(MoveStatus.CONTINUE)


@dataclass(slots=True)
class GameSession(ABC):
    """One match between two players in a single room.

    Engines subclass this and provide the board plus the abstract hooks
    ``_place`` (validate and drop a mark), ``_winning_line``, ``_board_full``
    and ``_mark_at``. Turn order, activity tracking and the terminal state
    live here; the base class itself cannot be instantiated.
    """

    kind: ClassVar[GameKind]

    room_id: RoomId
    player_a: PlayerId
    player_b: PlayerId
    current_turn: Optional[PlayerId] = None
    last_activity: datetime = field(default_factory=utcnow)
    outcome: Optional[MoveOutcome] = None
    moves_played: int = 0

    def __post_init__(self) -> None:
        if self.player_a == self.player_b:
            raise SelfPlayError()
        if self.current_turn is None:
            self.current_turn = self.player_a

    # Player helpers ---------------------------------------------------
    def mark_for(self, player: PlayerId) -> Mark:
        if player == self.player_a:
            return Mark.A
        if player == self.player_b:
            return Mark.B
        raise NotYourTurnError()

    def player_for(self, mark: Mark) -> Optional[PlayerId]:
        if mark is Mark.A:
            return self.player_a
        if mark is Mark.B:
            return self.player_b
        return None

    def other_player(self, player: PlayerId) -> PlayerId:
        return self.player_b if player == self.player_a else self.player_a

    def has_player(self, player: PlayerId) -> bool:
        return player in (self.player_a, self.player_b)

    # Lifecycle --------------------------------------------------------
    @property
    def is_finished(self) -> bool:
        return self.outcome is not None and self.outcome.is_terminal

    @property
    def is_fresh(self) -> bool:
        return self.moves_played == 0

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity = now or utcnow()

    def is_idle(self, now: datetime, timeout: timedelta) -> bool:
        return now - self.last_activity >= timeout

    def play(self, actor_id: PlayerId, move: int, *, now: Optional[datetime] = None) -> MoveOutcome:
        """Apply ``move`` for ``actor_id`` and report the resulting state."""

        if self.is_finished:
            raise GameFinishedError()
        if actor_id != self.current_turn:
            raise NotYourTurnError()
        mark = self.mark_for(actor_id)
        self._place(mark, move)
        self.moves_played += 1
        self.current_turn = self.other_player(actor_id)
        self.touch(now)

        line = self._winning_line()
        if line:
            outcome = MoveOutcome(MoveStatus.WIN, winner=self.player_for(self._mark_at(line[0])), line=line)
        elif self._board_full():
            outcome = MoveOutcome(MoveStatus.DRAW)
        else:
            outcome = CONTINUE
        self.outcome = outcome
        return outcome

    # Engine hooks -----------------------------------------------------
    @abstractmethod
    def _place(self, mark: Mark, move: int) -> None:
        """Validate ``move`` and put ``mark`` on the board or raise ``InvalidMoveError``."""

    @abstractmethod
    def _winning_line(self) -> Optional[Tuple[object, ...]]:
        """Cells of the first complete line, or ``None``."""

    @abstractmethod
    def _board_full(self) -> bool: ...

    @abstractmethod
    def _mark_at(self, cell: object) -> Mark: ...


__all__ = [
    "CONTINUE",
    "GameKind",
    "GameSession",
    "Mark",
    "MoveOutcome",
    "MoveStatus",
    "PlayerId",
    "RoomId",
    "utcnow",
]
