"""In-memory registry of the board games running in each room."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Type

from .connect_four import ConnectFourSession
from .errors import GameInProgressError, NoActiveGameError, SelfPlayError
from .models import GameKind, GameSession, MoveOutcome, PlayerId, RoomId, utcnow
from .tictactoe import TicTacToeSession

SESSION_TYPES: Dict[GameKind, Type[GameSession]] = {
    GameKind.TIC_TAC_TOE: TicTacToeSession,
    GameKind.CONNECT_FOUR: ConnectFourSession,
}


class GameRegistry:
    """Owns the room → session map and every mutation of it.

    Games are process-local and vanish on restart. A room holds at most one
    session of either kind. Finished games are dropped as soon as the final
    move is applied; abandoned ones are removed by ``sweep_idle_sessions``.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utcnow,
        replace_active: bool = False,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._clock = clock
        self._replace_active = replace_active
        self._sessions: Dict[RoomId, GameSession] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, room_id: RoomId) -> bool:
        return room_id in self._sessions

    # Creation helpers -------------------------------------------------
    def start_game(
        self,
        room_id: RoomId,
        kind: GameKind,
        initiator: PlayerId,
        opponent: PlayerId,
    ) -> GameSession:
        """Open a new match in ``room_id`` with ``initiator`` on the move."""

        if initiator == opponent:
            raise SelfPlayError()
        with self._lock:
            existing = self._sessions.get(room_id)
            if existing is not None:
                if not self._replace_active:
                    raise GameInProgressError()
                self._logger.info(
                    "Replacing %s game in room %s with a new %s game",
                    existing.kind.value,
                    room_id,
                    kind.value,
                )
            session = SESSION_TYPES[kind](
                room_id=room_id,
                player_a=initiator,
                player_b=opponent,
                last_activity=self._clock(),
            )
            self._sessions[room_id] = session
        self._logger.info("Started %s game in room %s: %s vs %s", kind.value, room_id, initiator, opponent)
        return session

    # Lookup helpers ---------------------------------------------------
    def get_active_game(self, room_id: RoomId) -> Optional[GameSession]:
        """Return the session bound to the room, if any."""

        return self._sessions.get(room_id)

    def find_by_player(self, player: PlayerId) -> List[GameSession]:
        """Return every running session that lists the player."""

        return [session for session in list(self._sessions.values()) if session.has_player(player)]

    # Mutation helpers -------------------------------------------------
    def apply_move(self, room_id: RoomId, actor_id: PlayerId, move: int) -> MoveOutcome:
        """Play ``move`` for ``actor_id`` in the room's game.

        The session is dropped from the registry once the move ends the game.
        """

        with self._lock:
            session = self._sessions.get(room_id)
            if session is None:
                raise NoActiveGameError()
            outcome = session.play(actor_id, move, now=self._clock())
            if outcome.is_terminal:
                self._sessions.pop(room_id, None)
        if outcome.is_terminal:
            self._logger.info(
                "Game in room %s finished: %s (winner=%s)",
                room_id,
                outcome.status.value,
                outcome.winner,
            )
        return outcome

    def end_game(self, room_id: RoomId) -> Optional[GameSession]:
        """Remove the room's session and return it."""

        with self._lock:
            return self._sessions.pop(room_id, None)

    def sweep_idle_sessions(self, now: Optional[datetime], timeout: timedelta) -> List[GameSession]:
        """Drop every session idle for at least ``timeout`` and return them.

        ``now=None`` reads the registry clock. The timeout has no default; the
        caller passes ``Settings.idle_timeout_delta``.
        """

        moment = now or self._clock()
        with self._lock:
            expired = [
                room_id for room_id, session in self._sessions.items() if session.is_idle(moment, timeout)
            ]
            removed = [self._sessions.pop(room_id) for room_id in expired]
        for session in removed:
            self._logger.info("Evicted idle %s game in room %s", session.kind.value, session.room_id)
        return removed

    def reset(self) -> None:
        """Forget every session (used in tests)."""

        with self._lock:
            self._sessions.clear()


__all__ = ["GameRegistry", "SESSION_TYPES"]
