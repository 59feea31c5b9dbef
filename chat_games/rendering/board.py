"""Text rendering of board games for Telegram HTML messages."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Optional

from ..state import ConnectFourSession, GameKind, GameSession, Mark, MoveOutcome, MoveStatus, TicTacToeSession
from ..state.models import PlayerId

NameResolver = Callable[[PlayerId], str]

HELP_TEXT = (
    "🎮 <b>Board games</b>\n"
    "• <code>/game ttt @player</code> — start Tic Tac Toe\n"
    "• <code>/game c4 @player</code> — start Connect Four\n"
    "• <code>/game play N</code> — place your mark (1-9) or drop a piece (1-7)\n"
    "You can also reply to someone's message with <code>/game ttt</code> to challenge them.\n"
    "Commands work with the <code>!game</code> prefix too."
)

KEYCAPS = ("1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣")


@dataclass(slots=True)
class BoardTheme:
    """Emoji used for every cell state."""

    ttt_empty: str = "⬜"
    ttt_a: str = "❌"
    ttt_b: str = "⭕"
    c4_empty: str = "⚪"
    c4_a: str = "🔴"
    c4_b: str = "🔵"


def _default_name(player: PlayerId) -> str:
    return str(player)


class BoardRenderer:
    """Build the messages sent after each start, move or eviction."""

    def __init__(self, theme: BoardTheme | None = None) -> None:
        self.theme = theme or BoardTheme()

    def symbol(self, kind: GameKind, mark: Mark) -> str:
        theme = self.theme
        if kind is GameKind.TIC_TAC_TOE:
            return {Mark.EMPTY: theme.ttt_empty, Mark.A: theme.ttt_a, Mark.B: theme.ttt_b}[mark]
        return {Mark.EMPTY: theme.c4_empty, Mark.A: theme.c4_a, Mark.B: theme.c4_b}[mark]

    def render_board(self, session: GameSession) -> str:
        """Return the bare emoji grid."""

        if isinstance(session, TicTacToeSession):
            rows = session.rows()
        elif isinstance(session, ConnectFourSession):
            rows = session.board
        else:
            raise TypeError(f"Unsupported session type {type(session).__name__}")
        lines = ["".join(self.symbol(session.kind, cell) for cell in row) for row in rows]
        if session.kind is GameKind.CONNECT_FOUR:
            lines.append("".join(KEYCAPS[:len(session.board[0])]))
        return "\n".join(lines)

    def render_intro(self, session: GameSession, names: NameResolver = _default_name) -> str:
        kind = session.kind
        lines = [
            f"🎮 <b>{kind.title}</b>",
            f"Player 1 ({self.symbol(kind, Mark.A)}): {html.escape(names(session.player_a))}",
            f"Player 2 ({self.symbol(kind, Mark.B)}): {html.escape(names(session.player_b))}",
            "",
            "<b>How to Play:</b>",
        ]
        if kind is GameKind.TIC_TAC_TOE:
            lines += [
                "• Use <code>/game play 1-9</code> to place your mark",
                "• Numbers correspond to positions:",
                "".join(KEYCAPS[0:3]),
                "".join(KEYCAPS[3:6]),
                "".join(KEYCAPS[6:9]),
            ]
        else:
            lines += [
                "• Use <code>/game play 1-7</code> to drop your piece",
                "• Columns are numbered left to right",
                "• Get 4 in a row to win (horizontal, vertical, or diagonal)",
            ]
        return "\n".join(lines)

    def render_state(
        self,
        session: GameSession,
        outcome: Optional[MoveOutcome] = None,
        names: NameResolver = _default_name,
    ) -> str:
        """Render the board followed by the intro, turn or result lines."""

        parts = [self.render_board(session)]
        if session.is_fresh:
            parts.append(self.render_intro(session, names))
        if outcome is not None and outcome.status is MoveStatus.WIN and outcome.winner is not None:
            parts.append(f"🎉 <b>{html.escape(names(outcome.winner))}</b> wins!")
        elif outcome is not None and outcome.status is MoveStatus.DRAW:
            parts.append("🤝 It's a draw!")
        elif session.current_turn is not None:
            span = "1-9" if session.kind is GameKind.TIC_TAC_TOE else "1-7"
            parts.append(
                f"Current turn: {html.escape(names(session.current_turn))} "
                f"({self.symbol(session.kind, session.mark_for(session.current_turn))})\n"
                f"Use <code>/game play {span}</code> to make a move!"
            )
        return "\n\n".join(parts)

    def render_expired(self, session: GameSession, names: NameResolver = _default_name) -> str:
        return (
            f"⌛ The {session.kind.title} game between {html.escape(names(session.player_a))} "
            f"and {html.escape(names(session.player_b))} expired after inactivity."
        )


__all__ = ["BoardRenderer", "BoardTheme", "HELP_TEXT", "NameResolver"]
