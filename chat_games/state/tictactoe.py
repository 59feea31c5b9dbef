"""Tic-Tac-Toe on a 3×3 board."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple

from .errors import InvalidMoveError
from .models import GameKind, GameSession, Mark

CELLS = 9

# Rows, then columns, then diagonals.
LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def _empty_board() -> List[Mark]:
    return [Mark.EMPTY] * CELLS


@dataclass(slots=True)
class TicTacToeSession(GameSession):
    """Cells are indexed 0-8 row-major; players address them as 1-9."""

    kind: ClassVar[GameKind] = GameKind.TIC_TAC_TOE

    board: List[Mark] = field(default_factory=_empty_board)

    def _place(self, mark: Mark, move: int) -> None:
        position = move - 1
        if not 0 <= position < CELLS or self.board[position] is not Mark.EMPTY:
            raise InvalidMoveError("❌ Invalid move! Choose a number 1-9 in an empty space.")
        self.board[position] = mark

    def _winning_line(self) -> Optional[Tuple[int, int, int]]:
        board = self.board
        for a, b, c in LINES:
            if board[a] is not Mark.EMPTY and board[a] is board[b] is board[c]:
                return (a, b, c)
        return None

    def _board_full(self) -> bool:
        return Mark.EMPTY not in self.board

    def _mark_at(self, cell: object) -> Mark:
        return self.board[cell]  # type: ignore[index]

    def rows(self) -> List[List[Mark]]:
        return [self.board[start:start + 3] for start in range(0, CELLS, 3)]


__all__ = ["LINES", "TicTacToeSession"]
