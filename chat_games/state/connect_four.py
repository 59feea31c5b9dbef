"""Connect Four on a 6×7 gravity board.

Row 0 is the top of the board and pieces fall towards row 5. Win detection
rescans the whole board after every drop instead of looking only around the
last piece; with 42 cells the full scan stays trivial, but a larger board
would want an incremental check anchored at ``last_drop``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple

from .errors import InvalidMoveError
from .models import GameKind, GameSession, Mark

ROWS = 6
COLUMNS = 7
RUN = 4

Cell = Tuple[int, int]

# (row step, column step, row range, column range) for every direction.
DIRECTIONS: Tuple[Tuple[int, int, range, range], ...] = (
    (0, 1, range(ROWS), range(COLUMNS - RUN + 1)),
    (1, 0, range(ROWS - RUN + 1), range(COLUMNS)),
    (1, 1, range(ROWS - RUN + 1), range(COLUMNS - RUN + 1)),
    (1, -1, range(ROWS - RUN + 1), range(RUN - 1, COLUMNS)),
)


def _empty_board() -> List[List[Mark]]:
    return [[Mark.EMPTY] * COLUMNS for _ in range(ROWS)]


@dataclass(slots=True)
class ConnectFourSession(GameSession):
    """Players address columns as 1-7, left to right."""

    kind: ClassVar[GameKind] = GameKind.CONNECT_FOUR

    board: List[List[Mark]] = field(default_factory=_empty_board)
    last_drop: Optional[Cell] = None

    def is_column_open(self, column: int) -> bool:
        return 0 <= column < COLUMNS and self.board[0][column] is Mark.EMPTY

    def lowest_empty_row(self, column: int) -> Optional[int]:
        for row in range(ROWS - 1, -1, -1):
            if self.board[row][column] is Mark.EMPTY:
                return row
        return None

    def _place(self, mark: Mark, move: int) -> None:
        column = move - 1
        row = self.lowest_empty_row(column) if self.is_column_open(column) else None
        if row is None:
            raise InvalidMoveError("❌ Invalid move! Choose a column 1-7 that isn't full.")
        self.board[row][column] = mark
        self.last_drop = (row, column)

    def _winning_line(self) -> Optional[Tuple[Cell, ...]]:
        board = self.board
        for d_row, d_col, rows, columns in DIRECTIONS:
            for row in rows:
                for col in columns:
                    piece = board[row][col]
                    if piece is Mark.EMPTY:
                        continue
                    run = tuple((row + step * d_row, col + step * d_col) for step in range(RUN))
                    if all(board[r][c] is piece for r, c in run[1:]):
                        return run
        return None

    def _board_full(self) -> bool:
        return Mark.EMPTY not in self.board[0]

    def _mark_at(self, cell: object) -> Mark:
        row, col = cell  # type: ignore[misc]
        return self.board[row][col]


__all__ = ["COLUMNS", "ROWS", "ConnectFourSession"]
