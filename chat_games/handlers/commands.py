"""Platform-neutral parsing of ``!game`` / ``/game`` commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from ..state import GameKind, InvalidMoveError

PREFIX_RE = re.compile(r"^\s*[!/]game(?:@\w+)?(?:\s+|$)", re.IGNORECASE)

KIND_ALIASES = {
    "ttt": GameKind.TIC_TAC_TOE,
    "tictactoe": GameKind.TIC_TAC_TOE,
    "c4": GameKind.CONNECT_FOUR,
    "connect4": GameKind.CONNECT_FOUR,
}
MOVE_ALIASES = {"play", "move", "p"}


@dataclass(frozen=True, slots=True)
class StartCommand:
    kind: GameKind
    opponent: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MoveCommand:
    token: Optional[str]


@dataclass(frozen=True, slots=True)
class HelpCommand:
    pass


GameCommand = Union[StartCommand, MoveCommand, HelpCommand]


def parse_game_command(text: Optional[str]) -> Optional[GameCommand]:
    """Translate message text into a game command, or ``None`` if unrelated."""

    if not text:
        return None
    match = PREFIX_RE.match(text)
    if not match:
        return None
    args = text[match.end():].split()
    if not args:
        return HelpCommand()
    action = args[0].lower()
    if action in KIND_ALIASES:
        opponent = args[1] if len(args) > 1 else None
        return StartCommand(KIND_ALIASES[action], opponent)
    if action in MOVE_ALIASES:
        return MoveCommand(args[1] if len(args) > 1 else None)
    return HelpCommand()


def parse_move_number(token: Optional[str]) -> int:
    """Return the 1-indexed cell/column number named by ``token``."""

    if token is None:
        raise InvalidMoveError("❌ Tell me where to play: /game play N.")
    try:
        return int(token.strip())
    except ValueError:
        raise InvalidMoveError(f"❌ {token!r} is not a number. Choose again.") from None


__all__ = [
    "GameCommand",
    "HelpCommand",
    "MoveCommand",
    "StartCommand",
    "parse_game_command",
    "parse_move_number",
]
