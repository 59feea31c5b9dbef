"""Game registry lifecycle: start, move, finish and idle eviction."""

from __future__ import annotations

from datetime import timedelta

import pytest

from chat_games.state import (
    ConnectFourSession,
    GameInProgressError,
    GameKind,
    GameRegistry,
    InvalidMoveError,
    MoveStatus,
    NoActiveGameError,
    NotYourTurnError,
    SelfPlayError,
    TicTacToeSession,
)

TIMEOUT = timedelta(seconds=300)


def test_start_game_creates_session_with_initiator_on_move(registry: GameRegistry, clock) -> None:
    session = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")

    assert isinstance(session, TicTacToeSession)
    assert session.player_a == "A"
    assert session.player_b == "B"
    assert session.current_turn == "A"
    assert session.last_activity == clock.now
    assert registry.get_active_game("R1") is session
    assert len(registry) == 1


def test_start_game_builds_connect_four(registry: GameRegistry) -> None:
    session = registry.start_game("R2", GameKind.CONNECT_FOUR, "A", "B")

    assert isinstance(session, ConnectFourSession)
    assert "R2" in registry


def test_self_play_is_rejected_without_creating_a_session(registry: GameRegistry) -> None:
    with pytest.raises(SelfPlayError):
        registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "A")

    assert registry.get_active_game("R1") is None
    assert len(registry) == 0


def test_second_start_in_busy_room_is_rejected(registry: GameRegistry) -> None:
    first = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")

    with pytest.raises(GameInProgressError):
        registry.start_game("R1", GameKind.CONNECT_FOUR, "C", "D")

    assert registry.get_active_game("R1") is first


def test_replace_active_overwrites_busy_room(clock) -> None:
    registry = GameRegistry(clock=clock, replace_active=True)
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")

    second = registry.start_game("R1", GameKind.CONNECT_FOUR, "C", "D")

    assert registry.get_active_game("R1") is second
    assert len(registry) == 1


def test_rooms_are_independent(registry: GameRegistry) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    registry.start_game("R2", GameKind.CONNECT_FOUR, "A", "B")

    registry.apply_move("R1", "A", 5)

    assert registry.get_active_game("R2").current_turn == "A"
    assert len(registry.find_by_player("A")) == 2


def test_get_active_game_has_no_side_effects(registry: GameRegistry) -> None:
    assert registry.get_active_game("missing") is None
    assert len(registry) == 0


def test_move_without_game_is_rejected(registry: GameRegistry) -> None:
    with pytest.raises(NoActiveGameError):
        registry.apply_move("R1", "A", 1)


def test_move_out_of_turn_is_rejected(registry: GameRegistry) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")

    with pytest.raises(NotYourTurnError):
        registry.apply_move("R1", "B", 1)


def test_invalid_move_keeps_game_and_turn(registry: GameRegistry) -> None:
    session = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    registry.apply_move("R1", "A", 1)

    with pytest.raises(InvalidMoveError):
        registry.apply_move("R1", "B", 1)

    assert registry.get_active_game("R1") is session
    assert session.current_turn == "B"


def test_accepted_move_updates_activity(registry: GameRegistry, clock) -> None:
    session = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    later = clock.advance(42)

    registry.apply_move("R1", "A", 1)

    assert session.last_activity == later


def test_winning_move_reports_winner_and_frees_the_room(registry: GameRegistry) -> None:
    session = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    outcome = None
    for actor, move in (("A", 1), ("B", 5), ("A", 2), ("B", 6), ("A", 3)):
        outcome = registry.apply_move("R1", actor, move)

    assert outcome.status is MoveStatus.WIN
    assert outcome.winner == "A"
    assert registry.get_active_game("R1") is None
    assert session.outcome is outcome

    replacement = registry.start_game("R1", GameKind.CONNECT_FOUR, "B", "A")
    assert replacement.current_turn == "B"


def test_draw_frees_the_room(registry: GameRegistry) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    outcome = None
    for index, move in enumerate((1, 2, 3, 5, 4, 6, 8, 7, 9)):
        outcome = registry.apply_move("R1", "A" if index % 2 == 0 else "B", move)

    assert outcome.status is MoveStatus.DRAW
    assert "R1" not in registry


def test_connect_four_full_column_through_registry(registry: GameRegistry) -> None:
    registry.start_game("R2", GameKind.CONNECT_FOUR, "A", "B")
    for index in range(6):
        registry.apply_move("R2", "A" if index % 2 == 0 else "B", 1)

    with pytest.raises(InvalidMoveError):
        registry.apply_move("R2", "A", 1)

    assert registry.apply_move("R2", "A", 2).status is MoveStatus.CONTINUE


def test_sweep_removes_only_sessions_idle_for_the_timeout(registry: GameRegistry, clock) -> None:
    stale = registry.start_game("stale", GameKind.TIC_TAC_TOE, "A", "B")
    clock.advance(100)
    fresh = registry.start_game("fresh", GameKind.CONNECT_FOUR, "C", "D")
    now = clock.advance(200)

    removed = registry.sweep_idle_sessions(now, TIMEOUT)

    assert removed == [stale]
    assert registry.get_active_game("stale") is None
    assert registry.get_active_game("fresh") is fresh


def test_sweep_boundary_is_inclusive(registry: GameRegistry, clock) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    start = clock.now

    assert registry.sweep_idle_sessions(start + TIMEOUT - timedelta(seconds=1), TIMEOUT) == []
    assert "R1" in registry
    assert len(registry.sweep_idle_sessions(start + TIMEOUT, TIMEOUT)) == 1
    assert "R1" not in registry


def test_recent_move_keeps_session_alive(registry: GameRegistry, clock) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    clock.advance(250)
    registry.apply_move("R1", "A", 1)
    clock.advance(250)

    assert registry.sweep_idle_sessions(None, TIMEOUT) == []
    assert "R1" in registry


def test_sweep_reads_clock_and_requires_timeout(registry: GameRegistry, clock) -> None:
    registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    clock.advance(30)

    with pytest.raises(TypeError):
        registry.sweep_idle_sessions(None)  # type: ignore[call-arg]
    assert "R1" in registry

    assert len(registry.sweep_idle_sessions(None, timedelta(seconds=30))) == 1
    assert "R1" not in registry


def test_end_game_and_reset(registry: GameRegistry) -> None:
    session = registry.start_game("R1", GameKind.TIC_TAC_TOE, "A", "B")
    registry.start_game("R2", GameKind.TIC_TAC_TOE, "A", "B")

    assert registry.end_game("R1") is session
    assert registry.end_game("R1") is None

    registry.reset()
    assert len(registry) == 0
