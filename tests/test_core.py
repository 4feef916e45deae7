from __future__ import annotations

import pytest

from block_blast.game import (
    BlockBlastGame,
    BlockSetDefinition,
    BlockSetRegistry,
    Figure,
    GameConfig,
    HighScoreStore,
    PieceInPlay,
    SessionState,
    ShapeDefinition,
)

DOMINO_H = Figure(((0, 0), (1, 0)))


def any_slot(game: BlockBlastGame) -> int:
    return game.pieces_in_play[0].slot


def test_new_session_offers_three_pieces(mono_game):
    assert mono_game.state is SessionState.IN_PLAY
    assert [p.slot for p in mono_game.pieces_in_play] == [0, 1, 2]
    assert all(p.color.startswith("#") and len(p.color) == 7 for p in mono_game.pieces_in_play)
    assert mono_game.score == 0


def test_successful_placement_marks_cells_and_scores(mono_game):
    piece = mono_game.piece_in_slot(1)
    result = mono_game.attempt_placement(1, (4, 6))
    assert result.success
    assert result.piece == piece
    cell = mono_game.grid.get_cell(4, 6)
    assert cell.occupied and cell.color == piece.color
    assert result.placed_cells == [cell]
    assert result.score_gained == 10
    assert mono_game.score == 10
    assert mono_game.piece_in_slot(1) is None
    assert [p.slot for p in mono_game.pieces_in_play] == [0, 2]


def test_rejected_placement_changes_nothing(mono_game):
    mono_game.attempt_placement(0, (0, 0))
    before_pieces = list(mono_game.pieces_in_play)
    before_grid = mono_game.grid.occupancy().copy()
    for anchor in [(0, 0), (10, 0), (0, -1)]:
        result = mono_game.attempt_placement(1, anchor)
        assert not result.success
        assert result.piece == before_pieces[0]
    assert mono_game.pieces_in_play == before_pieces
    assert (mono_game.grid.occupancy() == before_grid).all()
    assert mono_game.score == 10


def test_empty_slot_is_rejected(mono_game):
    mono_game.attempt_placement(0, (0, 0))
    result = mono_game.attempt_placement(0, (5, 5))
    assert not result.success
    assert result.piece is None


def test_tray_refills_after_three_placements(mono_game):
    for col in range(3):
        mono_game.attempt_placement(any_slot(mono_game), (0, col))
    assert [p.slot for p in mono_game.pieces_in_play] == [0, 1, 2]


def test_filling_row_zero_scores_ten_per_piece_then_clears(mono_game):
    for col in range(9):
        result = mono_game.attempt_placement(any_slot(mono_game), (0, col))
        assert result.success and not result.cleared_cells
    assert mono_game.score == 90
    assert mono_game.grid.get_complete_row_cells() == []

    result = mono_game.attempt_placement(any_slot(mono_game), (0, 9))
    assert mono_game.score == 100
    assert result.rows_cleared == [0]
    assert result.columns_cleared == []
    assert [(c.row, c.col) for c in result.cleared_cells] == [(0, c) for c in range(10)]
    assert not mono_game.grid.occupancy().any()
    assert mono_game.total_lines_cleared == 1


def test_crossing_clear_counts_the_shared_cell_once(mono_game):
    grid = mono_game.grid
    for i in range(10):
        if i != 5:
            grid.get_cell(2, i).set_occupied(True, "#111111")
        if i != 2:
            grid.get_cell(i, 5).set_occupied(True, "#111111")
    result = mono_game.attempt_placement(0, (2, 5))
    assert result.success
    assert result.rows_cleared == [2] and result.columns_cleared == [5]
    coords = [(c.row, c.col) for c in result.cleared_cells]
    assert len(coords) == 19 == len(set(coords))
    assert coords.count((2, 5)) == 1
    assert result.lines_cleared == 2
    assert result.score_gained == 10
    assert not grid.occupancy().any()


def test_clear_listeners_receive_cleared_cells(mono_game):
    received = []
    mono_game.add_clear_listener(received.append)
    for col in range(10):
        mono_game.attempt_placement(any_slot(mono_game), (7, col))
    assert len(received) == 1
    assert {(c.row, c.col) for c in received[0]} == {(7, c) for c in range(10)}
    mono_game.remove_clear_listener(received.append)


def test_game_over_when_no_piece_fits(mono_game):
    grid = mono_game.grid
    for cell in grid.cells:
        if (cell.row, cell.col) != (9, 9):
            cell.set_occupied(True, "#222222")
    mono_game.pieces_in_play = [PieceInPlay(slot=0, figure=DOMINO_H, color="#ff0000")]
    assert mono_game.check_game_over()
    assert mono_game.state is SessionState.GAME_OVER
    result = mono_game.attempt_placement(0, (9, 8))
    assert not result.success and result.game_over


DOMINO_POCKETS = {(0, 0), (0, 1), (0, 3), (2, 0), (3, 1)}


@pytest.fixture
def domino_game(custom_store):
    dominoes = BlockSetDefinition(
        id="dominoes",
        name="Dominoes",
        description="Horizontal dominoes only.",
        shapes=(ShapeDefinition.of([(0, 0), (1, 0)], angles=[0]),),
    )
    registry = BlockSetRegistry(definitions=(dominoes,), custom_store=custom_store, default_block_set_id="dominoes")
    game = BlockBlastGame(registry=registry, config=GameConfig(block_set_id="dominoes", random_seed=2))
    for cell in game.grid.cells:
        if (cell.row, cell.col) not in DOMINO_POCKETS:
            cell.set_occupied(True, "#333333")
    return game


def test_placement_that_leaves_no_room_ends_the_game(domino_game):
    assert not domino_game.check_game_over()
    result = domino_game.attempt_placement(0, (0, 0))
    assert result.success
    assert not result.cleared_cells
    assert result.game_over
    assert domino_game.state is SessionState.GAME_OVER
    assert [p.slot for p in domino_game.pieces_in_play] == [1, 2]
    assert not domino_game.attempt_placement(1, (0, 3)).success


def test_game_over_is_checked_against_the_refilled_tray(domino_game):
    domino_game.pieces_in_play = domino_game.pieces_in_play[:1]
    result = domino_game.attempt_placement(0, (0, 0))
    assert result.success
    assert [p.slot for p in domino_game.pieces_in_play] == [0, 1, 2]
    assert result.game_over
    assert domino_game.game_over


def test_single_open_cell_keeps_a_single_piece_in_play(mono_game):
    for cell in mono_game.grid.cells:
        if (cell.row, cell.col) != (9, 9):
            cell.set_occupied(True)
    assert not mono_game.check_game_over()
    assert mono_game.fit_positions(mono_game.pieces_in_play[0]) == [(9, 9)]


def test_new_game_resets_board_and_score_but_keeps_high_scores(mono_game, store):
    for col in range(4):
        mono_game.attempt_placement(any_slot(mono_game), (3, col))
    assert mono_game.high_score == 40
    mono_game.state = SessionState.GAME_OVER
    mono_game.new_game()
    assert mono_game.state is SessionState.IN_PLAY
    assert mono_game.score == 0
    assert not mono_game.grid.occupancy().any()
    assert len(mono_game.pieces_in_play) == 3
    assert mono_game.high_score == 40
    assert HighScoreStore(store, "mono").get_for_set("mono") == 40


def test_high_scores_track_per_set_and_overall(registry, store):
    scores = HighScoreStore(store)
    scores.update_if_greater("expanded", 500)
    game = BlockBlastGame(registry=registry, high_scores=scores, config=GameConfig(random_seed=1))
    assert game.overall_high_score == 500
    assert game.high_score == 0
    slot = game.pieces_in_play[0].slot
    anchor = game.fit_positions(game.pieces_in_play[0])[0]
    game.attempt_placement(slot, anchor)
    assert game.high_score == 10
    assert game.overall_high_score == 500
    assert scores.get_for_set("classic") == 10


def test_seeded_sessions_deal_the_same_pieces(registry):
    a = BlockBlastGame(registry=registry, config=GameConfig(random_seed=42))
    b = BlockBlastGame(registry=registry, config=GameConfig(random_seed=42))
    assert a.pieces_in_play == b.pieces_in_play
    a.reset(seed=5)
    b.reset(seed=5)
    assert a.pieces_in_play == b.pieces_in_play


def test_set_block_set_switches_and_restarts(registry):
    game = BlockBlastGame(registry=registry, config=GameConfig(random_seed=3))
    assert game.block_set_id == "classic"
    game.attempt_placement(game.pieces_in_play[0].slot, game.fit_positions(game.pieces_in_play[0])[0])
    game.set_block_set("expanded")
    assert game.block_set_id == "expanded"
    assert game.block_set_name == "Expanded"
    assert game.score == 0
    roster = registry.get_roster("expanded")
    assert all(p.figure in roster for p in game.pieces_in_play)
    game.set_block_set("custom-gone")
    assert game.block_set_id == "classic"


def test_unknown_configured_set_falls_back(registry):
    game = BlockBlastGame(registry=registry, config=GameConfig(block_set_id="nope"))
    assert game.block_set_id == "classic"


def test_get_state_snapshot(mono_game):
    mono_game.attempt_placement(0, (1, 1))
    state = mono_game.get_state()
    assert state["score"] == 10
    assert state["pieces_remaining"] == 2
    assert state["grid"][1, 1]
    assert state["block_set_id"] == "mono"
    assert not state["game_over"]


def test_default_construction_uses_built_in_sets():
    game = BlockBlastGame()
    assert isinstance(game.registry, BlockSetRegistry)
    assert game.block_set_id == "classic"
    assert game.grid.n == 10
