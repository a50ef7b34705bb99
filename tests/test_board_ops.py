from match3.components.board import Board
from match3.components.position import Position
from match3.systems.board_ops import (
    find_valid_swaps,
    gravity_moves,
    group_matches,
    moved_tile_ids,
    new_tile_ids,
    tile_ids_at,
)
from tests.helpers import B, G, O, P, R, Y, ScriptedColorSupplier


def test_find_valid_swaps_lists_every_matching_swap():
    board = Board.from_rows([
        [R, G, R],
        [G, R, G],
        [B, Y, B],
    ])
    swaps = find_valid_swaps(board)
    assert (Position(1, 0), Position(1, 1)) in swaps
    for a, b in swaps:
        assert board.swap(a, b).find_matches()


def test_find_valid_swaps_empty_on_stalemate():
    assert find_valid_swaps(Board.from_rows([[R, G], [B, Y]])) == []


def test_gravity_moves_and_moved_ids():
    board = Board.from_rows([[R], [G], [None]])
    settled = board.apply_gravity()
    moves = gravity_moves(board, settled)
    assert [(m.source, m.target) for m in moves] == [
        (Position(0, 0), Position(0, 1)),
        (Position(0, 1), Position(0, 2)),
    ]
    assert moved_tile_ids(board, settled) == {t.id for t in board}


def test_new_tile_ids_only_reports_spawned_tiles():
    board = Board.from_rows([[None, R], [G, B]], ScriptedColorSupplier([Y]))
    filled = board.fill_empty_spaces()
    spawned = new_tile_ids(board, filled)
    assert len(spawned) == 1
    assert filled.tile_by_id(next(iter(spawned))).position == Position(0, 0)


def test_tile_ids_at_skips_empty_cells():
    board = Board.from_rows([[R, None]])
    assert tile_ids_at(board, [Position(0, 0), Position(1, 0)]) == {board.tile_at(Position(0, 0)).id}


def test_group_matches_merges_crossing_runs():
    board = Board.from_rows([
        [B, R, G],
        [R, R, R],
        [G, R, B],
    ])
    groups = group_matches(board, board.find_matches())
    assert len(groups) == 1
    assert len(groups[0]) == 5


def test_group_matches_keeps_touching_colors_apart():
    board = Board.from_rows([
        [R, R, R],
        [P, P, P],
        [G, O, Y],
    ])
    groups = group_matches(board, board.find_matches())
    assert groups == [
        [Position(0, 0), Position(1, 0), Position(2, 0)],
        [Position(0, 1), Position(1, 1), Position(2, 1)],
    ]
