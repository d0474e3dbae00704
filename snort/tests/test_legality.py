"""
Tests for the legality tracker.

Tests:
- Initial valid/invalid sets
- The invalidation cascade and its one-sided effect
- The complement invariant over random playouts
- Set-size lookup agreeing with a direct lookup
"""

import random

import pytest

from ..engine_core.board import Cell, Occupant
from ..engine_core.errors import IllegalMoveError
from ..engine_core.legality import LegalityTracker
from ..engine_core.state import PlayerID, PlayerState
from .conftest import assert_complement, make_tracker


P1 = PlayerID.PLAYER_1
P2 = PlayerID.PLAYER_2


def random_playout(tracker, seed):
    """Alternate random valid moves until someone is stuck. Yields after each move."""
    rng = random.Random(seed)
    player = P1
    while tracker.valid_spots_of(player):
        cell = rng.choice(sorted(tracker.valid_spots_of(player)))
        tracker.apply_move(player, cell)
        yield player, cell
        player = player.other


class TestInitialState:
    """Tests for a freshly reset tracker."""

    def test_everything_valid(self, tracker_3x3):
        all_cells = set(tracker_3x3.board.cells())
        for player_id in PlayerID:
            assert tracker_3x3.valid_spots_of(player_id) == all_cells
            assert tracker_3x3.invalid_spots_of(player_id) == frozenset()

    def test_needs_both_players(self, board_3x3):
        with pytest.raises(ValueError):
            LegalityTracker(board_3x3, [PlayerState(player_id=P1, color="#E94F37")])


class TestCascade:
    """Tests for claiming a cell."""

    def test_center_claim_on_3x3(self, tracker_3x3):
        """Player 1 on the center leaves Player 2 only the corners."""
        invalidated = tracker_3x3.apply_move(P1, Cell(1, 1))

        edges = {Cell(0, 1), Cell(1, 0), Cell(1, 2), Cell(2, 1)}
        corners = {Cell(0, 0), Cell(0, 2), Cell(2, 0), Cell(2, 2)}
        assert set(invalidated) == edges
        assert tracker_3x3.valid_spots_of(P2) == corners
        assert tracker_3x3.invalid_spots_of(P2) == edges
        assert tracker_3x3.valid_spots_of(P1) == edges | corners
        assert tracker_3x3.board.occupant_of(Cell(1, 1)) is Occupant.PLAYER_1

    def test_claimer_is_unaffected(self, tracker_3x3):
        """Cells next to your own pieces stay valid for you."""
        tracker_3x3.apply_move(P1, Cell(0, 0))
        assert Cell(0, 1) in tracker_3x3.valid_spots_of(P1)
        assert Cell(1, 0) in tracker_3x3.valid_spots_of(P1)
        assert tracker_3x3.invalid_spots_of(P1) == frozenset()

    def test_claimed_cell_leaves_both_sets(self, tracker_3x3):
        tracker_3x3.apply_move(P1, Cell(0, 0))
        for player_id in PlayerID:
            assert Cell(0, 0) not in tracker_3x3.valid_spots_of(player_id)
            assert Cell(0, 0) not in tracker_3x3.invalid_spots_of(player_id)

    def test_already_invalid_neighbor_is_not_reported_twice(self, tracker_3x3):
        """A neighbor that was already invalid for the opponent is left alone."""
        tracker_3x3.apply_move(P1, Cell(0, 0))
        tracker_3x3.apply_move(P2, Cell(2, 2))
        invalidated = tracker_3x3.apply_move(P1, Cell(0, 2))
        assert invalidated == [Cell(1, 2)]
        assert Cell(0, 1) in tracker_3x3.invalid_spots_of(P2)
        assert_complement(tracker_3x3)

    def test_occupied_cell_rejected(self, tracker_3x3):
        tracker_3x3.apply_move(P1, Cell(0, 0))
        with pytest.raises(IllegalMoveError):
            tracker_3x3.apply_move(P1, Cell(0, 0))

    def test_invalid_cell_rejected(self, tracker_3x3):
        tracker_3x3.apply_move(P1, Cell(1, 1))
        with pytest.raises(IllegalMoveError):
            tracker_3x3.apply_move(P2, Cell(0, 1))
        # Nothing changed
        assert tracker_3x3.board.is_empty(Cell(0, 1))
        assert_complement(tracker_3x3)

    def test_reset_restores_everything(self, tracker_3x3):
        tracker_3x3.apply_move(P1, Cell(1, 1))
        tracker_3x3.board.set_occupant(Cell(1, 1), Occupant.EMPTY)
        tracker_3x3.reset()
        for player_id in PlayerID:
            assert len(tracker_3x3.valid_spots_of(player_id)) == 9
            assert not tracker_3x3.invalid_spots_of(player_id)


class TestInvariants:
    """Invariants checked over many random games."""

    @pytest.mark.parametrize("rows,cols", [(3, 3), (4, 4), (5, 5), (2, 7), (10, 10)])
    @pytest.mark.parametrize("seed", range(5))
    def test_complement_holds_after_every_move(self, rows, cols, seed):
        tracker = make_tracker(rows, cols)
        for _ in random_playout(tracker, seed):
            assert_complement(tracker)

    @pytest.mark.parametrize("seed", range(10))
    def test_invalid_never_becomes_valid(self, seed):
        """Invalid cells only leave the invalid set by being claimed."""
        tracker = make_tracker(5, 5)
        previous = {p: set(tracker.invalid_spots_of(p)) for p in PlayerID}
        for _ in random_playout(tracker, seed):
            for player_id in PlayerID:
                for cell in previous[player_id]:
                    assert (
                        cell in tracker.invalid_spots_of(player_id)
                        or not tracker.board.is_empty(cell)
                    )
                previous[player_id] = set(tracker.invalid_spots_of(player_id))

    @pytest.mark.parametrize("seed", range(10))
    def test_no_valid_cell_touches_opponent(self, seed):
        tracker = make_tracker(6, 6)
        for _ in random_playout(tracker, seed):
            for player_id in PlayerID:
                opponent = player_id.other.occupant
                for cell in tracker.valid_spots_of(player_id):
                    neighbors = tracker.board.neighbors(cell)
                    assert all(tracker.board.occupant_of(n) is not opponent for n in neighbors)

    @pytest.mark.parametrize("seed", range(10))
    def test_lookup_matches_valid_set(self, seed):
        """is_valid_move agrees with membership whichever set is smaller."""
        tracker = make_tracker(4, 5)
        for _ in random_playout(tracker, seed):
            for player_id in PlayerID:
                valid = tracker.valid_spots_of(player_id)
                for cell in tracker.board.cells():
                    assert tracker.is_valid_move(player_id, cell) == (cell in valid)
                assert not tracker.is_valid_move(player_id, Cell(-1, 0))
