"""
Tests for the turn engine.

Tests:
- Move validation and error codes
- Turn alternation
- Game over detection
- Presentation events
- Board reset
"""

import random

import pytest

from ..config import PlayerConfig
from ..engine_core.board import Cell, Occupant
from ..engine_core.events import CellOccupied, GameEnded, TurnStarted
from ..engine_core.move import Move, MoveError
from ..engine_core.state import GameOutcome, PlayerID, PlayerType, TurnPhase
from ..engine_core.turn_engine import start_game
from .conftest import assert_complement


P1 = PlayerID.PLAYER_1
P2 = PlayerID.PLAYER_2


def play_randomly(engine, seed):
    """Play random valid moves until the game ends."""
    rng = random.Random(seed)
    while not engine.is_over:
        player = engine.active_player
        cell = rng.choice(sorted(engine.valid_spots_of(player)))
        result = engine.submit_move(player, cell)
        assert result.success
        yield result


class TestStartGame:
    """Tests for starting a game."""

    def test_initial_state(self, engine_3x3):
        assert engine_3x3.phase is TurnPhase.AWAITING_MOVE
        assert engine_3x3.active_player is P1
        assert engine_3x3.outcome is GameOutcome.IN_PROGRESS
        assert engine_3x3.turn_number == 1
        assert engine_3x3.get_previous_move() is None
        assert engine_3x3.get_board_size() == (3, 3)

    def test_default_players(self, engine_5x5):
        assert engine_5x5.players[P1].player_type is PlayerType.HUMAN
        assert engine_5x5.players[P2].player_type is PlayerType.CPU
        assert engine_5x5.players[P1].color != engine_5x5.players[P2].color

    def test_middle_cell(self, engine_5x5):
        assert engine_5x5.get_middle_cell() == Cell(2, 2)

    def test_starting_player(self):
        engine = start_game(3, 3, starting_player=P2)
        assert engine.active_player is P2
        result = engine.submit_move(P1, Cell(0, 0))
        assert result.error_code is MoveError.NOT_YOUR_TURN

    def test_missing_player_config(self):
        with pytest.raises(ValueError):
            start_game(3, 3, {P1: PlayerConfig()})

    def test_custom_names(self):
        configs = {
            P1: PlayerConfig(color="green", name="Ada"),
            P2: PlayerConfig(color="purple", player_type=PlayerType.CPU),
        }
        engine = start_game(2, 2, configs)
        assert engine.players[P1].name == "Ada"
        assert engine.players[P2].name == "Player 2"
        assert engine.players[P2].color == "#7D5BA6"


class TestMoveValidation:
    """Tests for rejected moves."""

    def test_not_your_turn(self, engine_5x5):
        """Player 2 cannot move first, and nothing changes."""
        before = engine_5x5.board.snapshot()
        result = engine_5x5.submit_move(P2, Cell(0, 0))

        assert not result.success
        assert result.error_code is MoveError.NOT_YOUR_TURN
        assert engine_5x5.board.snapshot() == before
        assert engine_5x5.active_player is P1

    def test_not_your_turn_after_a_move(self, engine_5x5):
        engine_5x5.submit_move(P1, Cell(0, 0))
        before = engine_5x5.board.snapshot()
        result = engine_5x5.submit_move(P1, Cell(4, 4))
        assert result.error_code is MoveError.NOT_YOUR_TURN
        assert engine_5x5.board.snapshot() == before

    @pytest.mark.parametrize("cell", [Cell(-1, 0), Cell(0, 5), Cell(5, 5)])
    def test_out_of_bounds(self, engine_5x5, cell):
        result = engine_5x5.submit_move(P1, cell)
        assert result.error_code is MoveError.OUT_OF_BOUNDS

    def test_cell_occupied(self, engine_3x3):
        engine_3x3.submit_move(P1, Cell(0, 0))
        result = engine_3x3.submit_move(P2, Cell(0, 0))
        assert result.error_code is MoveError.CELL_OCCUPIED
        assert engine_3x3.occupant_of(Cell(0, 0)) is Occupant.PLAYER_1

    def test_illegal_adjacency(self, engine_3x3):
        engine_3x3.submit_move(P1, Cell(1, 1))
        result = engine_3x3.submit_move(P2, Cell(0, 1))
        assert result.error_code is MoveError.ILLEGAL_ADJACENCY
        assert engine_3x3.active_player is P2
        assert engine_3x3.board.is_empty(Cell(0, 1))

    def test_rejection_keeps_history_and_sets(self, engine_3x3):
        engine_3x3.submit_move(P1, Cell(1, 1))
        valid_before = engine_3x3.valid_spots_of(P2)
        engine_3x3.submit_move(P2, Cell(1, 0))
        assert engine_3x3.valid_spots_of(P2) == valid_before
        assert engine_3x3.history == [Move(P1, Cell(1, 1))]
        assert engine_3x3.turn_number == 2

    def test_move_after_game_over(self):
        engine = start_game(1, 1)
        engine.submit_move(P1, Cell(0, 0))
        result = engine.submit_move(P2, Cell(0, 0))
        assert result.error_code is MoveError.GAME_OVER

    def test_move_while_resolving(self, engine_3x3):
        """A listener that submits during resolution is told a move is in flight."""
        nested = []

        def listener(event):
            if isinstance(event, CellOccupied):
                nested.append(engine_3x3.submit_move(P2, Cell(2, 2)))

        engine_3x3.subscribe(listener)
        result = engine_3x3.submit_move(P1, Cell(0, 0))

        assert result.success
        assert nested[0].error_code is MoveError.MOVE_IN_FLIGHT
        assert engine_3x3.board.is_empty(Cell(2, 2))
        assert engine_3x3.phase is TurnPhase.AWAITING_MOVE


class TestTurnFlow:
    """Tests for successful moves."""

    def test_turns_alternate(self, engine_5x5):
        result = engine_5x5.submit_move(P1, Cell(2, 2))
        assert result.success
        assert result.next_player is P2
        assert engine_5x5.active_player is P2
        assert engine_5x5.turn_number == 2

        result = engine_5x5.submit_move(P2, Cell(0, 0))
        assert result.next_player is P1
        assert engine_5x5.get_previous_move() == Move(P2, Cell(0, 0))

    def test_result_reports_invalidated(self, engine_3x3):
        result = engine_3x3.submit_move(P1, Cell(1, 1))
        assert set(result.invalidated) == {Cell(0, 1), Cell(2, 1), Cell(1, 0), Cell(1, 2)}

    def test_opponent_sets_after_center_claim(self, engine_5x5):
        engine_5x5.submit_move(P1, Cell(2, 2))
        forbidden = {Cell(2, 2), Cell(1, 2), Cell(3, 2), Cell(2, 1), Cell(2, 3)}
        assert not forbidden & engine_5x5.valid_spots_of(P2)
        assert len(engine_5x5.valid_spots_of(P2)) == 20
        assert len(engine_5x5.valid_spots_of(P1)) == 24

    def test_is_valid_move_is_read_only(self, engine_3x3):
        assert engine_3x3.is_valid_move(P1, Cell(0, 0))
        assert engine_3x3.board.is_empty(Cell(0, 0))


class TestGameOver:
    """Tests for terminal detection."""

    def test_single_cell_board(self):
        """Taking the only cell leaves the opponent with nothing."""
        engine = start_game(1, 1)
        result = engine.submit_move(P1, Cell(0, 0))

        assert result.game_over
        assert result.outcome is GameOutcome.PLAYER_1_WINS
        assert result.next_player is None
        assert engine.phase is TurnPhase.GAME_OVER

    def test_cascade_blocks_last_cell(self):
        """On 1x2 the first claim invalidates the only other cell."""
        engine = start_game(1, 2)
        result = engine.submit_move(P1, Cell(0, 0))
        assert result.outcome is GameOutcome.PLAYER_1_WINS
        assert engine.board.is_empty(Cell(0, 1))

    def test_second_player_can_win(self):
        engine = start_game(1, 3, starting_player=P2)
        result = engine.submit_move(P2, Cell(0, 1))
        assert result.outcome is GameOutcome.PLAYER_2_WINS
        assert result.outcome.winner is P2

    def test_not_over_while_opponent_can_move(self, engine_3x3):
        result = engine_3x3.submit_move(P1, Cell(1, 1))
        assert not result.game_over
        assert engine_3x3.valid_spots_of(P2)

    @pytest.mark.parametrize("rows,cols", [(3, 3), (4, 6), (7, 7), (10, 10)])
    @pytest.mark.parametrize("seed", range(5))
    def test_random_games_end_correctly(self, rows, cols, seed):
        """Every random game ends with the side to move stuck."""
        engine = start_game(rows, cols)
        results = list(play_randomly(engine, seed))

        last = results[-1]
        assert last.game_over
        assert engine.outcome.winner is last.move.player_id
        assert not engine.valid_spots_of(last.move.player_id.other)
        assert_complement(engine.tracker)
        # Nothing before the last move ended the game
        assert not any(r.game_over for r in results[:-1])


class TestEvents:
    """Tests for presentation events."""

    def test_move_events(self, engine_3x3):
        received = []
        engine_3x3.subscribe(received.append)
        result = engine_3x3.submit_move(P1, Cell(1, 1))

        assert received == result.events
        assert received[0] == CellOccupied(Cell(1, 1), Occupant.PLAYER_1)
        assert received[1] == TurnStarted(P2, 2)

    def test_game_over_event(self):
        engine = start_game(1, 1)
        received = []
        engine.subscribe(received.append)
        engine.submit_move(P1, Cell(0, 0))
        assert received[-1] == GameEnded(GameOutcome.PLAYER_1_WINS)
        assert received[-1].to_dict() == {
            "type": "game_over",
            "outcome": "player_1_wins",
            "winner": "player_1",
        }

    def test_rejected_move_emits_nothing(self, engine_3x3):
        received = []
        engine_3x3.subscribe(received.append)
        engine_3x3.submit_move(P2, Cell(0, 0))
        assert received == []

    def test_unsubscribe(self, engine_3x3):
        received = []
        engine_3x3.subscribe(received.append)
        engine_3x3.unsubscribe(received.append)
        engine_3x3.submit_move(P1, Cell(0, 0))
        assert received == []

    def test_failing_listener_leaves_turn_settled(self, engine_3x3):
        """A listener error propagates, but the move and the turn change both stand."""
        def listener(event):
            if isinstance(event, CellOccupied):
                raise RuntimeError("renderer failed")

        engine_3x3.subscribe(listener)
        with pytest.raises(RuntimeError):
            engine_3x3.submit_move(P1, Cell(0, 0))

        assert engine_3x3.occupant_of(Cell(0, 0)) is Occupant.PLAYER_1
        assert engine_3x3.active_player is P2
        assert engine_3x3.turn_number == 2
        assert engine_3x3.phase is TurnPhase.AWAITING_MOVE

        engine_3x3.unsubscribe(listener)
        result = engine_3x3.submit_move(P1, Cell(2, 2))
        assert result.error_code is MoveError.NOT_YOUR_TURN
        assert engine_3x3.submit_move(P2, Cell(2, 2)).success

    def test_failing_listener_on_winning_move(self):
        engine = start_game(1, 1)

        def listener(event):
            raise RuntimeError("renderer failed")

        engine.subscribe(listener)
        with pytest.raises(RuntimeError):
            engine.submit_move(P1, Cell(0, 0))

        assert engine.outcome is GameOutcome.PLAYER_1_WINS
        assert engine.phase is TurnPhase.GAME_OVER
        engine.unsubscribe(listener)
        assert engine.submit_move(P2, Cell(0, 0)).error_code is MoveError.GAME_OVER

    def test_announce_turn(self, engine_3x3):
        received = []
        engine_3x3.subscribe(received.append)
        engine_3x3.announce_turn()
        assert received == [TurnStarted(P1, 1)]
        assert received[0].to_dict()["player_id"] == "player_1"


class TestReset:
    """Tests for resetting the board."""

    def test_reset_after_game(self):
        engine = start_game(3, 3, starting_player=P2)
        list(play_randomly(engine, seed=3))
        engine.reset_board()

        assert engine.phase is TurnPhase.AWAITING_MOVE
        assert engine.outcome is GameOutcome.IN_PROGRESS
        assert engine.active_player is P2
        assert engine.turn_number == 1
        assert engine.history == []
        assert engine.board.empty_cells() == set(engine.board.cells())
        for player_id in PlayerID:
            assert len(engine.valid_spots_of(player_id)) == 9
            assert engine.invalid_spots_of(player_id) == frozenset()

    def test_reset_keeps_players(self, engine_5x5):
        colors = {p: s.color for p, s in engine_5x5.players.items()}
        engine_5x5.submit_move(P1, Cell(0, 0))
        engine_5x5.reset_board()
        assert {p: s.color for p, s in engine_5x5.players.items()} == colors
        assert engine_5x5.get_board_size() == (5, 5)

    def test_reset_announces_turn(self, engine_3x3):
        received = []
        engine_3x3.subscribe(received.append)
        engine_3x3.submit_move(P1, Cell(0, 0))
        received.clear()
        engine_3x3.reset_board()
        assert received == [TurnStarted(P1, 1)]
