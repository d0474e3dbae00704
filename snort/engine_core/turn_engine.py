"""
Turn Engine - Turn sequencing and the single point of state mutation.

All board and legality changes go through submit_move().

States:
    AWAITING_MOVE(active_player) -> RESOLVING -> AWAITING_MOVE(other)
                                             -> GAME_OVER(outcome)

Design principles:
- Rejected moves leave every piece of state untouched
- Rejections are reported through MoveResult, never raised
- The player to move loses as soon as their valid set is empty
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Mapping

from .board import Board, Cell, Occupant
from .events import CellOccupied, EventListener, GameEnded, GameEvent, TurnStarted
from .legality import LegalityTracker
from .move import Move, MoveError, MoveResult
from .state import GameOutcome, PlayerID, PlayerState, PlayerType, TurnPhase

if TYPE_CHECKING:
    from ..config import PlayerConfig

logger = logging.getLogger(__name__)


class TurnEngine:
    """
    Runs one game of Snort.

    Usage:
        engine = start_game(5, 5)
        result = engine.submit_move(PlayerID.PLAYER_1, Cell(2, 2))
        if not result.success:
            print(result.error_code, result.error)
    """

    def __init__(
        self,
        board: Board,
        players: Mapping[PlayerID, PlayerState],
        starting_player: PlayerID = PlayerID.PLAYER_1,
    ):
        self.board = board
        self.players: dict[PlayerID, PlayerState] = dict(players)
        self.tracker = LegalityTracker(board, self.players.values())
        self.starting_player = starting_player

        self.phase = TurnPhase.AWAITING_MOVE
        self.active_player = starting_player
        self.outcome = GameOutcome.IN_PROGRESS
        self.turn_number = 1
        self.history: list[Move] = []

        self._listeners: list[EventListener] = []

    # =========================================================================
    # Notifications
    # =========================================================================

    def subscribe(self, listener: EventListener):
        """Register a callable to receive presentation events."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent):
        for listener in list(self._listeners):
            listener(event)

    def announce_turn(self):
        """Tell listeners whose turn it is (used when a game begins)."""
        if self.phase is TurnPhase.AWAITING_MOVE:
            self._emit(TurnStarted(self.active_player, self.turn_number))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_board_size(self) -> tuple[int, int]:
        return self.board.dimensions()

    def get_middle_cell(self) -> Cell:
        return self.board.middle_cell()

    def get_previous_move(self) -> Move | None:
        return self.history[-1] if self.history else None

    def is_valid_move(self, player_id: PlayerID, cell: Cell) -> bool:
        return self.tracker.is_valid_move(player_id, cell)

    def valid_spots_of(self, player_id: PlayerID) -> frozenset[Cell]:
        return self.tracker.valid_spots_of(player_id)

    def invalid_spots_of(self, player_id: PlayerID) -> frozenset[Cell]:
        return self.tracker.invalid_spots_of(player_id)

    def occupant_of(self, cell: Cell) -> Occupant:
        return self.board.occupant_of(cell)

    @property
    def is_over(self) -> bool:
        return self.phase is TurnPhase.GAME_OVER

    # =========================================================================
    # Mutation
    # =========================================================================

    def submit_move(self, player_id: PlayerID, cell: Cell) -> MoveResult:
        """
        Validate and apply a move.

        Returns MoveResult with the outcome, or a MoveError code if the
        move was rejected. A rejected move changes nothing.
        """
        move = Move(player_id, cell)

        error = self._validate_move(move)
        if error:
            message, code = error
            logger.warning("Rejected %s: %s (%s)", move, message, code.value)
            return MoveResult.failure(message, code, move=move)

        self.phase = TurnPhase.RESOLVING
        try:
            invalidated = self.tracker.apply_move(player_id, cell)
        except Exception:
            self.phase = TurnPhase.AWAITING_MOVE
            raise
        self.history.append(move)

        # Settle the turn before any listener runs
        next_player = player_id.other
        if not self.tracker.valid_spots_of(next_player):
            self.outcome = GameOutcome.win_for(player_id)
            settled_phase = TurnPhase.GAME_OVER
            logger.info(
                "Game over after %d moves: %s has no moves, %s",
                len(self.history), next_player.value, self.outcome.value,
            )
            follow_up: GameEvent = GameEnded(self.outcome)
        else:
            self.active_player = next_player
            self.turn_number += 1
            settled_phase = TurnPhase.AWAITING_MOVE
            follow_up = TurnStarted(next_player, self.turn_number)

        occupied = CellOccupied(cell, player_id.occupant)
        events: list[GameEvent] = [occupied, follow_up]
        try:
            self._emit(occupied)
        finally:
            self.phase = settled_phase
        self._emit(follow_up)

        return MoveResult.applied(
            move,
            outcome=self.outcome,
            next_player=None if self.is_over else self.active_player,
            invalidated=invalidated,
            events=events,
        )

    def _validate_move(self, move: Move) -> tuple[str, MoveError] | None:
        """
        Check a move against the current state.

        Returns (message, code) if invalid, None if valid.
        """
        if self.phase is TurnPhase.RESOLVING:
            return "Another move is still being resolved", MoveError.MOVE_IN_FLIGHT

        if self.phase is TurnPhase.GAME_OVER:
            return "Game is over - no moves allowed", MoveError.GAME_OVER

        if move.player_id is not self.active_player:
            return f"Not {move.player_id.value}'s turn", MoveError.NOT_YOUR_TURN

        if not self.board.in_bounds(move.cell):
            rows, cols = self.board.dimensions()
            return f"Cell {move.cell} is outside the {rows}x{cols} board", MoveError.OUT_OF_BOUNDS

        if not self.board.is_empty(move.cell):
            return f"Cell {move.cell} is already occupied", MoveError.CELL_OCCUPIED

        if not self.tracker.is_valid_move(move.player_id, move.cell):
            return (
                f"Cell {move.cell} is next to an opponent's cell",
                MoveError.ILLEGAL_ADJACENCY,
            )

        return None

    def reset_board(self):
        """
        Return to the empty pre-game position with the same players.

        Both legality sets are rebuilt from scratch for both players.
        """
        rows, cols = self.board.dimensions()
        self.board = Board(rows, cols)
        self.tracker = LegalityTracker(self.board, self.players.values())
        self.phase = TurnPhase.AWAITING_MOVE
        self.active_player = self.starting_player
        self.outcome = GameOutcome.IN_PROGRESS
        self.turn_number = 1
        self.history = []
        logger.info("Board reset (%dx%d)", rows, cols)
        self.announce_turn()


def start_game(
    rows: int,
    cols: int,
    player_configs: Mapping[PlayerID, PlayerConfig] | None = None,
    starting_player: PlayerID = PlayerID.PLAYER_1,
) -> TurnEngine:
    """
    Build a fresh board and player states and return the engine.

    player_configs maps each PlayerID to its PlayerConfig (type and
    color); the default palette assignment is used when omitted.
    """
    from ..config import default_player_configs

    configs = dict(player_configs) if player_configs else default_player_configs()
    missing = set(PlayerID) - set(configs)
    if missing:
        raise ValueError(f"Missing player config for: {sorted(p.value for p in missing)}")

    players = {
        player_id: PlayerState(
            player_id=player_id,
            color=config.color,
            player_type=PlayerType(config.player_type),
            name=config.name or player_id.label,
        )
        for player_id, config in configs.items()
    }
    engine = TurnEngine(Board(rows, cols), players, starting_player=starting_player)
    logger.info(
        "Started %dx%d game, %s moves first", rows, cols, starting_player.value,
    )
    return engine
