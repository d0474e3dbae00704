"""
Move System - Moves, error codes, and results.

submit_move is the single mutating entry point of the engine. It never
raises for a rejected move; it returns a MoveResult carrying a MoveError
code the caller can act on (re-prompt a human, report over the API).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .board import Cell
from .state import GameOutcome, PlayerID


@dataclass(frozen=True)
class Move:
    """A player claiming a cell."""
    player_id: PlayerID
    cell: Cell

    def __str__(self) -> str:
        return f"{self.player_id.value}@{self.cell}"


class MoveError(Enum):
    """Why a submitted move was rejected."""
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    ILLEGAL_ADJACENCY = "ILLEGAL_ADJACENCY"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_OVER = "GAME_OVER"
    MOVE_IN_FLIGHT = "MOVE_IN_FLIGHT"


@dataclass
class MoveResult:
    """
    Result of submitting a move.

    Contains:
    - Whether the move was applied
    - The error code and message (if rejected)
    - The outcome and next player (if applied)
    - Cells the move invalidated for the opponent
    """
    success: bool
    move: Move | None = None
    error: str | None = None
    error_code: MoveError | None = None

    outcome: GameOutcome = GameOutcome.IN_PROGRESS
    next_player: PlayerID | None = None
    invalidated: list[Cell] = field(default_factory=list)

    # Events emitted while resolving (for presentation)
    events: list[Any] = field(default_factory=list)

    @property
    def game_over(self) -> bool:
        return self.outcome.is_over

    @classmethod
    def failure(cls, error: str, error_code: MoveError, move: Move | None = None) -> MoveResult:
        """Create a rejection result."""
        return cls(success=False, move=move, error=error, error_code=error_code)

    @classmethod
    def applied(
        cls,
        move: Move,
        outcome: GameOutcome,
        next_player: PlayerID | None,
        invalidated: list[Cell] | None = None,
        events: list[Any] | None = None,
    ) -> MoveResult:
        """Create a success result."""
        return cls(
            success=True,
            move=move,
            outcome=outcome,
            next_player=next_player,
            invalidated=invalidated or [],
            events=events or [],
        )
