"""
Presentation events pushed by the turn engine.

The engine does not know how these are rendered. Listeners are plain
callables registered with TurnEngine.subscribe.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Union

from .board import Cell, Occupant
from .state import GameOutcome, PlayerID


@dataclass(frozen=True)
class CellOccupied:
    """A cell changed owner and should be recolored."""
    cell: Cell
    occupant: Occupant

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "cell_occupied",
            "row": self.cell.row,
            "col": self.cell.col,
            "occupant": self.occupant.value,
        }


@dataclass(frozen=True)
class TurnStarted:
    """A player is now expected to move."""
    player_id: PlayerID
    turn_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "turn_started",
            "player_id": self.player_id.value,
            "turn_number": self.turn_number,
        }


@dataclass(frozen=True)
class GameEnded:
    """The game is over."""
    outcome: GameOutcome

    def to_dict(self) -> dict[str, Any]:
        winner = self.outcome.winner
        return {
            "type": "game_over",
            "outcome": self.outcome.value,
            "winner": winner.value if winner else None,
        }


GameEvent = Union[CellOccupied, TurnStarted, GameEnded]
EventListener = Callable[[GameEvent], None]
