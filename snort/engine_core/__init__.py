"""
Engine Core - Snort rules, legality bookkeeping and turn sequencing.

The engine:
1. Builds a Board and one PlayerState per player
2. Tracks which empty cells each player may claim
3. Validates and applies moves via the TurnEngine
4. Cascades the adjacency rule onto the opponent
5. Detects the player who can no longer move
"""

from .board import Board, Cell, Occupant
from .errors import SnortError, OutOfBoundsError, IllegalMoveError, StrategyPreconditionError
from .state import PlayerID, PlayerType, PlayerState, TurnPhase, GameOutcome
from .legality import LegalityTracker
from .move import Move, MoveError, MoveResult
from .events import CellOccupied, TurnStarted, GameEnded, GameEvent
from .turn_engine import TurnEngine, start_game

__all__ = [
    "Board",
    "Cell",
    "Occupant",
    "SnortError",
    "OutOfBoundsError",
    "IllegalMoveError",
    "StrategyPreconditionError",
    "PlayerID",
    "PlayerType",
    "PlayerState",
    "TurnPhase",
    "GameOutcome",
    "LegalityTracker",
    "Move",
    "MoveError",
    "MoveResult",
    "CellOccupied",
    "TurnStarted",
    "GameEnded",
    "GameEvent",
    "TurnEngine",
    "start_game",
]
