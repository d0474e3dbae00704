"""
Game State - Player identities, per-player legality sets, and outcomes.

Design principles:
- Two fixed player identities; everything per-player is keyed by PlayerID
- valid/invalid are exact complements over the currently empty cells
- Sets only ever shrink or move cells valid -> invalid, never back
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .board import Cell, Occupant


class PlayerID(Enum):
    """The two seats at the table."""
    PLAYER_1 = "player_1"
    PLAYER_2 = "player_2"

    @property
    def other(self) -> PlayerID:
        return PlayerID.PLAYER_2 if self is PlayerID.PLAYER_1 else PlayerID.PLAYER_1

    @property
    def occupant(self) -> Occupant:
        """The Occupant tag this player's claimed cells carry."""
        return Occupant(self.value)

    @property
    def label(self) -> str:
        return "Player 1" if self is PlayerID.PLAYER_1 else "Player 2"


class PlayerType(Enum):
    """Who supplies a player's moves."""
    HUMAN = "human"
    CPU = "cpu"


class TurnPhase(Enum):
    """Turn engine state."""
    AWAITING_MOVE = "awaiting_move"
    RESOLVING = "resolving"
    GAME_OVER = "game_over"


class GameOutcome(Enum):
    """Result of a game."""
    IN_PROGRESS = "in_progress"
    PLAYER_1_WINS = "player_1_wins"
    PLAYER_2_WINS = "player_2_wins"

    @classmethod
    def win_for(cls, player_id: PlayerID) -> GameOutcome:
        if player_id is PlayerID.PLAYER_1:
            return cls.PLAYER_1_WINS
        return cls.PLAYER_2_WINS

    @property
    def winner(self) -> PlayerID | None:
        if self is GameOutcome.PLAYER_1_WINS:
            return PlayerID.PLAYER_1
        if self is GameOutcome.PLAYER_2_WINS:
            return PlayerID.PLAYER_2
        return None

    @property
    def is_over(self) -> bool:
        return self is not GameOutcome.IN_PROGRESS


@dataclass
class PlayerState:
    """
    State for a single player.

    valid: empty cells this player may claim.
    invalid: empty cells this player may not claim (next to an opponent).
    """
    player_id: PlayerID
    color: str
    player_type: PlayerType = PlayerType.HUMAN
    name: str = ""
    valid_spots: set[Cell] = field(default_factory=set)
    invalid_spots: set[Cell] = field(default_factory=set)

    def __post_init__(self):
        if not self.name:
            self.name = self.player_id.label

    @property
    def is_human(self) -> bool:
        return self.player_type is PlayerType.HUMAN

    @property
    def has_moves(self) -> bool:
        return bool(self.valid_spots)

    def reset(self, cells):
        """Every given cell becomes valid; nothing is invalid."""
        self.valid_spots = set(cells)
        self.invalid_spots = set()
