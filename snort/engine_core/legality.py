"""
Legality Tracker - Per-player valid/invalid bookkeeping and the
invalidation cascade.

When a player claims a cell:
1. The cell is marked on the board
2. It leaves both players' valid and invalid sets
3. Its empty neighbors become invalid for the opponent

Invalidation is one-directional. Snort never removes pieces, so a cell
that becomes invalid for a player stays invalid until it is claimed by
the other player or the game is reset.
"""

from __future__ import annotations
import logging
from typing import Iterable

from .board import Board, Cell
from .errors import IllegalMoveError
from .state import PlayerID, PlayerState

logger = logging.getLogger(__name__)


class LegalityTracker:
    """
    Owns the board mutations and both players' legality sets.

    Usage:
        tracker = LegalityTracker(board, players)
        if tracker.is_valid_move(PlayerID.PLAYER_1, cell):
            tracker.apply_move(PlayerID.PLAYER_1, cell)
    """

    def __init__(self, board: Board, players: Iterable[PlayerState]):
        self.board = board
        self.players: dict[PlayerID, PlayerState] = {p.player_id: p for p in players}
        if set(self.players) != set(PlayerID):
            raise ValueError("LegalityTracker needs exactly one state per PlayerID")
        self.reset()

    def reset(self):
        """Every empty cell becomes valid for every player."""
        empty = self.board.empty_cells()
        for player in self.players.values():
            player.reset(empty)

    def player(self, player_id: PlayerID) -> PlayerState:
        return self.players[player_id]

    def is_valid_move(self, player_id: PlayerID, cell: Cell) -> bool:
        """
        Whether the player may claim the cell right now.

        Looks the cell up in whichever of the two sets is smaller. The
        negated lookup only holds for empty in-bounds cells, since
        claimed cells sit in neither set.
        """
        player = self.players[player_id]
        if len(player.valid_spots) < len(player.invalid_spots):
            return cell in player.valid_spots
        if not self.board.in_bounds(cell) or not self.board.is_empty(cell):
            return False
        return cell not in player.invalid_spots

    def valid_spots_of(self, player_id: PlayerID) -> frozenset[Cell]:
        return frozenset(self.players[player_id].valid_spots)

    def invalid_spots_of(self, player_id: PlayerID) -> frozenset[Cell]:
        return frozenset(self.players[player_id].invalid_spots)

    def apply_move(self, player_id: PlayerID, cell: Cell) -> list[Cell]:
        """
        Claim a cell for a player and cascade the adjacency rule.

        Returns the cells newly invalidated for the opponent.

        Raises IllegalMoveError if the cell is not empty or not valid for
        the player; callers must check is_valid_move first.
        """
        if not self.board.is_empty(cell):
            raise IllegalMoveError(f"{cell} is already occupied")
        if cell not in self.players[player_id].valid_spots:
            raise IllegalMoveError(f"{cell} is not a valid move for {player_id.value}")

        self.board.set_occupant(cell, player_id.occupant)

        for player in self.players.values():
            player.valid_spots.discard(cell)
            player.invalid_spots.discard(cell)

        invalidated: list[Cell] = []
        for neighbor in self.board.neighbors(cell):
            if not self.board.is_empty(neighbor):
                continue
            for other_id, other in self.players.items():
                if other_id is player_id:
                    continue
                if neighbor in other.valid_spots:
                    other.valid_spots.remove(neighbor)
                    other.invalid_spots.add(neighbor)
                    invalidated.append(neighbor)

        logger.debug(
            "%s claimed %s, invalidated for opponent: %s",
            player_id.value, cell, [str(c) for c in invalidated],
        )
        return invalidated
