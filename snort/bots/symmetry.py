"""
Symmetry Policy - The CPU's pairing strategy.

In priority order:
1. No previous move (the CPU opens): take the middle cell.
2. Mirror the previous move through the board center, if that cell is
   still valid for us.
3. Otherwise pick uniformly among our valid cells.

Mirroring answers each opponent move with its point-reflected partner,
which keeps the position symmetric for as long as the partner is free.
Once the position stops being symmetric it never becomes symmetric
again, so after the first fallback the mirror rule only fires by chance.
"""

from __future__ import annotations
import logging
import random
from typing import TYPE_CHECKING

from .policy import BotPolicy, BotDecision, RandomPolicy

if TYPE_CHECKING:
    from ..engine_core.board import Board
    from ..engine_core.legality import LegalityTracker
    from ..engine_core.move import Move
    from ..engine_core.state import PlayerID

logger = logging.getLogger(__name__)


class SymmetryPolicy(BotPolicy):
    """
    Middle-then-mirror policy with a random fallback.

    Usage:
        policy = SymmetryPolicy(seed=7)
        decision = policy.select_cell(board, tracker, PlayerID.PLAYER_2, previous)
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)
        self.fallback = RandomPolicy(rng=self.rng)

    def select_cell(
        self,
        board: Board,
        legality: LegalityTracker,
        player_id: PlayerID,
        previous_move: Move | None,
    ) -> BotDecision:
        valid = self._require_moves(legality, player_id)

        if previous_move is None:
            middle = board.middle_cell()
            if legality.is_valid_move(player_id, middle):
                decision = BotDecision(
                    cell=middle,
                    rule="middle",
                    explanation="Opening move in the middle of the board",
                    candidates=len(valid),
                )
                logger.debug("%s opens at %s", player_id.value, middle)
                return decision

        else:
            target = board.reflect(previous_move.cell)
            if legality.is_valid_move(player_id, target):
                logger.debug(
                    "%s mirrors %s with %s", player_id.value, previous_move.cell, target,
                )
                return BotDecision(
                    cell=target,
                    rule="mirror",
                    explanation=f"Mirrored opponent's {previous_move.cell}",
                    candidates=len(valid),
                )

        decision = self.fallback.select_cell(board, legality, player_id, previous_move)
        logger.debug("%s falls back to random %s", player_id.value, decision.cell)
        return decision
