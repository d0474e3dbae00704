"""
Bot Policy - Interface for CPU decision-making.

A BotPolicy looks at the board, the legality sets and the previous move,
and picks a cell. Policies never mutate the game: the CPU session hands
the chosen cell to TurnEngine.submit_move like any other player.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random
from typing import TYPE_CHECKING

from ..engine_core.errors import StrategyPreconditionError

if TYPE_CHECKING:
    from ..engine_core.board import Board, Cell
    from ..engine_core.legality import LegalityTracker
    from ..engine_core.move import Move
    from ..engine_core.state import PlayerID


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    rule names which branch of the policy produced the cell
    ("middle", "mirror", "random"), for logs and tests.
    """
    cell: Cell
    rule: str
    explanation: str = ""
    candidates: int = 0


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations must raise StrategyPreconditionError when the player
    has no valid cell; the engine ends the game before that can happen.
    """

    @abstractmethod
    def select_cell(
        self,
        board: Board,
        legality: LegalityTracker,
        player_id: PlayerID,
        previous_move: Move | None,
    ) -> BotDecision:
        """
        Select a cell for player_id.

        Args:
            board: Current board (read only)
            legality: Legality sets for both players (read only)
            player_id: The player to move
            previous_move: The last move of the game, if any

        Returns:
            BotDecision with the selected cell
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__

    @staticmethod
    def _require_moves(legality: LegalityTracker, player_id: PlayerID) -> list[Cell]:
        """Valid cells in a stable order, or StrategyPreconditionError."""
        valid = legality.valid_spots_of(player_id)
        if not valid:
            raise StrategyPreconditionError(
                f"{player_id.value} has no valid cells; the game should already be over"
            )
        return sorted(valid)


class RandomPolicy(BotPolicy):
    """
    Random policy - picks uniformly among the player's valid cells.

    Used for:
    - The fallback branch of the symmetry policy
    - Baseline CPU opponents
    - Randomized playouts in tests
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.rng = rng or random.Random(seed)

    def select_cell(
        self,
        board: Board,
        legality: LegalityTracker,
        player_id: PlayerID,
        previous_move: Move | None,
    ) -> BotDecision:
        valid = self._require_moves(legality, player_id)
        cell = self.rng.choice(valid)
        return BotDecision(
            cell=cell,
            rule="random",
            explanation="Selected randomly",
            candidates=len(valid),
        )
