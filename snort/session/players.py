"""
Player Sessions - Where a player's moves come from.

A HumanSession waits for an external selection (a click relayed by the
presentation layer). A CPUSession asks its BotPolicy. Both hand back a
cell; only the TurnEngine decides whether it is legal.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import asyncio
import logging
from typing import TYPE_CHECKING

from ..engine_core.board import Cell
from ..engine_core.state import PlayerID, PlayerType

if TYPE_CHECKING:
    from ..bots import BotDecision, BotPolicy
    from ..engine_core.turn_engine import TurnEngine

logger = logging.getLogger(__name__)


class PlayerSession(ABC):
    """Supplies cells for one player."""

    player_type: PlayerType

    def __init__(self, player_id: PlayerID):
        self.player_id = player_id

    @property
    def is_human(self) -> bool:
        return self.player_type is PlayerType.HUMAN

    @abstractmethod
    async def choose_cell(self, engine: TurnEngine) -> Cell | None:
        """Resolve the cell this player wants to claim, or None if the request was discarded."""
        pass

    def cancel(self):
        """Drop any pending request. Nothing to do by default."""


class HumanSession(PlayerSession):
    """
    Relays a selection made in the presentation layer.

    Usage:
        cell = await session.choose_cell(engine)  # suspends
        ...
        session.select(Cell(1, 2))  # from the UI, resumes the waiter
    """

    player_type = PlayerType.HUMAN

    def __init__(self, player_id: PlayerID):
        super().__init__(player_id)
        self._pending: asyncio.Future | None = None
        self._discarded = False

    @property
    def awaiting_selection(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def choose_cell(self, engine: TurnEngine) -> Cell | None:
        """Wait for select(). Returns None if cancel() discards the request."""
        if self.awaiting_selection:
            raise RuntimeError(f"{self.player_id.value} is already waiting for a selection")
        self._discarded = False
        self._pending = asyncio.get_running_loop().create_future()
        try:
            return await self._pending
        except asyncio.CancelledError:
            if not self._discarded:
                raise
            return None
        finally:
            self._pending = None

    def select(self, cell) -> bool:
        """
        Deliver the player's selection.

        Returns False if nothing is waiting for one.
        """
        if not self.awaiting_selection:
            return False
        self._pending.set_result(Cell.of(cell))
        return True

    def cancel(self):
        if self.awaiting_selection:
            self._discarded = True
            self._pending.cancel()


class CPUSession(PlayerSession):
    """
    Plays with a BotPolicy.

    The decision itself is synchronous. delay is a cosmetic pause applied
    after deciding and before reporting the cell.
    """

    player_type = PlayerType.CPU

    def __init__(self, player_id: PlayerID, policy: BotPolicy, delay: float = 0.0):
        super().__init__(player_id)
        self.policy = policy
        self.delay = delay
        self.last_decision: BotDecision | None = None

    def decide(self, engine: TurnEngine) -> BotDecision:
        decision = self.policy.select_cell(
            engine.board,
            engine.tracker,
            self.player_id,
            engine.get_previous_move(),
        )
        self.last_decision = decision
        logger.debug(
            "%s (%s) chose %s by %s",
            self.player_id.value, self.policy.get_name(), decision.cell, decision.rule,
        )
        return decision

    async def choose_cell(self, engine: TurnEngine) -> Cell:
        decision = self.decide(engine)
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return decision.cell
