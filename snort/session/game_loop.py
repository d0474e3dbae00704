"""
Game Loop - Drives turns between the engine and the player sessions.

The loop:
1. Ask the active player's session for a cell (may suspend)
2. Submit it to the engine
3. Re-prompt the same player if the engine rejects it
4. Repeat until the game is over or the loop is cancelled

Only one move request is ever outstanding. Cancelling discards it and
leaves the engine exactly as it was, still awaiting the same player.
"""

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import TYPE_CHECKING

from ..engine_core.move import MoveResult
from ..engine_core.state import GameOutcome

if TYPE_CHECKING:
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    IDLE = "idle"
    WAITING_HUMAN = "waiting_human"
    RUNNING_CPU = "running_cpu"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of running CPU turns synchronously.

    Contains every applied move result, in order.
    """
    loop_state: LoopState
    results: list[MoveResult] = field(default_factory=list)
    outcome: GameOutcome = GameOutcome.IN_PROGRESS


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        outcome = await loop.run()

        # elsewhere, from the UI:
        session.players[PlayerID.PLAYER_1].select(cell)

        # aborting to a menu:
        loop.cancel()
    """

    def __init__(self, session: Session):
        self.session = session
        self.state = LoopState.IDLE
        self.rejections = 0
        self._request: asyncio.Task | None = None
        self._cancelled = False

    @property
    def engine(self):
        return self.session.engine

    @property
    def pending(self) -> bool:
        return self._request is not None

    def _state_for_active_player(self) -> LoopState:
        if self.engine.is_over:
            return LoopState.GAME_OVER
        player = self.session.players[self.engine.active_player]
        return LoopState.WAITING_HUMAN if player.is_human else LoopState.RUNNING_CPU

    async def play_turn(self) -> MoveResult | None:
        """
        Resolve one move for the active player.

        Returns the applied MoveResult, or None if the request was
        cancelled. Rejected cells are re-prompted. A request discarded by
        a board reset is asked again of whoever moves first on the new
        board.
        """
        if self._request is not None:
            raise RuntimeError("A move request is already pending")

        while True:
            if self.engine.is_over:
                self.state = LoopState.GAME_OVER
                return None

            player_id = self.engine.active_player
            player = self.session.players[player_id]
            board = self.engine.board

            self.state = self._state_for_active_player()
            self._cancelled = False
            self._request = asyncio.ensure_future(player.choose_cell(self.engine))
            try:
                cell = await self._request
            except asyncio.CancelledError:
                if not self._cancelled:
                    raise
                logger.info("Move request for %s cancelled", player_id.value)
                self.state = LoopState.IDLE
                return None
            finally:
                self._request = None

            if cell is None or self.engine.board is not board:
                logger.info("Move request for %s discarded by a board reset", player_id.value)
                continue

            result = self.engine.submit_move(player_id, cell)
            if result.success:
                self.state = self._state_for_active_player()
                return result

            self.rejections += 1
            if not player.is_human:
                # Policies only pick valid cells
                raise RuntimeError(
                    f"CPU {player_id.value} submitted a rejected move: {result.error}"
                )

    async def run(self) -> GameOutcome:
        """
        Play until the game ends or the loop is cancelled.

        Returns the engine outcome (IN_PROGRESS if cancelled).
        """
        while not self.engine.is_over:
            result = await self.play_turn()
            if result is None:
                break
        return self.engine.outcome

    def cancel(self):
        """Discard the pending move request, if any."""
        if self._request is None:
            return
        self._cancelled = True
        self.session.players[self.engine.active_player].cancel()
        self._request.cancel()

    def run_cpu_turns(self) -> TurnResult:
        """
        Apply CPU moves synchronously until a human is to move.

        Used by request/response front ends, which cannot suspend while a
        CPU "thinks". Cosmetic delays are skipped.
        """
        results: list[MoveResult] = []
        while not self.engine.is_over:
            player = self.session.players[self.engine.active_player]
            if player.is_human:
                break
            decision = player.decide(self.engine)
            result = self.engine.submit_move(player.player_id, decision.cell)
            if not result.success:
                raise RuntimeError(
                    f"CPU {player.player_id.value} submitted a rejected move: {result.error}"
                )
            results.append(result)

        self.state = self._state_for_active_player()
        return TurnResult(
            loop_state=self.state,
            results=results,
            outcome=self.engine.outcome,
        )
