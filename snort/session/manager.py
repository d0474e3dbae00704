"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Caller supplies a GameConfig → session created with a fresh engine
2. During the game:
   - Humans select cells through their HumanSession (or the API)
   - CPU players answer through their BotPolicy
   - The engine pushes presentation events, recorded on the session
3. Reset → same players, empty board
4. End → session removed, ALL state dropped

Sessions live in memory only.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import time
from typing import Any
import uuid

from ..bots import create_policy
from ..config import GameConfig
from ..engine_core.events import GameEvent
from ..engine_core.state import PlayerID, PlayerType
from ..engine_core.turn_engine import TurnEngine, start_game
from .players import CPUSession, HumanSession, PlayerSession

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


def build_player_sessions(config: GameConfig) -> dict[PlayerID, PlayerSession]:
    """One HumanSession or CPUSession per seat, as configured."""
    sessions: dict[PlayerID, PlayerSession] = {}
    for index, player_id in enumerate(PlayerID):
        player_config = config.players[player_id]
        if player_config.player_type is PlayerType.HUMAN:
            sessions[player_id] = HumanSession(player_id)
        else:
            seed = None if config.random_seed is None else config.random_seed + index
            sessions[player_id] = CPUSession(
                player_id,
                policy=create_policy(player_config.policy, seed=seed),
                delay=config.cpu_delay,
            )
    return sessions


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The configuration it was started with
    - The turn engine (board, legality, turn state)
    - One PlayerSession per seat
    - Events the engine has pushed since they were last drained
    """
    session_id: str
    config: GameConfig
    engine: TurnEngine
    players: dict[PlayerID, PlayerSession]
    created_at: float

    state: SessionState = SessionState.ACTIVE
    events: list[GameEvent] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.engine.subscribe(self._record_event)

    def _record_event(self, event: GameEvent):
        self.events.append(event)
        if self.engine.is_over:
            self.state = SessionState.GAME_OVER

    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def is_human_turn(self) -> bool:
        if self.engine.is_over:
            return False
        return self.players[self.engine.active_player].is_human

    def drain_events(self) -> list[GameEvent]:
        """Return and clear recorded events."""
        events = self.events.copy()
        self.events.clear()
        return events

    def reset_board(self):
        """Empty the board, keep the players."""
        for player in self.players.values():
            player.cancel()
        self.events.clear()
        self.state = SessionState.ACTIVE
        self.engine.reset_board()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from a GameConfig
    - Track active sessions
    - Clean up finished or stale sessions
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(self, config: GameConfig | None = None) -> Session:
        """
        Create a new game session.

        Args:
            config: Game configuration (defaults to 3x3, human vs CPU)

        Returns:
            New Session with the first turn announced
        """
        config = config or GameConfig()
        engine = start_game(
            config.rows,
            config.cols,
            config.players,
            starting_player=config.starting_player,
        )
        session = Session(
            session_id=str(uuid.uuid4()),
            config=config,
            engine=engine,
            players=build_player_sessions(config),
            created_at=time.time(),
        )
        engine.announce_turn()

        self._sessions[session.session_id] = session
        logger.info("Created session %s (%dx%d)", session.session_id, config.rows, config.cols)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        for player in session.players.values():
            player.cancel()
        if reason == "completed" or session.engine.is_over:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        session.events.clear()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> list[str]:
        """
        End sessions older than max_age_seconds.

        Returns the IDs that were removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
