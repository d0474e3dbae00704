"""
Session Module - Manages ephemeral game sessions.

A session represents one match:
- Created from a GameConfig
- Holds the turn engine and one PlayerSession per seat
- Driven by a GameLoop (async) or by request/response calls
- Dropped when the match ends

Sessions are never persisted.
"""

from .players import PlayerSession, HumanSession, CPUSession
from .manager import SessionManager, Session, SessionState, build_player_sessions
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "PlayerSession",
    "HumanSession",
    "CPUSession",
    "SessionManager",
    "Session",
    "SessionState",
    "build_player_sessions",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
