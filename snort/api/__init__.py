"""
API Module - Presentation client interface.

Exposes the engine over HTTP and WebSocket for a presentation client
(board rendering, hover highlighting, animations). The client:
1. Starts a session with a board size and player setup
2. Queries cell validity while the pointer moves
3. Submits moves for human players
4. Receives CPU replies and presentation events

One client drives one session; all state is in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    SessionResponse,
    BoardStateResponse,
    ValidityResponse,
    MoveResponse,
    ErrorResponse,
    # Shared
    CellInfo,
    MoveInfo,
    PlayerInfo,
    EventInfo,
    # Enums
    SessionStatus,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "SessionResponse",
    "BoardStateResponse",
    "ValidityResponse",
    "MoveResponse",
    "ErrorResponse",
    # Shared
    "CellInfo",
    "MoveInfo",
    "PlayerInfo",
    "EventInfo",
    # Enums
    "SessionStatus",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
