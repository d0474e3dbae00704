"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a presentation client and the
engine. Cells are addressed by 0-indexed row and column.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- VALIDATION_ERROR: Request or game configuration is invalid
- OUT_OF_BOUNDS: Cell lies outside the board
- CELL_OCCUPIED: Cell is already claimed
- ILLEGAL_ADJACENCY: Cell is next to an opponent's cell
- NOT_YOUR_TURN: Move submitted for a player who is not to move
- GAME_OVER: Game has ended
- MOVE_IN_FLIGHT: Another move is still being resolved
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..config import PlayerConfig
from ..engine_core.state import GameOutcome, PlayerID, PlayerType


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    YOUR_TURN = "your_turn"
    CPU_TURN = "cpu_turn"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    ILLEGAL_ADJACENCY = "ILLEGAL_ADJACENCY"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_OVER = "GAME_OVER"
    MOVE_IN_FLIGHT = "MOVE_IN_FLIGHT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """A board coordinate."""
    row: int
    col: int


class MoveInfo(BaseModel):
    """A move that has been applied."""
    player_id: PlayerID
    row: int
    col: int


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: PlayerID
    name: str
    player_type: PlayerType
    color: str
    is_current_turn: bool = False
    valid_count: int = 0
    policy: Optional[str] = Field(None, description="Bot policy for CPU players")

    model_config = {"from_attributes": True}


class EventInfo(BaseModel):
    """A presentation event pushed by the engine."""
    type: str = Field(description="cell_occupied, turn_started, game_over")
    row: Optional[int] = None
    col: Optional[int] = None
    occupant: Optional[str] = None
    player_id: Optional[str] = None
    turn_number: Optional[int] = None
    outcome: Optional[str] = None
    winner: Optional[str] = None


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game."""
    rows: int = Field(3, description="Board rows, clamped to 1-10")
    cols: int = Field(3, description="Board columns, clamped to 1-10")
    players: Optional[dict[PlayerID, PlayerConfig]] = Field(
        None, description="Per-seat configuration; defaults to human vs CPU"
    )
    starting_player: PlayerID = PlayerID.PLAYER_1
    random_seed: Optional[int] = Field(None, description="Seed for reproducible CPU play")


class MoveRequest(BaseModel):
    """Request to claim a cell."""
    player_id: PlayerID
    row: int
    col: int


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    rows: int
    cols: int
    players: list[PlayerInfo] = Field(default_factory=list)
    starting_player: PlayerID
    current_turn_player_id: Optional[PlayerID] = None
    turn_number: int = 1
    created_at: float = 0.0
    events: list[EventInfo] = Field(default_factory=list)
    api_version: str = "v1"


class BoardStateResponse(BaseModel):
    """Complete board state for display."""
    session_id: str
    status: SessionStatus
    rows: int
    cols: int
    grid: list[list[str]] = Field(description="Occupant per cell, row-major")
    players: list[PlayerInfo] = Field(default_factory=list)
    current_turn_player_id: Optional[PlayerID] = None
    turn_number: int = 1
    middle_cell: CellInfo
    previous_move: Optional[MoveInfo] = None
    valid_cells: dict[str, list[CellInfo]] = Field(
        default_factory=dict, description="Valid cells per player_id"
    )
    outcome: GameOutcome = GameOutcome.IN_PROGRESS
    winner: Optional[PlayerID] = None
    api_version: str = "v1"


class ValidityResponse(BaseModel):
    """Whether a player may claim a cell (for hover highlighting)."""
    session_id: str
    player_id: PlayerID
    row: int
    col: int
    valid: bool


class MoveResponse(BaseModel):
    """Response after submitting a move."""
    session_id: str
    success: bool
    move: Optional[MoveInfo] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    # CPU replies applied after the move, in order
    cpu_moves: list[MoveInfo] = Field(default_factory=list)
    events: list[EventInfo] = Field(default_factory=list)

    outcome: GameOutcome = GameOutcome.IN_PROGRESS
    winner: Optional[PlayerID] = None
    board: Optional[BoardStateResponse] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
