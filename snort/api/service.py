"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Runs CPU replies after each human move
4. Formats responses for the presentation client

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from pydantic import ValidationError

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
from ..config import GameConfig
from ..engine_core.board import Cell
from ..engine_core.events import GameEvent
from ..engine_core.move import Move
from ..engine_core.state import PlayerID
from ..session import SessionManager, Session, GameLoop, CPUSession

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for a presentation client.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest(rows=5, cols=5))
        response = service.submit_move(
            session.session_id,
            MoveRequest(player_id="player_1", row=2, col=2),
        )
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Start a new game.

        If a CPU moves first, its opening is already applied.
        Raises ValueError if the configuration is invalid.
        """
        try:
            config = GameConfig(
                rows=request.rows,
                cols=request.cols,
                starting_player=request.starting_player,
                random_seed=request.random_seed,
                **({"players": request.players} if request.players else {}),
            )
        except ValidationError as e:
            raise ValueError(str(e)) from e

        session = self.session_manager.create_session(config)
        game_loop = GameLoop(session)
        self._game_loops[session.session_id] = game_loop
        game_loop.run_cpu_turns()

        return self._session_to_response(session, events=session.drain_events())

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def get_board(self, session_id: str) -> BoardStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._build_board_state(session)

    def check_cell(
        self,
        session_id: str,
        player_id: PlayerID,
        row: int,
        col: int,
    ) -> ValidityResponse | ErrorResponse:
        """Whether player_id may claim (row, col) right now."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return ValidityResponse(
            session_id=session_id,
            player_id=player_id,
            row=row,
            col=col,
            valid=session.engine.is_valid_move(player_id, Cell(row, col)),
        )

    def submit_move(self, session_id: str, request: MoveRequest) -> MoveResponse | ErrorResponse:
        """
        Apply a human move, then any CPU replies.

        Moves for CPU-controlled seats are rejected with NOT_YOUR_TURN
        while the game is running; once it is over every seat gets GAME_OVER.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        if not session.engine.is_over and isinstance(session.players[request.player_id], CPUSession):
            return MoveResponse(
                session_id=session_id,
                success=False,
                error=f"{request.player_id.value} is controlled by the CPU",
                error_code=ErrorCode.NOT_YOUR_TURN,
                outcome=session.engine.outcome,
            )

        result = session.engine.submit_move(request.player_id, Cell(request.row, request.col))
        if not result.success:
            return MoveResponse(
                session_id=session_id,
                success=False,
                error=result.error,
                error_code=ErrorCode(result.error_code.value),
                outcome=session.engine.outcome,
            )

        turn = self._game_loops[session_id].run_cpu_turns()
        outcome = session.engine.outcome
        return MoveResponse(
            session_id=session_id,
            success=True,
            move=self._move_info(result.move),
            cpu_moves=[self._move_info(r.move) for r in turn.results],
            events=self._convert_events(session.drain_events()),
            outcome=outcome,
            winner=outcome.winner,
            board=self._build_board_state(session),
        )

    def reset_board(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Start over on an empty board with the same players."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        session.reset_board()
        self._game_loops[session_id].run_cpu_turns()
        return self._session_to_response(session, events=session.drain_events())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    def cleanup_stale_sessions(self, max_age_seconds: float) -> list[str]:
        removed = self.session_manager.cleanup_stale_sessions(max_age_seconds)
        for session_id in removed:
            self._game_loops.pop(session_id, None)
        return removed

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _status(self, session: Session) -> SessionStatus:
        if session.engine.is_over:
            return SessionStatus.GAME_OVER
        if session.is_human_turn():
            return SessionStatus.YOUR_TURN
        return SessionStatus.CPU_TURN

    def _build_players(self, session: Session) -> list[PlayerInfo]:
        engine = session.engine
        players = []
        for player_id in PlayerID:
            state = engine.players[player_id]
            player_config = session.config.players[player_id]
            players.append(
                PlayerInfo(
                    player_id=player_id,
                    name=state.name,
                    player_type=state.player_type,
                    color=state.color,
                    is_current_turn=(not engine.is_over and engine.active_player is player_id),
                    valid_count=len(state.valid_spots),
                    policy=None if state.is_human else player_config.policy,
                )
            )
        return players

    def _session_to_response(
        self,
        session: Session,
        events: list[GameEvent] | None = None,
    ) -> SessionResponse:
        engine = session.engine
        rows, cols = engine.get_board_size()
        return SessionResponse(
            session_id=session.session_id,
            status=self._status(session),
            rows=rows,
            cols=cols,
            players=self._build_players(session),
            starting_player=engine.starting_player,
            current_turn_player_id=None if engine.is_over else engine.active_player,
            turn_number=engine.turn_number,
            created_at=session.created_at,
            events=self._convert_events(events or []),
        )

    def _build_board_state(self, session: Session) -> BoardStateResponse:
        engine = session.engine
        rows, cols = engine.get_board_size()
        middle = engine.get_middle_cell()
        previous = engine.get_previous_move()
        return BoardStateResponse(
            session_id=session.session_id,
            status=self._status(session),
            rows=rows,
            cols=cols,
            grid=[[occupant.value for occupant in row] for row in engine.board.snapshot()],
            players=self._build_players(session),
            current_turn_player_id=None if engine.is_over else engine.active_player,
            turn_number=engine.turn_number,
            middle_cell=CellInfo(row=middle.row, col=middle.col),
            previous_move=self._move_info(previous) if previous else None,
            valid_cells={
                player_id.value: [
                    CellInfo(row=c.row, col=c.col)
                    for c in sorted(engine.valid_spots_of(player_id))
                ]
                for player_id in PlayerID
            },
            outcome=engine.outcome,
            winner=engine.outcome.winner,
        )

    def _move_info(self, move: Move) -> MoveInfo:
        return MoveInfo(player_id=move.player_id, row=move.cell.row, col=move.cell.col)

    def _convert_events(self, events: list[GameEvent]) -> list[EventInfo]:
        return [EventInfo(**event.to_dict()) for event in events]


def move_error_status(code: ErrorCode) -> int:
    """HTTP status for a rejected move."""
    if code in {ErrorCode.NOT_YOUR_TURN, ErrorCode.GAME_OVER, ErrorCode.MOVE_IN_FLIGHT}:
        return 409
    return 400
