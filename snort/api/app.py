"""
FastAPI Application - HTTP/WebSocket adapter for a presentation client.

Endpoints:
    POST   /api/v1/sessions                 Start a game
    GET    /api/v1/sessions                 List sessions
    GET    /api/v1/sessions/{id}            Get session status
    DELETE /api/v1/sessions/{id}            End session
    GET    /api/v1/sessions/{id}/board      Get board state
    GET    /api/v1/sessions/{id}/valid      Check a cell (hover highlight)
    POST   /api/v1/sessions/{id}/moves      Claim a cell
    POST   /api/v1/sessions/{id}/reset      Empty the board, same players
    WS     /api/v1/sessions/{id}/ws         Presentation events

Move Flow:
    1. POST /moves applies the human move
    2. If the next player is a CPU, its reply is applied immediately
       (repeatedly, while CPUs are to move)
    3. The response lists the CPU moves and every event in order
    4. The same events are pushed to WebSocket listeners

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import json
import logging
import os

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core.state import PlayerID
from .service import APIService, move_error_status
from .schemas import (
    # Request models
    CreateSessionRequest,
    MoveRequest,
    # Response models
    SessionResponse,
    BoardStateResponse,
    ValidityResponse,
    MoveResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)

# Environment configuration
SNORT_ENV = os.getenv("SNORT_ENV", "development")
SNORT_LOG_LEVEL = os.getenv("SNORT_LOG_LEVEL", "INFO")
SNORT_SESSION_MAX_AGE = float(os.getenv("SNORT_SESSION_MAX_AGE", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    logging.basicConfig(level=SNORT_LOG_LEVEL.upper())

    app = FastAPI(
        title="Snort Engine API",
        description="""
Snort rules engine - claim cells, never next to your opponent.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Invalid game configuration |
| `OUT_OF_BOUNDS` | Cell lies outside the board |
| `CELL_OCCUPIED` | Cell is already claimed |
| `ILLEGAL_ADJACENCY` | Cell is next to an opponent's cell |
| `NOT_YOUR_TURN` | That player is not to move (or is a CPU) |
| `GAME_OVER` | The game has ended |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def not_found(response: ErrorResponse) -> JSONResponse:
        return make_error_response(response.error_code, response.error, status_code=404)

    async def broadcast_to_session(session_id: str, messages: list[dict]):
        """Send messages to every WebSocket listening on a session."""
        if session_id not in ws_connections:
            return
        dead_connections = []
        for ws in ws_connections[session_id]:
            try:
                for message in messages:
                    await ws.send_json(message)
            except (WebSocketDisconnect, RuntimeError):
                dead_connections.append(ws)
        for ws in dead_connections:
            ws_connections[session_id].remove(ws)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid configuration"}},
        tags=["Sessions"],
        summary="Start a new game",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Start a new game.

        Board dimensions are clamped to 1-10. If a CPU moves first its
        opening move is already on the returned board.
        """
        api_service.cleanup_stale_sessions(SNORT_SESSION_MAX_AGE)
        try:
            return api_service.create_session(body)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        for ws in ws_connections.pop(session_id, []):
            await ws.close()
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/board",
        response_model=BoardStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get board state",
    )
    async def get_board(session_id: str) -> Union[BoardStateResponse, JSONResponse]:
        response = api_service.get_board(session_id)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/valid",
        response_model=ValidityResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Check whether a player may claim a cell",
    )
    async def check_cell(
        session_id: str,
        player_id: Annotated[PlayerID, Query()],
        row: Annotated[int, Query()],
        col: Annotated[int, Query()],
    ) -> Union[ValidityResponse, JSONResponse]:
        """Used by the presentation layer to highlight the cell under the pointer."""
        response = api_service.check_cell(session_id, player_id, row, col)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Illegal cell"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Not this player's turn"},
        },
        tags=["Game"],
        summary="Claim a cell",
    )
    async def submit_move(
        session_id: str,
        body: MoveRequest,
    ) -> Union[MoveResponse, JSONResponse]:
        """
        Claim a cell for a human player.

        **Request Body:**
        ```json
        {"player_id": "player_1", "row": 2, "col": 2}
        ```
        """
        response = api_service.submit_move(session_id, body)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        if not response.success:
            return make_error_response(
                response.error_code,
                response.error,
                status_code=move_error_status(response.error_code),
                details={"player_id": body.player_id.value, "row": body.row, "col": body.col},
            )

        await broadcast_to_session(
            session_id, [event.model_dump(exclude_none=True) for event in response.events],
        )
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Reset the board",
    )
    async def reset_board(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.reset_board(session_id)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        await broadcast_to_session(
            session_id,
            [{"type": "board_reset"}]
            + [event.model_dump(exclude_none=True) for event in response.events],
        )
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for presentation events.

        Messages from server:
        - board_state: Full board on connect
        - cell_occupied: A cell changed owner
        - turn_started: A player is to move
        - game_over: Game ended
        - board_reset: Board was emptied
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        board = api_service.get_board(session_id)
        if isinstance(board, ErrorResponse):
            await websocket.send_json({
                "type": "error",
                "payload": board.model_dump(mode="json"),
            })
            await websocket.close()
            return

        ws_connections.setdefault(session_id, []).append(websocket)
        try:
            await websocket.send_json({
                "type": "board_state",
                "payload": board.model_dump(mode="json"),
            })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            logger.debug("WebSocket for %s disconnected", session_id)
        finally:
            if websocket in ws_connections.get(session_id, []):
                ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="snort-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Snort Engine API",
            "version": __version__,
            "environment": SNORT_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn snort.api.app:app
app = create_app()
