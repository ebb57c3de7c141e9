"""
FastAPI Application - HTTP driver for game sessions.

Endpoints:
    GET    /api/v1/health                  Health check
    GET    /api/v1/games                   List registered games
    POST   /api/v1/sessions                Start a game session
    GET    /api/v1/sessions                List session IDs
    GET    /api/v1/sessions/{id}           Pending event or final outcome
    POST   /api/v1/sessions/{id}/resume    Answer the pending event
    DELETE /api/v1/sessions/{id}           Cancel and release a session

Every endpoint is `async def`, so sessions are driven on the event loop
thread one request at a time; a session is never touched concurrently.

All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Union
import os

# Environment configuration
POSTURN_ENV = os.getenv("POSTURN_ENV", "development")
POSTURN_MAX_SESSIONS = int(os.getenv("POSTURN_MAX_SESSIONS", "100"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

ERROR_STATUS = {
    "SESSION_NOT_FOUND": 404,
    "UNKNOWN_GAME": 404,
    "ALREADY_COMPLETED": 409,
    "NOT_SUSPENDED": 409,
    "INVALID_INPUT": 422,
    "TOO_MANY_SESSIONS": 429,
    "INTERNAL_ERROR": 500,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import APIService
    from .schemas import (
        CreateSessionRequest,
        ResumeRequest,
        SessionResponse,
        GameListResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        ErrorResponse,
    )

    api_service = service or APIService(max_sessions=POSTURN_MAX_SESSIONS)

    @asynccontextmanager
    async def lifespan(app):
        yield
        api_service.shutdown()

    app = FastAPI(
        title="Posturn Session API",
        description="""
Turn-based games as resumable sessions.

## Flow

1. `POST /sessions` with a game name; the response carries the first `event`
2. Render the event, collect the player's move
3. `POST /sessions/{id}/resume` with the move as `input`
4. Repeat until `status` is `completed`; the response carries the `outcome`

Exactly one input is accepted per event. `DELETE` abandons a session.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `UNKNOWN_GAME` | Game name not registered |
| `ALREADY_COMPLETED` | Game is already over |
| `NOT_SUSPENDED` | Session is not waiting for input |
| `INVALID_INPUT` | Input does not match the game's input model |
| `TOO_MANY_SESSIONS` | Session limit reached |
| `INTERNAL_ERROR` | The game raised an error |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.service = api_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Render an ErrorResponse with its HTTP status."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error.error_code.value, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Endpoints
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Meta"])
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(api_service.list_sessions()),
        )

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List registered games",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Unknown game"},
            429: {"model": ErrorResponse, "description": "Session limit reached"},
            500: {"model": ErrorResponse, "description": "Game failed to start"},
        },
        tags=["Sessions"],
        summary="Start a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """Start a session; the response carries the first pending event."""
        return respond(api_service.create_session(request))

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
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        tags=["Sessions"],
        summary="Get the pending event or the outcome",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        return respond(api_service.get_session(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/resume",
        response_model=SessionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Game over or not waiting"},
            422: {"model": ErrorResponse, "description": "Invalid input"},
            500: {"model": ErrorResponse, "description": "Game raised an error"},
        },
        tags=["Sessions"],
        summary="Answer the pending event",
    )
    async def resume_session(
        session_id: str,
        request: ResumeRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        """Send one input; runs the game to its next event or to the end."""
        return respond(api_service.resume(session_id, request))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="Cancel a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """Cancel a session and release everything its routine holds."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    return app
