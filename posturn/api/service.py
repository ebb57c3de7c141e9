"""
API Service - Business logic layer between the HTTP app and sessions.

The service:
1. Starts sessions for registered games
2. Keeps them by ID until they are ended, or until a finished session
   must make room for a new one
3. Translates JSON inputs to routine inputs and events/outcomes back
4. Maps protocol errors to structured error responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Each call drives at most one session, synchronously.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any

from pydantic import ValidationError

from .registry import GAMES, GameDefinition
from .schemas import (
    ErrorCode,
    ErrorResponse,
    GameInfo,
    GameListResponse,
    ResumeRequest,
    CreateSessionRequest,
    SessionResponse,
    SessionStatus,
)
from ..errors import AlreadyCompleted, NotSuspended
from ..session import Done, PendingEvent, Session, TERMINAL_STATES

logger = logging.getLogger(__name__)


@dataclass
class HostedSession:
    """A live session and the game it plays."""
    session: Session
    game: GameDefinition


@dataclass
class APIService:
    """
    Hosts sessions for the HTTP driver.

    Usage:
        service = APIService()

        response = service.create_session(CreateSessionRequest(game="tictactoe"))
        response = service.resume(response.session_id, ResumeRequest(input={"col": 1, "row": 1}))
    """
    games: dict[str, GameDefinition] = field(default_factory=lambda: dict(GAMES))
    max_sessions: int = 100

    _sessions: dict[str, HostedSession] = field(default_factory=dict)

    def list_games(self) -> GameListResponse:
        games = [
            GameInfo(
                name=game.name,
                title=game.title,
                description=game.description,
                input_schema=game.input_model.model_json_schema(),
            )
            for game in self.games.values()
        ]
        return GameListResponse(games=games, count=len(games))

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Start a new session, run to its first event."""
        game = self.games.get(request.game)
        if not game:
            return ErrorResponse(
                error=f"Unknown game: {request.game}",
                error_code=ErrorCode.UNKNOWN_GAME,
                details={"available": sorted(self.games)},
            )

        if len(self._sessions) >= self.max_sessions:
            self._evict_finished()
        if len(self._sessions) >= self.max_sessions:
            return ErrorResponse(
                error=f"Session limit reached ({self.max_sessions})",
                error_code=ErrorCode.TOO_MANY_SESSIONS,
            )

        try:
            session = game.start()
        except Exception as e:
            logger.exception("Failed to start %s session", game.name)
            return ErrorResponse(
                error=f"Game failed to start: {e}",
                error_code=ErrorCode.INTERNAL_ERROR,
            )
        self._sessions[session.session_id] = HostedSession(session=session, game=game)
        logger.info("Started %s session %s", game.name, session.session_id)
        return self._to_response(session.session_id)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        if session_id not in self._sessions:
            return self._not_found(session_id)
        return self._to_response(session_id)

    def resume(self, session_id: str, request: ResumeRequest) -> SessionResponse | ErrorResponse:
        """Answer the pending event of a session."""
        hosted = self._sessions.get(session_id)
        if not hosted:
            return self._not_found(session_id)

        try:
            value = hosted.game.parse_input(request.input)
        except ValidationError as e:
            return ErrorResponse(
                error="Input does not match the game's input model",
                error_code=ErrorCode.INVALID_INPUT,
                details={
                    "errors": [
                        {"loc": [str(p) for p in err["loc"]], "msg": err["msg"]}
                        for err in e.errors()
                    ]
                },
            )
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_INPUT)

        try:
            hosted.session.resume(value)
        except AlreadyCompleted as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.ALREADY_COMPLETED)
        except NotSuspended as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.NOT_SUSPENDED,
                details={"state": e.state.value},
            )
        except Exception as e:
            logger.exception("Session %s failed", session_id)
            return ErrorResponse(
                error=f"Game raised an error: {e}",
                error_code=ErrorCode.INTERNAL_ERROR,
                details={"state": hosted.session.state.value},
            )

        return self._to_response(session_id)

    def end_session(self, session_id: str) -> bool:
        """
        Cancel a session and forget it.

        Any cleanup the routine still owes runs before this returns.
        """
        hosted = self._sessions.pop(session_id, None)
        if not hosted:
            return False
        hosted.session.cancel()
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def _evict_finished(self) -> int:
        """Forget sessions that can no longer be resumed. Returns the count."""
        finished = [
            session_id
            for session_id, hosted in self._sessions.items()
            if hosted.session.state in TERMINAL_STATES
        ]
        for session_id in finished:
            del self._sessions[session_id]
        if finished:
            logger.info("Evicted %d finished session(s)", len(finished))
        return len(finished)

    def shutdown(self) -> None:
        """End every hosted session."""
        for session_id in list(self._sessions):
            self.end_session(session_id)

    def _to_response(self, session_id: str) -> SessionResponse | ErrorResponse:
        hosted = self._sessions[session_id]
        session = hosted.session

        try:
            step = session.current()
        except NotSuspended as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.NOT_SUSPENDED,
                details={"state": e.state.value},
            )

        event: dict[str, Any] | None = None
        outcome: dict[str, Any] | None = None
        if isinstance(step, PendingEvent):
            status = SessionStatus.WAITING_INPUT
            event = hosted.game.encode_event(step.event)
        else:
            assert isinstance(step, Done)
            status = SessionStatus.COMPLETED
            outcome = hosted.game.encode_outcome(step.outcome)

        return SessionResponse(
            session_id=session_id,
            game=hosted.game.name,
            status=status,
            turns=session.turns,
            event=event,
            outcome=outcome,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
        )
