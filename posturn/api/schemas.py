"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Events, inputs and outcomes are game-specific; each game in the registry
encodes them to plain JSON objects, so the envelopes here stay generic.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or was ended
- UNKNOWN_GAME: No game registered under that name
- ALREADY_COMPLETED: resume called after the game finished
- NOT_SUSPENDED: Session is not waiting for input (cancelled or failed)
- INVALID_INPUT: Input payload does not match the game's input model
- TOO_MANY_SESSIONS: Session limit reached
- INTERNAL_ERROR: The game routine raised an exception
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    WAITING_INPUT = "waiting_input"
    COMPLETED = "completed"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_GAME = "UNKNOWN_GAME"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    NOT_SUSPENDED = "NOT_SUSPENDED"
    INVALID_INPUT = "INVALID_INPUT"
    TOO_MANY_SESSIONS = "TOO_MANY_SESSIONS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class GameInfo(BaseModel):
    """A game that sessions can be created for."""
    name: str
    title: str
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=dict, description="JSON schema of the resume input"
    )


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game session."""
    game: str = Field(..., description="Registered game name, e.g. tictactoe")


class ResumeRequest(BaseModel):
    """The player's answer to the pending event."""
    input: dict[str, Any] = Field(
        default_factory=dict, description="Game-specific input payload"
    )


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
    """Where a session currently stands."""
    session_id: str
    game: str
    status: SessionStatus
    turns: int = Field(0, description="Events emitted so far")
    event: Optional[dict[str, Any]] = Field(
        None, description="Pending event while waiting for input"
    )
    outcome: Optional[dict[str, Any]] = Field(
        None, description="Final outcome once completed"
    )
    api_version: str = Field("v1", description="API version")


class GameListResponse(BaseModel):
    """Registered games."""
    games: list[GameInfo]
    count: int


class SessionListResponse(BaseModel):
    """List of session IDs."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response from ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    active_sessions: int = 0
