"""
API Module - HTTP driver for game sessions.

Exposes the bundled games over REST. A client:
1. Lists games and starts a session
2. Renders each pending event and posts the player's input
3. Reads the outcome once the session completes
4. Deletes sessions it abandons

Sessions live in memory only and are released when ended.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    ResumeRequest,
    # Responses
    SessionResponse,
    GameListResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    GameInfo,
    ErrorCode,
    SessionStatus,
)
from .registry import GameDefinition, GAMES
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "ResumeRequest",
    # Responses
    "SessionResponse",
    "GameListResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "GameInfo",
    "ErrorCode",
    "SessionStatus",
    # Registry
    "GameDefinition",
    "GAMES",
    # Service
    "APIService",
    "create_app",
]
