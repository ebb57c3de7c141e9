"""
Tests for API layer.

Tests:
- API service methods
- Session lifecycle via API
- Error handling
- HTTP endpoints through the FastAPI test client
"""

import pytest

from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    ResumeRequest,
    SessionStatus,
)
from ..api.registry import ChoiceInput, GameDefinition
from ..api.service import APIService
from ..api.app import create_app
from ..session import Session, SessionState


def faulty_round():
    yield "choose"
    raise RuntimeError("dealer dropped the cards")


FAULTY = GameDefinition(
    name="faulty",
    title="Faulty",
    start=lambda: Session(faulty_round),
    input_model=ChoiceInput,
    to_input=lambda model: model.choice,
    encode_event=lambda event: {"type": event},
    encode_outcome=lambda outcome: {},
)


def _start(service, game="roshambo"):
    return service.create_session(CreateSessionRequest(game=game))


def _resume(service, session_id, **payload):
    return service.resume(session_id, ResumeRequest(input=payload))


class TestAPIService:
    """Tests for APIService."""

    def test_list_games(self, service):
        response = service.list_games()

        assert response.count == 2
        names = {game.name for game in response.games}
        assert names == {"roshambo", "tictactoe"}
        for game in response.games:
            assert "properties" in game.input_schema

    def test_create_tictactoe_session(self, service):
        """A new session already carries its first event."""
        response = _start(service, "tictactoe")

        assert response.status == SessionStatus.WAITING_INPUT
        assert response.game == "tictactoe"
        assert response.turns == 1
        assert response.event["type"] == "turn_prompt"
        assert response.event["player"] == "X"
        assert response.event["board"] == [[None] * 3] * 3
        assert response.outcome is None

    def test_create_unknown_game(self, service):
        response = _start(service, "chess")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.UNKNOWN_GAME
        assert response.details["available"] == ["roshambo", "tictactoe"]

    def test_play_round_to_completion(self, service):
        session_id = _start(service).session_id

        response = _resume(service, session_id, choice="rock")
        assert response.event == {"type": "choice_request", "player": "b"}

        response = _resume(service, session_id, choice="scissors")
        assert response.status == SessionStatus.COMPLETED
        assert response.outcome == {"winner": "a", "tie": False}
        assert response.event is None

    def test_get_session_is_stable(self, service):
        session_id = _start(service).session_id

        first = service.get_session(session_id)
        second = service.get_session(session_id)

        assert first == second
        assert first.event == {"type": "choice_request", "player": "a"}

    def test_resume_after_completion(self, service):
        session_id = _start(service).session_id
        _resume(service, session_id, choice="rock")
        _resume(service, session_id, choice="rock")

        response = _resume(service, session_id, choice="rock")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.ALREADY_COMPLETED
        assert service.get_session(session_id).outcome == {"winner": None, "tie": True}

    def test_invalid_input_leaves_session_waiting(self, service):
        session_id = _start(service).session_id

        response = _resume(service, session_id, choice="lizard")

        assert response.error_code == ErrorCode.INVALID_INPUT
        assert response.details["errors"][0]["loc"] == ["choice"]
        current = service.get_session(session_id)
        assert current.turns == 1
        assert current.event["player"] == "a"

    def test_out_of_range_move(self, service):
        session_id = _start(service, "tictactoe").session_id

        response = _resume(service, session_id, col=3, row=0)

        assert response.error_code == ErrorCode.INVALID_INPUT

    def test_unexpected_fields_rejected(self, service):
        session_id = _start(service, "tictactoe").session_id

        response = _resume(service, session_id, col=0, row=0, player="O")

        assert response.error_code == ErrorCode.INVALID_INPUT

    def test_taken_tile_is_an_event(self, service):
        session_id = _start(service, "tictactoe").session_id
        _resume(service, session_id, col=1, row=1)

        response = _resume(service, session_id, col=1, row=1)

        assert response.status == SessionStatus.WAITING_INPUT
        assert response.event["invalid_move"] is True
        assert response.event["player"] == "O"
        assert response.event["board"][1][1] == "X"

    def test_tictactoe_win(self, service):
        session_id = _start(service, "tictactoe").session_id
        for col, row in [(0, 0), (0, 1), (1, 0), (1, 1)]:
            _resume(service, session_id, col=col, row=row)

        response = _resume(service, session_id, col=2, row=0)

        assert response.status == SessionStatus.COMPLETED
        assert response.outcome == {
            "winner": "X",
            "line": {"kind": "row", "offset": 0},
            "cats_game": False,
        }

    def test_end_session(self, service):
        """Ending cancels the session and forgets it."""
        session_id = _start(service).session_id
        hosted = service._sessions[session_id]

        assert service.end_session(session_id)

        assert hosted.session.state == SessionState.CANCELLED
        response = service.get_session(session_id)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND
        assert not service.end_session(session_id)

    def test_resume_unknown_session(self, service):
        response = _resume(service, "nonexistent-id", choice="rock")

        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_session_limit(self):
        service = APIService(max_sessions=1)
        _start(service)

        response = _start(service)

        assert response.error_code == ErrorCode.TOO_MANY_SESSIONS

    def test_finished_sessions_make_room(self):
        """Completed games do not count against the limit once it is reached."""
        service = APIService(max_sessions=2)
        finished = []
        for _ in range(2):
            session_id = _start(service).session_id
            _resume(service, session_id, choice="rock")
            _resume(service, session_id, choice="paper")
            finished.append(session_id)

        response = _start(service)

        assert response.status == SessionStatus.WAITING_INPUT
        assert service.list_sessions() == [response.session_id]
        for session_id in finished:
            assert service.get_session(session_id).error_code == ErrorCode.SESSION_NOT_FOUND

    def test_finished_sessions_kept_below_limit(self, service):
        """Outcomes stay readable until room is needed."""
        session_id = _start(service).session_id
        _resume(service, session_id, choice="rock")
        _resume(service, session_id, choice="paper")
        _start(service)

        assert service.get_session(session_id).status == SessionStatus.COMPLETED

    def test_live_sessions_still_limited(self):
        service = APIService(max_sessions=2)
        finished = _start(service).session_id
        _resume(service, finished, choice="rock")
        _resume(service, finished, choice="rock")
        _start(service)
        _start(service)

        response = _start(service)

        assert response.error_code == ErrorCode.TOO_MANY_SESSIONS

    def test_routine_error_is_internal_error(self):
        service = APIService(games={"faulty": FAULTY})
        session_id = _start(service, "faulty").session_id

        response = _resume(service, session_id, choice="rock")

        assert response.error_code == ErrorCode.INTERNAL_ERROR
        assert "dealer dropped the cards" in response.error
        assert response.details == {"state": "failed"}
        assert service.get_session(session_id).error_code == ErrorCode.NOT_SUSPENDED

    def test_list_and_shutdown(self, service):
        ids = [_start(service).session_id for _ in range(3)]

        assert sorted(service.list_sessions()) == sorted(ids)

        service.shutdown()

        assert service.list_sessions() == []


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def client(self, service):
        from fastapi.testclient import TestClient

        with TestClient(create_app(service)) as client:
            yield client

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_games(self, client):
        response = client.get("/api/v1/games")

        assert response.status_code == 200
        assert response.json()["count"] == 2

    def test_full_round(self, client):
        response = client.post("/api/v1/sessions", json={"game": "roshambo"})
        assert response.status_code == 200
        session_id = response.json()["session_id"]

        client.post(f"/api/v1/sessions/{session_id}/resume", json={"input": {"choice": "paper"}})
        response = client.post(
            f"/api/v1/sessions/{session_id}/resume", json={"input": {"choice": "scissors"}}
        )

        data = response.json()
        assert data["status"] == "completed"
        assert data["outcome"] == {"winner": "b", "tie": False}

        response = client.post(
            f"/api/v1/sessions/{session_id}/resume", json={"input": {"choice": "rock"}}
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "ALREADY_COMPLETED"

    def test_unknown_session(self, client):
        response = client.get("/api/v1/sessions/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_unknown_game(self, client):
        response = client.post("/api/v1/sessions", json={"game": "chess"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "UNKNOWN_GAME"

    def test_invalid_input(self, client):
        session_id = client.post("/api/v1/sessions", json={"game": "tictactoe"}).json()["session_id"]

        response = client.post(
            f"/api/v1/sessions/{session_id}/resume", json={"input": {"col": "middle"}}
        )

        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_INPUT"

    def test_routine_error_status(self):
        from fastapi.testclient import TestClient

        with TestClient(create_app(APIService(games={"faulty": FAULTY}))) as client:
            session_id = client.post("/api/v1/sessions", json={"game": "faulty"}).json()["session_id"]

            response = client.post(
                f"/api/v1/sessions/{session_id}/resume", json={"input": {"choice": "rock"}}
            )

        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"

    def test_delete_session(self, client):
        session_id = client.post("/api/v1/sessions", json={"game": "tictactoe"}).json()["session_id"]

        response = client.delete(f"/api/v1/sessions/{session_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "session_id": session_id}
        assert client.get("/api/v1/sessions").json()["count"] == 0

    def test_shutdown_releases_sessions(self, service):
        from fastapi.testclient import TestClient

        with TestClient(create_app(service)) as client:
            client.post("/api/v1/sessions", json={"game": "tictactoe"})
            assert len(service.list_sessions()) == 1

        assert service.list_sessions() == []
