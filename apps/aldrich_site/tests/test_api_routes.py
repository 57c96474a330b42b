"""
HTTP-level tests for the member API routes.

Without DATABASE_URL the app serves fallback content, so read endpoints are
tested as-is. Endpoints that need the backend override the session and
signed-in user dependencies and patch the service layer.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from aldrich_site.api.auth_dependencies import SessionContext, get_session_context
from aldrich_site.api.main import app
from aldrich_site.database.db import get_db_session
from aldrich_site.services import auth_service
from aldrich_site.services.registration_service import RegistrationUploadError

SIGNED_IN = SessionContext(user_id=1, email="alex@example.com", session_id="sess-1")

EVENT = {
    "id": 5,
    "title": "Summer Cup",
    "start_date": "2024-07-04",
    "date_label": "Jul 4",
    "primary_date": "Jul 4",
    "status": "scheduled",
    "status_label": "Scheduled",
    "status_tone": "green",
}


@pytest.fixture
def client():
    """TestClient with no backend configured."""
    return TestClient(app)


def _use_backend(context=None):
    """Pretend the backend is configured, with `context` as the signed-in user."""

    async def fake_session():
        yield MagicMock()

    async def fake_context():
        return context

    app.dependency_overrides[get_db_session] = fake_session
    app.dependency_overrides[get_session_context] = fake_context


@pytest.fixture
def member_client():
    """TestClient with a backend and a signed-in member."""
    _use_backend(SIGNED_IN)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """TestClient with a backend and nobody signed in."""
    _use_backend(None)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["backend_configured"] is False


# ============================================================================
# Fallback mode (no backend)
# ============================================================================


class TestFallbackMode:
    """Read pages still work when the backend is unavailable."""

    def test_events(self, client):
        response = client.get("/api/events")
        assert response.status_code == 200
        data = response.json()
        assert data["is_fallback"] is True
        assert [e["id"] for e in data["events"]] == [1, 2, 3]

    def test_friends(self, client):
        response = client.get("/api/friends")
        assert response.status_code == 200
        assert response.json()["is_fallback"] is True
        assert len(response.json()["friends"]) == 3

    def test_account_profile(self, client):
        response = client.get("/api/account/profile")
        assert response.status_code == 200
        assert response.json()["name"] == "Alex Johnson"

    def test_account_teams(self, client):
        response = client.get("/api/account/teams")
        assert response.status_code == 200
        assert response.json()["is_fallback"] is True

    def test_session_is_anonymous(self, client):
        response = client.get("/api/auth/session")
        assert response.status_code == 200
        assert response.json()["signed_in"] is False

    def test_event_signup_unavailable(self, client):
        response = client.post("/api/events/1/signup")
        assert response.status_code == 503

    def test_account_signup_unavailable(self, client):
        payload = {"email": "alex@example.com", "password": "secret123", "name": "Alex"}
        response = client.post("/api/auth/signup", json=payload)
        assert response.status_code == 503

    def test_friend_request_needs_sign_in(self, client):
        response = client.post("/api/friends/requests", json={"receiver_id": 2})
        assert response.status_code == 401
        assert response.json()["redirect_to"] == "/account"


# ============================================================================
# Sign-in redirects
# ============================================================================


class TestSignInRequired:
    """Member actions without a session return 401 with the sign-in path."""

    def test_event_signup(self, anonymous_client):
        response = anonymous_client.post("/api/events/1/signup")
        assert response.status_code == 401
        assert response.json() == {
            "detail": "Sign in to join events and track them in My Events.",
            "redirect_to": "/account",
        }

    def test_registration_submit(self, anonymous_client):
        response = anonymous_client.post("/api/registration/summer-soccer", data={"a": "b"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Sign in to register."

    def test_friends_page(self, anonymous_client):
        response = anonymous_client.get("/api/friends")
        assert response.status_code == 401
        assert response.json()["redirect_to"] == "/account"

    def test_profile_edit(self, anonymous_client):
        response = anonymous_client.patch("/api/account/profile", json={"about": "hi"})
        assert response.status_code == 401


# ============================================================================
# Auth
# ============================================================================


@patch("aldrich_site.services.user_service.authenticate_user", new_callable=AsyncMock)
def test_signin_invalid_credentials(mock_auth, anonymous_client):
    mock_auth.return_value = None
    response = anonymous_client.post(
        "/api/auth/signin", json={"email": "alex@example.com", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Email or password is incorrect"


@patch("aldrich_site.services.user_service.create_auth_session", new_callable=AsyncMock)
@patch("aldrich_site.services.profile_service.upsert_profile", new_callable=AsyncMock)
@patch("aldrich_site.services.user_service.create_user", new_callable=AsyncMock)
def test_signup_creates_profile_and_session(mock_create, mock_upsert, mock_session, anonymous_client):
    mock_create.return_value = MagicMock(id=9)
    mock_session.return_value = {
        "access_token": "token",
        "token_type": "bearer",
        "expires_at": "2030-01-01T00:00:00+00:00",
        "user_id": 9,
    }

    response = anonymous_client.post(
        "/api/auth/signup",
        json={"email": "alex@example.com", "password": "secret123", "name": " Alex ",
              "positions": "Forward, Wing"},
    )

    assert response.status_code == 200
    assert response.json()["user_id"] == 9
    fields = mock_upsert.call_args.args[2]
    assert fields["name"] == "Alex"
    assert fields["positions"] == "Forward, Wing"


@patch("aldrich_site.services.user_service.create_user", new_callable=AsyncMock)
def test_signup_duplicate_email(mock_create, anonymous_client):
    mock_create.side_effect = ValueError("An account with this email already exists")
    response = anonymous_client.post(
        "/api/auth/signup",
        json={"email": "alex@example.com", "password": "secret123", "name": "Alex"},
    )
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_signup_blank_name_is_422(anonymous_client):
    response = anonymous_client.post(
        "/api/auth/signup",
        json={"email": "alex@example.com", "password": "secret123", "name": "  "},
    )
    assert response.status_code == 422


# ============================================================================
# Events
# ============================================================================


@patch("aldrich_site.services.event_service.sign_up_for_event", new_callable=AsyncMock)
def test_event_signup_success(mock_signup, member_client):
    mock_signup.return_value = {"event_id": 5, "signed_up": True, "message": "Added to My Events."}

    response = member_client.post("/api/events/5/signup")

    assert response.status_code == 200
    assert response.json()["message"] == "Added to My Events."
    mock_signup.assert_awaited_once()
    assert mock_signup.call_args.args[1:] == (5, 1)


@patch("aldrich_site.services.event_service.sign_up_for_event", new_callable=AsyncMock)
def test_event_signup_failure_is_500(mock_signup, member_client):
    mock_signup.side_effect = RuntimeError("connection reset")

    response = member_client.post("/api/events/5/signup")

    assert response.status_code == 500
    assert response.json()["detail"] == "Could not save your sign-up. Please try again."


@patch("aldrich_site.services.event_service.sign_up_for_event", new_callable=AsyncMock)
def test_event_signup_unknown_event(mock_signup, member_client):
    mock_signup.side_effect = ValueError("Event not found")
    response = member_client.post("/api/events/404/signup")
    assert response.status_code == 400


@patch("aldrich_site.services.event_service.get_event", new_callable=AsyncMock)
def test_get_event_not_found(mock_get, client):
    mock_get.return_value = None
    response = client.get("/api/events/99")
    assert response.status_code == 404


@patch("aldrich_site.services.event_service.get_user_events", new_callable=AsyncMock)
def test_my_events(mock_events, member_client):
    mock_events.return_value = [{**EVENT, "signed_up": True}]

    response = member_client.get("/api/account/events")

    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [5]


# ============================================================================
# Friends
# ============================================================================


@patch("aldrich_site.services.friend_service.send_friend_request", new_callable=AsyncMock)
def test_duplicate_friend_request_is_not_an_error(mock_send, member_client):
    mock_send.return_value = {
        "created": False,
        "message": "Friend request already sent",
        "request": None,
    }

    response = member_client.post("/api/friends/requests", json={"receiver_id": 2})

    assert response.status_code == 200
    assert response.json()["created"] is False


@patch("aldrich_site.services.friend_service.send_friend_request", new_callable=AsyncMock)
def test_friend_request_to_self(mock_send, member_client):
    mock_send.side_effect = ValueError("You can't send a friend request to yourself")
    response = member_client.post("/api/friends/requests", json={"receiver_id": 1})
    assert response.status_code == 400


def test_respond_rejects_unknown_status(member_client):
    response = member_client.post("/api/friends/requests/3/respond", json={"status": "maybe"})
    assert response.status_code == 422


@patch("aldrich_site.services.friend_service.search_profiles", new_callable=AsyncMock)
def test_search_profiles(mock_search, member_client):
    mock_search.return_value = [{"id": 4, "name": "Jordan Lee", "sports": ["Soccer"]}]

    response = member_client.get("/api/friends/search?q=jor")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Jordan Lee"
    assert mock_search.call_args.args[1:] == (1, "jor")


# ============================================================================
# Profiles and teams
# ============================================================================


@patch("aldrich_site.services.profile_service.get_public_profile", new_callable=AsyncMock)
def test_public_profile_not_found(mock_get, member_client):
    mock_get.return_value = None
    response = member_client.get("/api/profiles/77")
    assert response.status_code == 404


def test_public_profile_fallback(client):
    response = client.get("/api/profiles/12")
    assert response.status_code == 200
    assert response.json()["is_fallback"] is True


@patch("aldrich_site.services.profile_service.update_profile", new_callable=AsyncMock)
def test_update_profile_validation_error(mock_update, member_client):
    mock_update.side_effect = ValueError("Skill level must be between 1 and 10")
    response = member_client.patch("/api/account/profile", json={"skill_level": 14})
    assert response.status_code == 400
    assert mock_update.call_args.args[3] == {"skill_level": 14}


@patch("aldrich_site.services.team_service.add_team", new_callable=AsyncMock)
def test_add_team(mock_add, member_client):
    mock_add.return_value = {"id": 3, "team_name": "Laurel FC", "role": "Captain", "logo_url": None}
    response = member_client.post("/api/account/teams", json={"team_name": "Laurel FC",
                                                               "role": "Captain"})
    assert response.status_code == 200
    assert response.json()["team_name"] == "Laurel FC"


# ============================================================================
# Registration
# ============================================================================


@patch("aldrich_site.services.registration_service.load_program", new_callable=AsyncMock)
def test_registration_form_not_found(mock_load, member_client):
    mock_load.return_value = None
    response = member_client.get("/api/registration/unknown")
    assert response.status_code == 404
    assert response.json()["detail"] == "Registration not available for this event."


@patch("aldrich_site.services.registration_service.load_program", new_callable=AsyncMock)
def test_registration_form_load_failure(mock_load, member_client):
    mock_load.side_effect = RuntimeError("boom")
    response = member_client.get("/api/registration/summer-soccer")
    assert response.status_code == 500
    assert response.json()["detail"] == "Unable to load fields for this registration."


@patch("aldrich_site.services.registration_service.load_program", new_callable=AsyncMock)
def test_registration_form_renders_controls(mock_load, member_client):
    mock_load.return_value = {
        "program": {"slug": "summer-soccer", "name": "Summer Soccer", "waiver_url": None},
        "fields": [{"id": 1, "label": "Team name", "name": "team_name", "type": "text",
                    "required": True}],
    }

    response = member_client.get("/api/registration/summer-soccer")

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Summer Soccer"
    assert data["controls"][0]["id"] == "field-1"


def test_registration_form_without_backend(client):
    response = client.get("/api/registration/summer-soccer")
    assert response.status_code == 503


@patch("aldrich_site.services.registration_service.submit_registration", new_callable=AsyncMock)
def test_registration_submit_multipart(mock_submit, member_client):
    mock_submit.return_value = {
        "id": 1,
        "program_slug": "summer-soccer",
        "answers": {"team_name": "Laurel FC", "roster": "k1"},
        "attachments": ["k1"],
        "message": "Registration submitted!",
    }

    response = member_client.post(
        "/api/registration/summer-soccer",
        data={"team_name": "Laurel FC", "waiver_accepted": "on"},
        files=[("roster", ("roster.pdf", b"pdf-bytes", "application/pdf"))],
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Registration submitted!"
    session, slug, user_id, values, files = mock_submit.call_args.args
    assert (slug, user_id) == ("summer-soccer", 1)
    assert values == {"team_name": "Laurel FC", "waiver_accepted": "on"}
    assert list(files) == ["roster"]
    assert files["roster"][0].filename == "roster.pdf"
    assert files["roster"][0].content == b"pdf-bytes"


@patch("aldrich_site.services.registration_service.submit_registration", new_callable=AsyncMock)
def test_registration_submit_missing_field(mock_submit, member_client):
    mock_submit.side_effect = ValueError("Team name is required.")
    response = member_client.post("/api/registration/summer-soccer", data={"team_name": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "Team name is required."


@patch("aldrich_site.services.registration_service.submit_registration", new_callable=AsyncMock)
def test_registration_upload_failure(mock_submit, member_client):
    mock_submit.side_effect = RegistrationUploadError("Upload failed: roster.pdf")
    response = member_client.post("/api/registration/summer-soccer", data={"team_name": "x"})
    assert response.status_code == 502


# ============================================================================
# Backend failures
# ============================================================================


@pytest.fixture
def failing_backend_client(broken_session):
    """TestClient whose database session fails every query."""

    async def fake_session():
        yield broken_session

    app.dependency_overrides[get_db_session] = fake_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _bearer():
    token = auth_service.create_access_token({"user_id": 1, "session_id": "sess-1"})
    return {"Authorization": f"Bearer {token}"}


def test_signed_in_reads_fall_back_when_backend_fails(failing_backend_client):
    response = failing_backend_client.get("/api/events", headers=_bearer())
    assert response.status_code == 200
    assert response.json()["is_fallback"] is True

    response = failing_backend_client.get("/api/events/1", headers=_bearer())
    assert response.status_code == 200
    assert response.json()["title"] == "3v3 Basketball Tournament"


def test_signed_in_write_asks_for_sign_in_when_backend_fails(failing_backend_client):
    response = failing_backend_client.post("/api/events/1/signup", headers=_bearer())
    assert response.status_code == 401
    assert response.json()["redirect_to"] == "/account"
