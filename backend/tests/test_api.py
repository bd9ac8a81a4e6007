"""HTTP tests for the registration API."""
import smtplib

import pytest
from fastapi.testclient import TestClient

from idea2impact.api.deps import get_sender, get_settings, get_store
from idea2impact.core.config import Settings
from idea2impact.main import app


@pytest.fixture
def client(store, sender, test_settings):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_sender] = lambda: sender
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestSendRegistration:
    def test_success(self, client, store, valid_payload, mock_smtp):
        response = client.post("/send-registration", json=valid_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful"
        assert body["id"]
        assert body["data"]["registrationId"] == body["id"]
        assert body["data"]["emailMessageId"]

        stored = store.get(body["id"])
        assert stored.email == "asha@x.com"
        assert stored.created_at is not None
        mock_smtp.return_value.send_message.assert_called_once()

    def test_optional_fields_are_stored(self, client, store, full_payload, mock_smtp):
        response = client.post("/send-registration", json=full_payload)

        stored = store.get(response.json()["id"])
        assert stored.skills == "Python, React"

    def test_missing_phone_is_rejected_before_persistence(self, client, store, valid_payload, mock_smtp):
        del valid_payload["phone"]

        response = client.post("/send-registration", json=valid_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "ValidationError"
        assert body["fields"] == ["phone"]
        assert store.count() == 0
        mock_smtp.assert_not_called()

    def test_non_object_body(self, client, store, mock_smtp):
        response = client.post("/send-registration", json=["Asha"])

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert store.count() == 0

    def test_duplicate_submissions_get_distinct_ids(self, client, store, valid_payload, mock_smtp):
        first = client.post("/send-registration", json=valid_payload).json()
        second = client.post("/send-registration", json=valid_payload).json()

        assert first["id"] != second["id"]
        assert store.count() == 2

    def test_store_failure(self, client, broken_store, valid_payload, mock_smtp):
        app.dependency_overrides[get_store] = lambda: broken_store

        response = client.post("/send-registration", json=valid_payload)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "PersistenceError"
        assert "id" not in body
        mock_smtp.assert_not_called()

    def test_delivery_failure_keeps_record(self, client, store, valid_payload, mock_smtp):
        mock_smtp.return_value.send_message.side_effect = smtplib.SMTPServerDisconnected("gone")

        response = client.post("/send-registration", json=valid_payload)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "ConnectionError"
        assert body["id"]
        assert body["data"]["registrationId"] == body["id"]
        assert store.get(body["id"]) is not None

    def test_rejected_credentials(self, client, valid_payload, mock_smtp):
        mock_smtp.return_value.login.side_effect = smtplib.SMTPAuthenticationError(535, b"no")

        body = client.post("/send-registration", json=valid_payload).json()

        assert body["error"] == "AuthenticationError"
        assert "credentials" in body["message"]

    def test_details_shown_outside_production(self, client, valid_payload, mock_smtp):
        mock_smtp.return_value.send_message.side_effect = smtplib.SMTPServerDisconnected("relay went away")

        body = client.post("/send-registration", json=valid_payload).json()

        assert body["details"] == "relay went away"

    def test_details_hidden_in_production(self, client, valid_payload, mock_smtp):
        app.dependency_overrides[get_settings] = lambda: Settings(ENVIRONMENT="production", DEBUG=False)
        mock_smtp.return_value.send_message.side_effect = smtplib.SMTPServerDisconnected("relay went away")

        body = client.post("/send-registration", json=valid_payload).json()

        assert body["success"] is False
        assert "details" not in body


class TestHealth:
    def test_connected(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["database"] == "connected"
        assert body["uptime"] >= 0

    def test_disconnected(self, client, tmp_path):
        from idea2impact.services.registration_store import RegistrationStore

        unreachable = RegistrationStore.from_url(f"sqlite:///{tmp_path / 'missing' / 'x.db'}")
        app.dependency_overrides[get_store] = lambda: unreachable

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestTestEmail:
    def test_verified(self, client, mock_smtp):
        response = client.get("/test-email")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["config"]["host"] == "smtp.example.com"
        mock_smtp.return_value.send_message.assert_not_called()

    def test_unreachable(self, client, mock_smtp):
        mock_smtp.side_effect = ConnectionRefusedError("refused")

        response = client.get("/test-email")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "ConnectionError"


class TestApp:
    def test_root(self, client):
        body = client.get("/").json()

        assert body["status"] == "operational"
        assert body["endpoints"]["register"] == "/send-registration"

    def test_cors_allows_known_origin(self, client):
        response = client.options(
            "/send-registration",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_cors_ignores_unknown_origin(self, client):
        response = client.options(
            "/send-registration",
            headers={
                "Origin": "https://evil.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert "access-control-allow-origin" not in response.headers
