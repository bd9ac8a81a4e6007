"""Shared fixtures for the registration API tests."""
import os
from unittest.mock import patch

import pytest


def _ensure_test_env() -> None:
    """Keep tests off the real database, log file and relay."""
    os.environ.setdefault("DATABASE_URL", "sqlite://")
    os.environ.setdefault("LOG_FILE", "")
    os.environ.setdefault("ENVIRONMENT", "test")


_ensure_test_env()

from idea2impact.core.config import Settings  # noqa: E402
from idea2impact.services.notification import NotificationSender  # noqa: E402
from idea2impact.services.registration_store import RegistrationStore  # noqa: E402


@pytest.fixture
def store():
    """Empty in-memory registration store."""
    store = RegistrationStore.from_url("sqlite://")
    store.init_schema()
    yield store
    store.dispose()


@pytest.fixture
def broken_store():
    """Store whose table was never created, so every write fails."""
    store = RegistrationStore.from_url("sqlite://")
    yield store
    store.dispose()


@pytest.fixture
def test_settings():
    return Settings(
        ENVIRONMENT="development",
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=587,
        SMTP_USER="bot@idea2impact.dev",
        SMTP_PASS="app-password",
        SENDER_EMAIL="team@idea2impact.dev",
        NOTIFY_RECIPIENT=None,
    )


@pytest.fixture
def sender(test_settings):
    return NotificationSender(test_settings)


@pytest.fixture
def mock_smtp():
    """Patch smtplib.SMTP; the yielded mock is the class, `.return_value` the connection."""
    with patch("idea2impact.services.notification.smtplib.SMTP") as smtp_cls:
        smtp = smtp_cls.return_value
        smtp.__enter__.return_value = smtp
        smtp.send_message.return_value = {}
        yield smtp_cls


@pytest.fixture
def valid_payload():
    return {
        "name": "Asha",
        "email": "ASHA@X.COM",
        "phone": "9999999999",
        "college": "ABC",
        "year": "2",
        "department": "CS",
        "teamSize": "2",
    }


@pytest.fixture
def full_payload(valid_payload):
    return {
        **valid_payload,
        "experience": "Built a campus events app",
        "skills": "Python, React",
        "motivation": "Ship something real in 24 hours",
    }
