"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reminders.state_store import StateStore

# Monday 19 Oct 2026, noon UTC
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

CUSTOMERS = [
    {"id": 7, "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"},
    {"id": 8, "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com"},
]


def appointment_record(appt_id: int, start: str, customer_id: int = 7) -> dict:
    """An appointment as the API returns it."""
    return {"id": appt_id, "start": start, "end": start, "customerId": customer_id}


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "notified_appointments.txt"


@pytest.fixture
def store(state_file):
    return StateStore(state_file)


@pytest.fixture
def mock_api():
    """Scheduling API client returning no appointments and two customers."""
    api = Mock()
    api.fetch_appointments = AsyncMock(return_value=[])
    api.fetch_customers = AsyncMock(return_value=list(CUSTOMERS))
    return api


@pytest.fixture
def mock_mailer():
    """Mailer whose sends always succeed."""
    mailer = Mock()
    mailer.send_reminder = AsyncMock(return_value=None)
    return mailer


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No REMINDERS_* variables and no stray .env in the working directory."""
    for name in list(os.environ):
        if name.startswith("REMINDERS_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


# Minimal complete REMINDERS_* environment
REQUIRED_ENV = {
    "REMINDERS_API_ROOT": "https://booking.example.com/index.php/api/v1/",
    "REMINDERS_API_KEY": "secret-key",
    "REMINDERS_SMTP_HOST": "smtp.example.com",
    "REMINDERS_SMTP_USER": "mailer",
    "REMINDERS_SMTP_PASS": "hunter2",
    "REMINDERS_EMAIL_FROM": "clinic@example.com",
    "REMINDERS_EMAIL_SUBJECT": "Appointment reminder",
    "REMINDERS_EMAIL_BODY": "Hi %FIRST_NAME%,\\nSee you %APPOINTMENT_DATETIME%.",
}
