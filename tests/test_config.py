"""Tests for configuration loading."""

import os
import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import REQUIRED_ENV
from config import load_config
from reminders.errors import ConfigError


@pytest.fixture
def full_env(clean_env):
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    return clean_env


def test_defaults(full_env):
    config = load_config()

    assert config.api_root == REQUIRED_ENV["REMINDERS_API_ROOT"]
    assert config.email_reply_to == "clinic@example.com"
    assert config.email_body == "Hi %FIRST_NAME%,\nSee you %APPOINTMENT_DATETIME%."
    assert config.smtp_port == 587
    assert config.smtp_starttls is True
    assert config.check_interval == timedelta(hours=1)
    assert config.reminder_window == timedelta(days=3)
    assert config.state_file == Path("notified_appointments.txt")
    assert str(config.display_timezone) == "UTC"
    assert config.log_dir is None


def test_overrides(full_env):
    full_env.setenv("REMINDERS_EMAIL_REPLY_TO", "desk@example.com")
    full_env.setenv("REMINDERS_SMTP_PORT", "2525")
    full_env.setenv("REMINDERS_SMTP_STARTTLS", "no")
    full_env.setenv("REMINDERS_CHECK_INTERVAL_MINUTES", "15")
    full_env.setenv("REMINDERS_WINDOW_DAYS", "2")
    full_env.setenv("REMINDERS_DISPLAY_TIMEZONE", "Europe/London")
    full_env.setenv("REMINDERS_STATE_FILE", "/var/lib/reminders/state.txt")

    config = load_config()

    assert config.email_reply_to == "desk@example.com"
    assert config.smtp_port == 2525
    assert config.smtp_starttls is False
    assert config.check_interval == timedelta(minutes=15)
    assert config.reminder_window == timedelta(days=2)
    assert str(config.display_timezone) == "Europe/London"
    assert config.state_file == Path("/var/lib/reminders/state.txt")


def test_missing_vars_listed_together(clean_env):
    clean_env.setenv("REMINDERS_API_ROOT", "https://booking.example.com/")

    with pytest.raises(ConfigError) as exc_info:
        load_config()

    message = str(exc_info.value)
    assert "REMINDERS_API_KEY" in message
    assert "REMINDERS_SMTP_PASS" in message
    assert "REMINDERS_EMAIL_BODY" in message
    assert "REMINDERS_API_ROOT" not in message


def test_body_from_file(full_env, tmp_path):
    body_file = tmp_path / "body.txt"
    body_file.write_text("Dear %FIRST_NAME%\nline two\n", encoding="utf-8")
    full_env.delenv("REMINDERS_EMAIL_BODY")
    full_env.setenv("REMINDERS_EMAIL_BODY_FILE", str(body_file))

    assert load_config().email_body == "Dear %FIRST_NAME%\nline two\n"


def test_unreadable_body_file(full_env, tmp_path):
    full_env.delenv("REMINDERS_EMAIL_BODY")
    full_env.setenv("REMINDERS_EMAIL_BODY_FILE", str(tmp_path / "missing.txt"))

    with pytest.raises(ConfigError):
        load_config()


@pytest.mark.parametrize("name,value", [
    ("REMINDERS_SMTP_PORT", "smtp"),
    ("REMINDERS_CHECK_INTERVAL_MINUTES", "0"),
    ("REMINDERS_WINDOW_DAYS", "-1"),
    ("REMINDERS_SMTP_STARTTLS", "maybe"),
    ("REMINDERS_DISPLAY_TIMEZONE", "Mars/Olympus_Mons"),
])
def test_invalid_values(full_env, name, value):
    full_env.setenv(name, value)

    with pytest.raises(ConfigError):
        load_config()


def test_explicit_env_file(clean_env, tmp_path):
    env_file = tmp_path / "reminders.env"
    env_file.write_text("\n".join(f"{k}={v}" for k, v in REQUIRED_ENV.items()) + "\n")
    # load_dotenv writes into os.environ and never overrides existing vars;
    # register each name with monkeypatch (unset) so it is removed afterwards
    for name in REQUIRED_ENV:
        clean_env.setenv(name, "placeholder")
        clean_env.delenv(name)

    config = load_config(env_file)

    assert config.smtp_host == "smtp.example.com"
    assert config.api_key == "secret-key"


def test_missing_env_file(clean_env, tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.env")


def test_repr_hides_secrets(full_env):
    text = repr(load_config())
    assert "secret-key" not in text
    assert "hunter2" not in text
