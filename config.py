"""Global configuration for the appointment reminders daemon.

Everything comes from REMINDERS_* environment variables, optionally
preloaded from a dotenv file.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from reminders.errors import ConfigError

# Defaults
DEFAULT_ENV_FILE = Path(".env")
DEFAULT_STATE_FILE = "notified_appointments.txt"
DEFAULT_SMTP_PORT = 587
DEFAULT_CHECK_INTERVAL_MINUTES = 60
DEFAULT_WINDOW_DAYS = 3
DEFAULT_HTTP_TIMEOUT = 30
DEFAULT_SMTP_TIMEOUT = 30

REQUIRED_VARS = [
    "REMINDERS_API_ROOT",
    "REMINDERS_API_KEY",
    "REMINDERS_SMTP_HOST",
    "REMINDERS_SMTP_USER",
    "REMINDERS_SMTP_PASS",
    "REMINDERS_EMAIL_FROM",
    "REMINDERS_EMAIL_SUBJECT",
]

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Scheduling API, SMTP server and email settings."""

    # Easy!Appointments API
    api_root: str
    api_key: str

    # SMTP
    smtp_host: str
    smtp_user: str
    smtp_pass: str

    # Email
    email_from: str
    email_reply_to: str
    email_subject: str
    email_body: str

    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_starttls: bool = True
    smtp_timeout: float = DEFAULT_SMTP_TIMEOUT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # Engine
    state_file: Path = Path(DEFAULT_STATE_FILE)
    check_interval: timedelta = timedelta(minutes=DEFAULT_CHECK_INTERVAL_MINUTES)
    reminder_window: timedelta = timedelta(days=DEFAULT_WINDOW_DAYS)
    display_timezone: ZoneInfo = ZoneInfo("UTC")

    # Logging
    log_dir: Path | None = None

    def __repr__(self) -> str:
        # Keep credentials out of debug logs
        return (
            f"Config(api_root={self.api_root!r}, smtp_host={self.smtp_host!r}, "
            f"smtp_port={self.smtp_port}, state_file={str(self.state_file)!r}, "
            f"check_interval={self.check_interval}, reminder_window={self.reminder_window})"
        )


def load_config(env_file: Path | str | None = None) -> Config:
    """Build the Config from the environment.

    Args:
        env_file: Dotenv file to load first. If None, ``.env`` in the
            working directory is loaded when present.

    Returns:
        The resolved Config

    Raises:
        ConfigError: If a required setting is missing or a value is invalid
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigError(f"Config file not found: {env_path}")
        load_dotenv(env_path)
    elif DEFAULT_ENV_FILE.exists():
        load_dotenv(DEFAULT_ENV_FILE)

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if not (os.getenv("REMINDERS_EMAIL_BODY") or os.getenv("REMINDERS_EMAIL_BODY_FILE")):
        missing.append("REMINDERS_EMAIL_BODY (or REMINDERS_EMAIL_BODY_FILE)")
    if missing:
        raise ConfigError(f"Missing env vars: {', '.join(missing)}")

    email_from = os.environ["REMINDERS_EMAIL_FROM"]
    log_dir = os.getenv("REMINDERS_LOG_DIR")

    return Config(
        api_root=os.environ["REMINDERS_API_ROOT"],
        api_key=os.environ["REMINDERS_API_KEY"],
        smtp_host=os.environ["REMINDERS_SMTP_HOST"],
        smtp_user=os.environ["REMINDERS_SMTP_USER"],
        smtp_pass=os.environ["REMINDERS_SMTP_PASS"],
        email_from=email_from,
        email_reply_to=os.getenv("REMINDERS_EMAIL_REPLY_TO") or email_from,
        email_subject=os.environ["REMINDERS_EMAIL_SUBJECT"],
        email_body=_email_body(),
        smtp_port=_positive_int("REMINDERS_SMTP_PORT", DEFAULT_SMTP_PORT),
        smtp_starttls=_bool("REMINDERS_SMTP_STARTTLS", True),
        smtp_timeout=_positive_int("REMINDERS_SMTP_TIMEOUT", DEFAULT_SMTP_TIMEOUT),
        http_timeout=_positive_int("REMINDERS_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        state_file=Path(os.getenv("REMINDERS_STATE_FILE") or DEFAULT_STATE_FILE),
        check_interval=timedelta(minutes=_positive_int(
            "REMINDERS_CHECK_INTERVAL_MINUTES", DEFAULT_CHECK_INTERVAL_MINUTES
        )),
        reminder_window=timedelta(days=_positive_int("REMINDERS_WINDOW_DAYS", DEFAULT_WINDOW_DAYS)),
        display_timezone=_timezone("REMINDERS_DISPLAY_TIMEZONE"),
        log_dir=Path(log_dir) if log_dir else None,
    )


def _email_body() -> str:
    """Inline body wins over a body file."""
    body = os.getenv("REMINDERS_EMAIL_BODY")
    if body:
        # dotenv values can't hold real newlines without quoting
        return body.replace("\\n", "\n")

    body_file = Path(os.environ["REMINDERS_EMAIL_BODY_FILE"])
    try:
        return body_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read REMINDERS_EMAIL_BODY_FILE {body_file}: {e}") from e


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be true/false, got {raw!r}")


def _timezone(name: str) -> ZoneInfo:
    raw = os.getenv(name) or "UTC"
    try:
        return ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"{name}: unknown timezone {raw!r}") from e
