"""Appointment reminder engine.

Polls the scheduling API, emails customers whose appointment starts within
the reminder window, and remembers who has been reminded.
"""

from .classifier import REMINDER_WINDOW, Decision, classify
from .engine import CycleSummary, ReminderEngine
from .errors import (
    ConfigError,
    DispatchError,
    FetchError,
    ReminderError,
    StateCorruptError,
    StateWriteError,
)
from .loop import CHECK_INTERVAL, LoopPhase, ReminderLoop
from .models import Appointment, Customer
from .state_store import StateStore

__all__ = [
    "REMINDER_WINDOW",
    "CHECK_INTERVAL",
    "Decision",
    "classify",
    "CycleSummary",
    "ReminderEngine",
    "ReminderLoop",
    "LoopPhase",
    "Appointment",
    "Customer",
    "StateStore",
    "ReminderError",
    "ConfigError",
    "DispatchError",
    "FetchError",
    "StateCorruptError",
    "StateWriteError",
]
