"""Decide what to do with a fetched appointment.

Rules, checked in order:
- already in the notified set -> ALREADY_NOTIFIED
- started at or before now -> EXPIRED
- starts more than the reminder window from now -> NOT_YET_DUE
- otherwise -> ELIGIBLE
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import AbstractSet

from .models import Appointment

# How far ahead of an appointment a reminder goes out
REMINDER_WINDOW = timedelta(days=3)


class Decision(Enum):
    """Classifier outcomes."""
    ALREADY_NOTIFIED = "already_notified"
    NOT_YET_DUE = "not_yet_due"
    EXPIRED = "expired"
    ELIGIBLE = "eligible"


def classify(
    appointment: Appointment,
    now: datetime,
    notified: AbstractSet[int],
    window: timedelta = REMINDER_WINDOW
) -> Decision:
    """Classify one appointment. Pure; no side effects.

    Args:
        appointment: The appointment to classify
        now: Current time (aware)
        notified: Ids already reminded
        window: Reminder window length

    Returns:
        The Decision for this appointment
    """
    if appointment.id in notified:
        return Decision.ALREADY_NOTIFIED

    until_start = appointment.start - now
    if until_start <= timedelta(0):
        return Decision.EXPIRED
    if until_start > window:
        return Decision.NOT_YET_DUE
    return Decision.ELIGIBLE
