"""One reminder cycle: fetch, classify, dispatch, persist.

The notified-ID set is passed in and the updated set returned, so the
caller decides what state the next cycle starts from.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from logger import logger
from utils.log_sanitizer import sanitize_for_log
from .api_client import SchedulingApiClient
from .classifier import REMINDER_WINDOW, Decision, classify
from .errors import DispatchError, FetchError, StateWriteError
from .mailer import SmtpMailer
from .models import Appointment, build_directory
from .state_store import StateStore


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CycleSummary:
    """Counts for one cycle, logged at the end."""
    fetched: int = 0
    sent: int = 0
    failed: int = 0
    already_notified: int = 0
    not_yet_due: int = 0
    expired: int = 0

    def __str__(self) -> str:
        return (
            f"{self.fetched} fetched, {self.sent} sent, {self.failed} failed, "
            f"{self.already_notified} already notified, {self.not_yet_due} not yet due, "
            f"{self.expired} expired"
        )


class ReminderEngine:
    """Runs reminder cycles against the scheduling API and SMTP relay.

    Usage:
        engine = ReminderEngine(api, mailer, store)
        state = frozenset(store.load())
        state = await engine.run_cycle(state)
    """

    def __init__(
        self,
        api: SchedulingApiClient,
        mailer: SmtpMailer,
        store: StateStore,
        clock: Callable[[], datetime] = utc_now,
        window: timedelta = REMINDER_WINDOW
    ):
        self.api = api
        self.mailer = mailer
        self.store = store
        self.clock = clock
        self.window = window

    async def run_cycle(self, state: frozenset[int]) -> frozenset[int]:
        """Run one full cycle.

        Args:
            state: Appointment ids already reminded

        Returns:
            The notified ids after this cycle (``state`` itself if the fetch failed)
        """
        try:
            appointments = await self.api.fetch_appointments()
            customers = build_directory(await self.api.fetch_customers(), log=logger)
        except FetchError as e:
            logger.error(f"Skipping cycle, fetch failed: {e}")
            return state

        now = self.clock()
        notified = set(state)
        summary = CycleSummary(fetched=len(appointments))

        for record in appointments:
            try:
                appointment = Appointment.from_api(record)
            except (KeyError, ValueError, TypeError) as e:
                summary.failed += 1
                logger.error(f"Skipping malformed appointment {_record_id(record)}: {e!r}")
                continue

            decision = classify(appointment, now, notified, self.window)
            if decision is Decision.ALREADY_NOTIFIED:
                summary.already_notified += 1
                continue
            if decision is Decision.NOT_YET_DUE:
                summary.not_yet_due += 1
                continue
            if decision is Decision.EXPIRED:
                summary.expired += 1
                continue

            customer = customers.get(appointment.customer_id)
            if customer is None:
                summary.failed += 1
                logger.error(
                    f"Customer {appointment.customer_id} not found for appointment {appointment.id}"
                )
                continue

            try:
                await self.mailer.send_reminder(customer, appointment)
            except DispatchError as e:
                summary.failed += 1
                logger.error(f"Reminder for appointment {appointment.id} not sent: {sanitize_for_log(e)}")
                continue
            except Exception as e:
                # Keep going so reminders already sent this cycle still get saved
                summary.failed += 1
                logger.exception(
                    f"Unexpected error sending reminder for appointment {appointment.id}: "
                    f"{sanitize_for_log(e)}"
                )
                continue

            notified.add(appointment.id)
            summary.sent += 1
            logger.info(f"Sent reminder for appointment {appointment.id} starting {appointment.start:%Y-%m-%d %H:%M} UTC")

        new_state = frozenset(notified)
        try:
            self.store.save(new_state)
        except StateWriteError as e:
            # Keep the in-memory record so this run doesn't re-send
            logger.error(f"Failed to persist notified ids: {e}")

        logger.info(f"Cycle complete: {summary}")
        return new_state


def _record_id(record) -> str:
    if isinstance(record, dict):
        return repr(record.get("id", "<no id>"))
    return f"<{type(record).__name__}>"
