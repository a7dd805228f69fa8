"""Render and send appointment reminder emails over SMTP."""

import asyncio
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, formatdate
from zoneinfo import ZoneInfo

from logger import logger
from .errors import DispatchError
from .models import Appointment, Customer

# Template placeholders
TOKEN_DATETIME = "%APPOINTMENT_DATETIME%"
TOKEN_FIRST_NAME = "%FIRST_NAME%"
TOKEN_LAST_NAME = "%LAST_NAME%"


def format_start(start: datetime, tz: ZoneInfo | timezone = timezone.utc) -> str:
    """Human-readable appointment time, e.g. 'Tuesday, October 20, 2026 at 02:30 PM UTC'."""
    local = start.astimezone(tz)
    return f"{local:%A, %B} {local.day}, {local.year} at {local:%I:%M %p} {local.tzname()}"


def render_template(template: str, when: str, first_name: str, last_name: str) -> str:
    """Substitute the three reminder placeholders into ``template``."""
    return (
        template
        .replace(TOKEN_DATETIME, when)
        .replace(TOKEN_FIRST_NAME, first_name)
        .replace(TOKEN_LAST_NAME, last_name)
    )


class SmtpMailer:
    """Send reminder emails through an authenticated SMTP relay."""

    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        from_addr: str,
        reply_to: str,
        subject: str,
        body_template: str,
        port: int = 587,
        starttls: bool = True,
        timeout: float = 30,
        display_timezone: ZoneInfo | timezone = timezone.utc
    ):
        self.host = host
        self.port = port
        self.user = user
        self._password = password
        self.from_addr = from_addr
        self.reply_to = reply_to
        self.subject = subject
        self.body_template = body_template
        self.starttls = starttls
        self.timeout = timeout
        self.display_timezone = display_timezone

    def compose(self, customer: Customer, appointment: Appointment) -> EmailMessage:
        """Build the reminder message for one customer/appointment."""
        when = format_start(appointment.start, self.display_timezone)
        msg = EmailMessage()
        msg["From"] = self.from_addr
        msg["Reply-To"] = self.reply_to
        msg["To"] = formataddr((customer.display_name, customer.email))
        msg["Subject"] = render_template(
            self.subject, when, customer.first_name, customer.last_name
        )
        msg["Date"] = formatdate(localtime=False)
        msg.set_content(render_template(
            self.body_template, when, customer.first_name, customer.last_name
        ))
        return msg

    async def send_reminder(self, customer: Customer, appointment: Appointment) -> None:
        """Send one reminder, waiting until the SMTP session finishes.

        Raises:
            DispatchError: If the message wasn't accepted by the server
        """
        try:
            msg = self.compose(customer, appointment)
        except (ValueError, TypeError) as e:
            # e.g. a newline smuggled into a name header
            raise DispatchError(f"Cannot build reminder for appointment {appointment.id}: {e}") from e

        # smtplib blocks; keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"SMTP send for appointment {appointment.id} failed: {e}") from e

        logger.debug(f"SMTP accepted reminder for appointment {appointment.id}")

    def _send(self, msg: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.user:
                server.login(self.user, self._password)
            server.send_message(msg)
