"""Appointment and customer records fetched from the scheduling API."""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parseaddr

from dateutil.parser import isoparse


@dataclass(frozen=True)
class Appointment:
    """A single booked appointment."""
    id: int
    start: datetime  # aware, UTC
    customer_id: int

    @classmethod
    def from_api(cls, record: dict) -> "Appointment":
        """Build from an API record.

        The API sends ``start`` as ``YYYY-MM-DD HH:MM:SS`` with no timezone;
        it is always interpreted as UTC.

        Raises:
            KeyError: A required field is missing
            ValueError: A field has the wrong shape
            TypeError: A field has the wrong type
        """
        return cls(
            id=_as_int(record["id"], "id"),
            start=parse_start(record["start"]),
            customer_id=_as_int(record["customerId"], "customerId"),
        )


@dataclass(frozen=True)
class Customer:
    """Someone who books appointments."""
    id: int
    first_name: str
    last_name: str
    email: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_api(cls, record: dict) -> "Customer":
        return cls(
            id=_as_int(record["id"], "id"),
            first_name=str(record.get("firstName") or ""),
            last_name=str(record.get("lastName") or ""),
            email=_as_email(record["email"]),
        )


def parse_start(value: str) -> datetime:
    """Parse an API start timestamp into an aware UTC datetime."""
    if not isinstance(value, str):
        raise TypeError(f"start must be a string, got {type(value).__name__}")
    parsed = isoparse(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def build_directory(records: list[dict], log=None) -> dict[int, Customer]:
    """Index customer records by id, skipping any that don't parse.

    Args:
        records: Raw customer records from the API
        log: Logger for skipped records (optional)

    Returns:
        Dict of customer id -> Customer
    """
    directory: dict[int, Customer] = {}
    for record in records:
        try:
            customer = Customer.from_api(record)
        except (KeyError, ValueError, TypeError) as e:
            if log is not None:
                log.warning(f"Skipping malformed customer record: {e!r}")
            continue
        directory[customer.id] = customer
    return directory


def _as_int(value, field: str) -> int:
    # bool is an int subclass but never a valid id
    if isinstance(value, bool):
        raise TypeError(f"{field} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"{field} must be an integer, got {value!r}")


def _as_email(value) -> str:
    """A single bare address; lists like "a@x.com, b@y.com" are rejected."""
    if not isinstance(value, str):
        raise ValueError("email address is missing or invalid")
    candidate = value.strip()
    _, addr = parseaddr(candidate)
    if not addr or addr != candidate or "@" not in addr or any(c in addr for c in ",; <>"):
        raise ValueError(f"not a single email address: {candidate!r}")
    return addr
