"""Exception types raised by the reminder engine and its collaborators."""


class ReminderError(Exception):
    """Base class for all appointment-reminder errors."""


class ConfigError(ReminderError):
    """Configuration is missing or invalid. Fatal at startup."""


class StateCorruptError(ReminderError):
    """The notified-ID state file cannot be parsed. Fatal at startup."""


class StateWriteError(ReminderError):
    """The notified-ID state file could not be written."""


class FetchError(ReminderError):
    """Fetching appointments or customers from the scheduling API failed."""


class DispatchError(ReminderError):
    """Sending a reminder email failed."""
