"""Persistent record of appointments that have already been reminded.

Plain text, one appointment id per line. Survives daemon restarts so a
customer is never reminded twice for the same appointment.
"""

import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Iterable

from logger import logger
from .errors import StateCorruptError, StateWriteError

# One plain decimal id per line
_ID_LINE = re.compile(r"-?[0-9]+", re.ASCII)


class StateStore:
    """Load and save the notified-ID set.

    There is exactly one writer (the reminder engine), so no locking.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> set[int]:
        """Read the notified ids from disk.

        Returns:
            Set of appointment ids (empty if the file doesn't exist yet)

        Raises:
            StateCorruptError: If a line isn't an integer
        """
        if not self.path.exists():
            logger.info(f"No state file at {self.path}, starting with no prior reminders")
            return set()

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StateCorruptError(f"Cannot read state file {self.path}: {e}") from e

        ids: set[int] = set()
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            if not _ID_LINE.fullmatch(line):
                raise StateCorruptError(
                    f"{self.path}:{lineno}: not an appointment id: {line!r}"
                )
            ids.add(int(line))

        logger.debug(f"Loaded {len(ids)} notified appointment ids from {self.path}")
        return ids

    def save(self, ids: Iterable[int]) -> None:
        """Overwrite the state file with ``ids``, sorted, one per line.

        Writes a temp file in the same directory and renames it over the
        target, so a reader never sees a half-written file.

        Raises:
            StateWriteError: If the file couldn't be written
        """
        ordered = sorted(ids)
        content = "".join(f"{i}\n" for i in ordered)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; keep the existing file's mode instead
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StateWriteError(f"Cannot write state file {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except FileNotFoundError:
                    pass

        logger.debug(f"Saved {len(ordered)} notified appointment ids to {self.path}")

    def _target_mode(self) -> int:
        """Mode of the current state file, or the umask default for a new one."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
