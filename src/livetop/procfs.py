"""Read-only access to the kernel's process table and counters.

Every read returns the resource text, or ``None`` when it cannot be read
(process exited, permission denied, missing file). Callers decide what to
substitute for a failed read.
"""

import logging
import os
import pwd

from livetop.config import PROC_ROOT

logger = logging.getLogger(__name__)


class ProcFS:
    """Reader for a /proc style directory tree."""

    def __init__(self, root: str = PROC_ROOT) -> None:
        self._root = root

    @property
    def root(self) -> str:
        """Get the process-table root."""
        return self._root

    def list_pids(self) -> list[str]:
        """
        List the PIDs under the root in directory order.

        Only directories whose names are all ASCII digits count as processes.
        """
        pids: list[str] = []
        try:
            with os.scandir(self._root) as entries:
                for entry in entries:
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        continue
                    if is_dir and is_pid(entry.name):
                        pids.append(entry.name)
        except OSError as exc:
            logger.debug("Cannot list %s: %s", self._root, exc)
        return pids

    def read(self, *parts: str) -> str | None:
        """Read a resource below the root, e.g. ``read("123", "stat")``."""
        path = os.path.join(self._root, *parts)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None
        return data.decode("utf-8", errors="replace")

    def read_cmdline(self, pid: str) -> str | None:
        return self.read(pid, "cmdline")

    def read_stat(self, pid: str) -> str | None:
        return self.read(pid, "stat")

    def read_status(self, pid: str) -> str | None:
        return self.read(pid, "status")

    def read_meminfo(self) -> str | None:
        return self.read("meminfo")

    def read_cpu_line(self) -> str | None:
        """Read the aggregate ``cpu`` line (first line of the stat resource)."""
        text = self.read("stat")
        if text is None:
            return None
        return text.split("\n", 1)[0]


def is_pid(name: str) -> bool:
    """Check whether a directory name is a process id."""
    return name.isascii() and name.isdigit()


def lookup_username(uid: int) -> str:
    """Resolve a numeric uid to a user name, or ``""`` if unknown."""
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError, ValueError) as exc:
        logger.debug("Cannot resolve uid %s: %s", uid, exc)
        return ""
