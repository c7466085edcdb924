"""Shared fixtures: a synthetic /proc tree."""

from pathlib import Path

import pytest

MEMINFO = "MemTotal:       16000000 kB\nMemFree:         4000000 kB\nMemAvailable:    8000000 kB\n"
CPU_LINE = "cpu  100 0 100 800 0 0 0 0 0 0"


def stat_line(
    pid: str,
    comm: str = "(proc)",
    state: str = "S",
    utime: int = 0,
    stime: int = 0,
    cutime: int = 0,
    cstime: int = 0,
    starttime: int = 100,
    vsize: int = 0,
) -> str:
    """Build a /proc/<pid>/stat line with the given fields."""
    fields = [pid, comm, state, "1", "1", "1", "0", "-1", "4194560", "100", "0", "0", "0"]
    fields += [str(utime), str(stime), str(cutime), str(cstime)]
    fields += ["20", "0", "1", "0", str(starttime), str(vsize), "300"]
    return " ".join(fields) + "\n"


def status_text(pid: str, uid: int) -> str:
    """Build a /proc/<pid>/status text whose 8th line holds the uid."""
    return (
        "Name:\tproc\n"
        "Umask:\t0022\n"
        "State:\tS (sleeping)\n"
        f"Tgid:\t{pid}\n"
        "Ngid:\t0\n"
        f"Pid:\t{pid}\n"
        "PPid:\t0\n"
        f"Uid:\t{uid}\t{uid}\t{uid}\t{uid}\n"
        f"Gid:\t{uid}\t{uid}\t{uid}\t{uid}\n"
    )


class FakeProc:
    """Writes a minimal /proc layout under a temporary directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.set_meminfo(MEMINFO)
        self.set_cpu_line(CPU_LINE)

    def set_meminfo(self, text: str) -> None:
        (self.root / "meminfo").write_text(text)

    def set_cpu_line(self, line: str) -> None:
        (self.root / "stat").write_text(line + "\nintr 0\nctxt 0\n")

    def add_process(
        self,
        pid: str,
        cmdline: bytes | None = b"/usr/bin/proc\x00",
        stat: str | None = None,
        status: str | None = None,
        uid: int = 0,
    ) -> Path:
        directory = self.root / pid
        directory.mkdir()
        if cmdline is not None:
            (directory / "cmdline").write_bytes(cmdline)
        if stat is None:
            stat = stat_line(pid)
        if stat:
            (directory / "stat").write_text(stat)
        if status is None:
            status = status_text(pid, uid)
        if status:
            (directory / "status").write_text(status)
        return directory


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    return FakeProc(tmp_path)
