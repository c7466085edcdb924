"""Data models for livetop."""

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Host-wide CPU and memory state for one frame."""

    os_name: str
    cpu_count: int
    memory_total: float  # kB
    memory_used: float  # kB
    memory_usage: float  # 0.0 - 1.0
    cpu_usage: float  # 0.0 - 1.0


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable view of one process, rebuilt every frame."""

    pid: str
    username: str
    status: str  # 'R', 'S', 'Z', 'D', etc.
    cpu_usage: float
    memory_usage: float
    command: str  # basename of the command line, truncated


@dataclass(slots=True, frozen=True)
class StatFields:
    """The fields of /proc/<pid>/stat that livetop reads."""

    status: str = ""
    utime: float = 0.0
    stime: float = 0.0
    cutime: float = 0.0
    cstime: float = 0.0
    starttime: float = 0.0
    vsize: float = 0.0  # bytes


@dataclass(slots=True, frozen=True)
class Frame:
    """Everything rendered in one refresh."""

    system: SystemSnapshot
    processes: list[ProcessRecord] = field(default_factory=list)
    filter_text: str = ""
