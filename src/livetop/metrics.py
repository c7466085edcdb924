"""Pure derivations from raw /proc text.

None of these functions touch the filesystem. Malformed input degrades to
zero/empty values, and a zero denominator yields NaN or infinity instead of
raising.
"""

import math

from livetop.config import BAR_WIDTH, COMMAND_WIDTH
from livetop.models import ProcessRecord, StatFields

# Indices into the whitespace-split /proc/<pid>/stat line
STAT_STATUS = 2
STAT_UTIME = 13
STAT_STIME = 14
STAT_CUTIME = 15
STAT_CSTIME = 16
STAT_STARTTIME = 21
STAT_VSIZE = 22

IDLE_FIELD = 3  # user, nice, system, idle, iowait, ...


def parse_number(token: str) -> float:
    """Parse a numeric token, returning 0.0 when it is not a number."""
    try:
        return float(token)
    except (TypeError, ValueError):
        return 0.0


def ratio(numerator: float, denominator: float) -> float:
    """Divide; a zero denominator gives NaN for 0/0 and signed infinity otherwise."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def cpu_times(line: str | None) -> list[float]:
    """Parse the counters after the label of an aggregate ``cpu`` line."""
    if not line:
        return []
    return [parse_number(token) for token in line.split()[1:]]


def cpu_usage(first_line: str | None, second_line: str | None) -> float:
    """
    Compute CPU usage from two samples of the aggregate ``cpu`` line.

    Every counter is summed into the total and field 3 is the idle counter;
    usage is ``1 - idle_delta / total_delta``.
    """
    total1 = total2 = idle1 = idle2 = 0.0
    for index, (t1, t2) in enumerate(zip(cpu_times(first_line), cpu_times(second_line))):
        total1 += t1
        total2 += t2
        if index == IDLE_FIELD:
            idle1 = t1
            idle2 = t2
    return 1 - ratio(idle2 - idle1, total2 - total1)


def memory_info(meminfo: str | None) -> tuple[float, float, float]:
    """
    Parse total and free memory from the first two meminfo lines.

    Returns:
        (total kB, used kB, usage fraction)
    """
    lines = (meminfo or "").split("\n")
    total = _meminfo_value(lines, 0)
    free = _meminfo_value(lines, 1)
    used = total - free
    return total, used, ratio(used, total)


def memory_total(meminfo: str | None) -> float:
    """Get the MemTotal value (kB)."""
    return _meminfo_value((meminfo or "").split("\n"), 0)


def _meminfo_value(lines: list[str], index: int) -> float:
    try:
        return parse_number(lines[index].split()[1])
    except IndexError:
        return 0.0


def parse_stat(stat: str | None) -> StatFields:
    """Extract the fields livetop uses from a per-process stat line."""
    fields = (stat or "").split()

    def field(index: int) -> str:
        return fields[index] if index < len(fields) else ""

    return StatFields(
        status=field(STAT_STATUS),
        utime=parse_number(field(STAT_UTIME)),
        stime=parse_number(field(STAT_STIME)),
        cutime=parse_number(field(STAT_CUTIME)),
        cstime=parse_number(field(STAT_CSTIME)),
        starttime=parse_number(field(STAT_STARTTIME)),
        vsize=parse_number(field(STAT_VSIZE)),
    )


def stat_complete(stat: str | None) -> bool:
    """Check whether a stat line holds every field livetop reads."""
    return stat is not None and len(stat.split()) > STAT_VSIZE


def process_cpu_usage(fields: StatFields) -> float:
    """Accumulated ticks (own and children) divided by the start time."""
    busy = fields.utime + fields.stime + fields.cutime + fields.cstime
    return ratio(busy, fields.starttime)


def process_memory_usage(fields: StatFields, total_kb: float) -> float:
    """Virtual size in kB as a fraction of total memory."""
    return ratio(fields.vsize / 1024, total_kb)


def status_uid(status: str | None) -> int | None:
    """Get the real uid from the 8th line of a status resource."""
    try:
        line = (status or "").split("\n")[7]
        return int(line.split("\t")[1])
    except (IndexError, ValueError):
        return None


def base_name(path: str) -> str:
    """Last element of a slash separated path."""
    if path == "":
        return "."
    path = path.rstrip("/")
    if path == "":
        return "/"
    return path.rsplit("/", 1)[-1]


def truncate(text: str, limit: int = COMMAND_WIDTH) -> str:
    """Cut text to ``limit`` characters, marking the cut with ``...``."""
    if len(text) <= limit:
        return text
    if limit > 3:
        return text[: limit - 3] + "..."
    return text[:limit]


def command_name(cmdline: str | None, limit: int = COMMAND_WIDTH) -> str:
    """Turn a NUL separated command line into the displayed command."""
    command = (cmdline or "").replace("\x00", " ")
    return truncate(base_name(command), limit)


def matches_filter(record: ProcessRecord, filter_text: str) -> bool:
    """Case-sensitive substring match against user, pid and command."""
    return (
        filter_text in record.username
        or filter_text in record.pid
        or filter_text in record.command
    )


def filled_blocks(fraction: float, width: int = BAR_WIDTH) -> int:
    """Number of filled positions in a usage bar."""
    if math.isnan(fraction):
        return 0
    if math.isinf(fraction):
        return width if fraction > 0 else 0
    return max(0, min(width, math.floor(fraction * width)))
