"""Plain-text rendering of frames."""

from collections.abc import Sequence

from livetop import metrics
from livetop.config import BAR_WIDTH, SEPARATOR_WIDTH, TABLE_PADDING
from livetop.models import Frame, ProcessRecord, SystemSnapshot


def kb_to_gb(kb: float) -> float:
    """Convert a kB value to GB."""
    return kb / 1024 / 1024


def format_percent(fraction: float) -> str:
    """Format a fraction as a percentage with two decimals."""
    return f"{fraction * 100:.2f}%"


def usage_bar(label: str, fraction: float, width: int = BAR_WIDTH) -> str:
    """Render a fixed-width gauge, e.g. ``CPU Usage: [====      ]``."""
    filled = metrics.filled_blocks(fraction, width)
    return f"{label} [" + "=" * filled + " " * (width - filled) + "]"


def render_header(snapshot: SystemSnapshot, bar_width: int = BAR_WIDTH) -> list[str]:
    """Render the system info lines."""
    return [
        f"OS: {snapshot.os_name}",
        f"Number of CPUs: {snapshot.cpu_count}",
        f"Total Memory: {kb_to_gb(snapshot.memory_total):.2f} GB",
        f"Used Memory: {kb_to_gb(snapshot.memory_used):.2f} GB",
        f"Memory Usage: {format_percent(snapshot.memory_usage)}",
        usage_bar("Memory Usage:", snapshot.memory_usage, bar_width),
        f"CPU Usage: {format_percent(snapshot.cpu_usage)}",
        usage_bar("CPU Usage:", snapshot.cpu_usage, bar_width),
    ]


def process_row(record: ProcessRecord) -> list[str]:
    """Cells of one table row."""
    return [
        record.pid,
        record.username,
        record.status,
        format_percent(record.cpu_usage),
        format_percent(record.memory_usage),
        record.command,
    ]


def format_table(rows: Sequence[Sequence[str]], padding: int = TABLE_PADDING) -> list[str]:
    """
    Lay out rows as right-aligned columns separated by ``|``.

    Every cell but the last in a row is padded on the left to the widest
    cell of its column plus ``padding``. The last cell is written as is.
    """
    widths: list[int] = []
    for row in rows:
        for index, cell in enumerate(row[:-1]):
            width = len(cell) + padding
            if index == len(widths):
                widths.append(width)
            elif width > widths[index]:
                widths[index] = width

    lines = []
    for row in rows:
        cells = []
        for index, cell in enumerate(row):
            if index < len(row) - 1:
                cells.append(cell.rjust(widths[index]))
            else:
                cells.append(cell)
        lines.append("|".join(cells))
    return lines


def render_table(records: Sequence[ProcessRecord]) -> list[str]:
    return format_table([process_row(record) for record in records])


def render_frame(frame: Frame, bar_width: int = BAR_WIDTH) -> str:
    """Render a whole frame (header, separator, table) as text."""
    lines = render_header(frame.system, bar_width)
    lines.append("-" * SEPARATOR_WIDTH)
    lines.extend(render_table(frame.processes))
    return "\n".join(lines) + "\n"
