"""livetop - Textual frontend."""

from queue import Empty, Queue

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Input, Static

from livetop import metrics
from livetop.config import BAR_WIDTH, MonitorConfig
from livetop.listener import FilterState
from livetop.models import Frame, ProcessRecord, SystemSnapshot
from livetop.monitor import SamplingLoop, SystemMonitor
from livetop.render import format_percent, kb_to_gb


def markup_bar(fraction: float, color: str, width: int = BAR_WIDTH) -> str:
    """Usage bar with Rich markup, brackets escaped."""
    filled = metrics.filled_blocks(fraction, width)
    bar = f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (width - filled)
    return f"\\[{bar}]"


class HeaderStats(Static):
    """Header widget showing host, CPU and memory statistics."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 4;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._snapshot: SystemSnapshot | None = None

    def compose(self) -> ComposeResult:
        """Compose the header stats layout."""
        yield Horizontal(
            Static(self._get_host_info(), id="host-info"),
            Static(self._get_usage_info(), id="usage-info"),
        )

    @property
    def snapshot(self) -> SystemSnapshot | None:
        return self._snapshot

    def update_stats(self, snapshot: SystemSnapshot) -> None:
        """Update the statistics from a system snapshot."""
        self._snapshot = snapshot
        self._refresh_display()

    def _refresh_display(self) -> None:
        """Refresh the display with current data."""
        try:
            host_info = self.query_one("#host-info", Static)
            usage_info = self.query_one("#usage-info", Static)
        except NoMatches:
            return  # Widget not mounted yet
        host_info.update(self._get_host_info())
        usage_info.update(self._get_usage_info())

    def _get_host_info(self) -> str:
        snapshot = self._snapshot
        if snapshot is None:
            return "Loading system info..."
        return (
            f"OS: {snapshot.os_name}\n"
            f"Number of CPUs: {snapshot.cpu_count}\n"
            f"Memory: {kb_to_gb(snapshot.memory_used):.2f}/"
            f"{kb_to_gb(snapshot.memory_total):.2f} GB"
        )

    def _get_usage_info(self) -> str:
        snapshot = self._snapshot
        if snapshot is None:
            return ""
        mem_bar = markup_bar(snapshot.memory_usage, "cyan")
        cpu_bar = markup_bar(snapshot.cpu_usage, "green")
        return (
            f"Mem{mem_bar} {format_percent(snapshot.memory_usage)}\n"
            f"CPU{cpu_bar} {format_percent(snapshot.cpu_usage)}"
        )


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._pids: list[str] = []

    @property
    def pids(self) -> list[str]:
        """PIDs currently shown, in display order."""
        return list(self._pids)

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("PID", key="pid", width=8)
        table.add_column("USER", key="user", width=10)
        table.add_column("S", key="status", width=3)
        table.add_column("CPU%", key="cpu", width=10)
        table.add_column("MEM%", key="mem", width=8)
        table.add_column("Command", key="command")

    def update_processes(self, processes: list[ProcessRecord]) -> None:
        """
        Replace the table contents with a new process list.

        Rows keep the order the sampler produced them in.
        """
        table = self.query_one("#process-table", DataTable)
        table.clear()
        self._pids = []

        for proc in processes:
            table.add_row(
                proc.pid,
                proc.username[:10],
                proc.status,
                format_percent(proc.cpu_usage),
                format_percent(proc.memory_usage),
                proc.command,
            )
            self._pids.append(proc.pid)


class LivetopApp(App):
    """Main livetop application."""

    TITLE = "livetop"
    SUB_TITLE = "Live System Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-stats {
        dock: top;
        height: auto;
        min-height: 5;
    }

    Horizontal {
        height: auto;
    }

    #host-info {
        width: 1fr;
        padding-right: 2;
    }

    #usage-info {
        width: 1fr;
        padding-left: 2;
    }

    #filter-input {
        dock: bottom;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("slash", "focus_filter", "Filter"),
        ("escape", "blur_filter", "Table"),
    ]

    def __init__(
        self,
        config: MonitorConfig | None = None,
        monitor: SystemMonitor | None = None,
    ) -> None:
        """Initialize the LivetopApp."""
        super().__init__()
        self._config = config or MonitorConfig()
        self._filter_state = FilterState()
        self._update_queue: Queue[Frame] = Queue()
        self._sampler = SamplingLoop(
            monitor or SystemMonitor(self._config),
            self._filter_state,
            self._update_queue.put,
            interval=self._config.refresh_interval,
        )

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def sampler(self) -> SamplingLoop:
        return self._sampler

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield ProcessTable()
        yield Input(placeholder="Enter a filter", id="filter-input")
        yield Footer()

    def on_mount(self) -> None:
        """Start the sampling loop when the app is mounted."""
        self._sampler.start()
        # Set up a timer to poll the queue for updates
        self.set_interval(0.5, self._check_for_updates)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Publish the submitted text as the new filter."""
        self._filter_state.publish(event.value.strip())

    def _check_for_updates(self) -> None:
        """Check the queue for frames and refresh the UI with the latest."""
        frame = None
        while True:
            try:
                frame = self._update_queue.get_nowait()
            except Empty:
                break

        if frame is not None:
            self.show_frame(frame)

    def show_frame(self, frame: Frame) -> None:
        """Update the UI with a sampled frame."""
        self.query_one("#header-stats", HeaderStats).update_stats(frame.system)
        self.query_one(ProcessTable).update_processes(frame.processes)
        self.sub_title = f"Filter: {frame.filter_text}" if frame.filter_text else self.SUB_TITLE

    def action_focus_filter(self) -> None:
        self.query_one("#filter-input", Input).focus()

    def action_blur_filter(self) -> None:
        self.query_one(DataTable).focus()

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._sampler.stop(timeout=0)
        self.exit()


def main() -> None:
    """Entry point for the Textual frontend."""
    app = LivetopApp()
    app.run()


if __name__ == "__main__":
    main()
