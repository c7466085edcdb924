"""Sampling engine for livetop."""

import logging
import sys
import threading
import time
from collections.abc import Callable

import psutil

from livetop import metrics
from livetop.config import MonitorConfig
from livetop.listener import FilterState
from livetop.models import Frame, ProcessRecord, SystemSnapshot
from livetop.procfs import ProcFS, lookup_username

logger = logging.getLogger(__name__)


class SystemMonitor:
    """
    Builds system snapshots and process records from a /proc tree.

    Reads that fail produce zero/empty values instead of errors. With
    ``strict`` set, processes whose stat line is unreadable are skipped.
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        procfs: ProcFS | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            config: Sampling settings. Defaults to MonitorConfig().
            procfs: Reader for the process table. Defaults to config.proc_root.
            sleep: Called with the pause between the two CPU samples.
        """
        self._config = config or MonitorConfig()
        self._procfs = procfs or ProcFS(self._config.proc_root)
        self._sleep = sleep
        self._os_name = sys.platform
        self._cpu_count = psutil.cpu_count(logical=True) or 0

    @property
    def config(self) -> MonitorConfig:
        return self._config

    def sample_cpu(self) -> float:
        """Sample the aggregate cpu line twice and return the usage fraction."""
        first = self._procfs.read_cpu_line()
        self._sleep(self._config.cpu_sample_pause)
        second = self._procfs.read_cpu_line()
        return metrics.cpu_usage(first, second)

    def collect_system(self) -> SystemSnapshot:
        """Collect host-wide memory and CPU usage."""
        total, used, usage = metrics.memory_info(self._procfs.read_meminfo())
        return SystemSnapshot(
            os_name=self._os_name,
            cpu_count=self._cpu_count,
            memory_total=total,
            memory_used=used,
            memory_usage=usage,
            cpu_usage=self.sample_cpu(),
        )

    def collect_processes(self, filter_text: str = "") -> list[ProcessRecord]:
        """
        Collect records for every process matching the filter.

        Records come out in directory-listing order of the process table.
        """
        total_kb = metrics.memory_total(self._procfs.read_meminfo())
        processes: list[ProcessRecord] = []

        for pid in self._procfs.list_pids():
            record = self._collect_process(pid, total_kb)
            if record is None:
                continue
            if metrics.matches_filter(record, filter_text):
                processes.append(record)

        return processes

    def _collect_process(self, pid: str, total_kb: float) -> ProcessRecord | None:
        stat = self._procfs.read_stat(pid)
        if self._config.strict and not metrics.stat_complete(stat):
            logger.debug("Skipping pid %s: stat unavailable", pid)
            return None

        fields = metrics.parse_stat(stat)
        return ProcessRecord(
            pid=pid,
            username=self._username(pid),
            status=fields.status,
            cpu_usage=metrics.process_cpu_usage(fields),
            memory_usage=metrics.process_memory_usage(fields, total_kb),
            command=metrics.command_name(
                self._procfs.read_cmdline(pid), self._config.command_width
            ),
        )

    def _username(self, pid: str) -> str:
        uid = metrics.status_uid(self._procfs.read_status(pid))
        if uid is None:
            return ""
        return lookup_username(uid)


class SamplingLoop:
    """
    Periodic task producing one Frame per refresh interval.

    Each cycle adopts a pending filter, collects a snapshot and the filtered
    processes, and hands the Frame to ``sink``. Runs either in the calling
    thread (run()) or in a daemon thread (start()/stop()).
    """

    def __init__(
        self,
        monitor: SystemMonitor,
        filter_state: FilterState,
        sink: Callable[[Frame], None],
        interval: float | None = None,
    ) -> None:
        self._monitor = monitor
        self._filter_state = filter_state
        self._sink = sink
        self._interval = interval if interval is not None else monitor.config.refresh_interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """Get the refresh interval."""
        return self._interval

    @property
    def is_running(self) -> bool:
        """Check if the loop thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the loop in a daemon thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            daemon=True,
            name="SamplingLoop",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the loop.

        Args:
            timeout: How long to wait for the thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def run_once(self) -> Frame:
        """Run a single sampling cycle and deliver its Frame."""
        self._filter_state.adopt()
        system = self._monitor.collect_system()
        with self._filter_state.hold() as filter_text:
            processes = self._monitor.collect_processes(filter_text)
        frame = Frame(system=system, processes=processes, filter_text=filter_text)
        self._sink(frame)
        return frame

    def run(self) -> None:
        """Run cycles until stop() is called."""
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                # Keep sampling whatever a single cycle hit
                logger.debug("Sampling cycle failed", exc_info=True)

            self._stop_event.wait(timeout=self._interval)
