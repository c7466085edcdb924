"""Tests for the livetop Textual frontend."""

import pytest
from textual.widgets import DataTable, Input

from livetop.app import HeaderStats, LivetopApp, ProcessTable, markup_bar
from livetop.config import MonitorConfig
from livetop.models import Frame, ProcessRecord, SystemSnapshot
from livetop.monitor import SamplingLoop, SystemMonitor

SNAPSHOT = SystemSnapshot(
    os_name="linux",
    cpu_count=4,
    memory_total=16 * 1024 * 1024,
    memory_used=8 * 1024 * 1024,
    memory_usage=0.5,
    cpu_usage=0.25,
)


def make_app(fake_proc) -> LivetopApp:
    config = MonitorConfig(proc_root=str(fake_proc.root), refresh_interval=0.2)
    return LivetopApp(config, SystemMonitor(config, sleep=lambda s: None))


def test_markup_bar_fill():
    bar = markup_bar(0.5, "cyan")
    assert bar.startswith("\\[")
    assert bar.count("█") == 10
    assert bar.count("░") == 10


def test_markup_bar_nan():
    assert markup_bar(float("nan"), "green").count("█") == 0


@pytest.mark.asyncio
async def test_app_creation(fake_proc):
    """Test LivetopApp can be instantiated."""
    app = make_app(fake_proc)
    assert app.title == "livetop"
    assert app.sub_title == "Live System Monitor"
    assert app.filter_state.active == ""


@pytest.mark.asyncio
async def test_app_compose(fake_proc):
    """Test LivetopApp composes correctly."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#header-stats") is not None
        assert pilot.app.query_one("#process-table") is not None
        assert pilot.app.query_one("#filter-input") is not None


@pytest.mark.asyncio
async def test_app_starts_sampler_on_mount(fake_proc):
    """Test the sampling thread survives Textual installing its event loop."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        assert isinstance(pilot.app.sampler, SamplingLoop)
        assert pilot.app.sampler.is_running


@pytest.mark.asyncio
async def test_app_quit_binding(fake_proc):
    """Test that 'q' binding triggers quit and stops the sampler."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert pilot.app._exit
        assert not pilot.app.sampler.is_running


@pytest.mark.asyncio
async def test_process_table_update_processes(fake_proc):
    """Test ProcessTable shows rows in the order given."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        process_table.update_processes(
            [
                ProcessRecord("200", "root", "S", 0.2, 0.1, "sshd"),
                ProcessRecord("100", "user", "R", 0.1, 0.05, "bash"),
            ]
        )

        assert process_table.pids == ["200", "100"]


@pytest.mark.asyncio
async def test_process_table_replaces_rows(fake_proc):
    """Test ProcessTable drops processes missing from the next frame."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        process_table.update_processes(
            [
                ProcessRecord("100", "user", "R", 0.1, 0.05, "bash"),
                ProcessRecord("200", "root", "S", 0.2, 0.1, "sshd"),
            ]
        )
        process_table.update_processes([ProcessRecord("200", "root", "S", 0.25, 0.12, "sshd")])

        assert process_table.pids == ["200"]


@pytest.mark.asyncio
async def test_process_table_keeps_repeated_pids(fake_proc):
    """Test ProcessTable shows every record, even when a pid repeats."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        process_table.update_processes(
            [
                ProcessRecord("300", "root", "S", 0.1, 0.1, "cron"),
                ProcessRecord("300", "root", "Z", 0.0, 0.0, "cron"),
            ]
        )

        assert process_table.pids == ["300", "300"]
        assert pilot.app.query_one("#process-table", DataTable).row_count == 2


@pytest.mark.asyncio
async def test_header_stats_update(fake_proc):
    """Test that header stats can be updated."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        header = pilot.app.query_one("#header-stats", HeaderStats)

        header.update_stats(SNAPSHOT)

        assert header.snapshot == SNAPSHOT
        assert "Number of CPUs: 4" in header._get_host_info()
        assert "50.00%" in header._get_usage_info()


@pytest.mark.asyncio
async def test_show_frame_sets_filter_subtitle(fake_proc):
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        pilot.app.show_frame(Frame(system=SNAPSHOT, filter_text="ssh"))
        assert pilot.app.sub_title == "Filter: ssh"

        pilot.app.show_frame(Frame(system=SNAPSHOT))
        assert pilot.app.sub_title == "Live System Monitor"


@pytest.mark.asyncio
async def test_filter_input_publishes(fake_proc):
    """Test that submitting the filter input publishes the stripped text."""
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        await pilot.press("slash")
        filter_input = pilot.app.query_one("#filter-input", Input)
        assert filter_input.has_focus

        filter_input.value = "  nginx "
        await pilot.press("enter")
        await pilot.pause()

        # The running sampler may adopt it first
        pilot.app.filter_state.adopt()
        assert pilot.app.filter_state.active == "nginx"


@pytest.mark.asyncio
async def test_app_receives_frames(fake_proc):
    """Test that the app shows frames from the sampling loop."""
    fake_proc.add_process("1", cmdline=b"/sbin/init\x00")
    fake_proc.add_process("2", cmdline=b"/usr/bin/bash\x00")
    app = make_app(fake_proc)
    async with app.run_test() as pilot:
        await pilot.pause(1.5)

        process_table = pilot.app.query_one(ProcessTable)
        assert sorted(process_table.pids) == ["1", "2"]
        assert pilot.app.query_one(HeaderStats).snapshot is not None
