"""livetop - clear-and-redraw console monitor."""

import sys
from typing import TextIO

from livetop.config import CLEAR_SCREEN, MonitorConfig
from livetop.listener import FilterState, InputListener
from livetop.models import Frame
from livetop.monitor import SamplingLoop, SystemMonitor
from livetop.render import render_frame


class ConsoleSink:
    """Writes each frame to a terminal, clearing it first."""

    def __init__(self, stream: TextIO | None = None, bar_width: int | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._bar_width = bar_width if bar_width is not None else MonitorConfig().bar_width

    def __call__(self, frame: Frame) -> None:
        self._stream.write(CLEAR_SCREEN + render_frame(frame, self._bar_width))
        self._stream.flush()


def main() -> None:
    """Entry point for the console monitor."""
    config = MonitorConfig()
    filter_state = FilterState()
    listener = InputListener(filter_state)
    loop = SamplingLoop(
        SystemMonitor(config),
        filter_state,
        ConsoleSink(bar_width=config.bar_width),
    )

    listener.start()
    try:
        loop.run()
    except KeyboardInterrupt:
        pass
    finally:
        listener.stop()
        loop.stop(timeout=0)


if __name__ == "__main__":
    main()
