"""Live filter shared between the input listener and the sampler."""

import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

from livetop.config import FILTER_PROMPT, INPUT_RETRY_INTERVAL

logger = logging.getLogger(__name__)


class FilterState:
    """
    Single-slot filter value guarded by a lock.

    The listener publishes into a pending slot (last write wins). The sampler
    calls adopt() once per cycle, which moves a pending value into the active
    filter without blocking on input.
    """

    def __init__(self, initial: str = "") -> None:
        self._lock = threading.Lock()
        self._active = initial
        self._pending: str | None = None

    def publish(self, text: str) -> None:
        """Replace the pending filter."""
        with self._lock:
            self._pending = text

    def adopt(self) -> bool:
        """Make the pending filter active. Returns True if one was waiting."""
        with self._lock:
            if self._pending is None:
                return False
            self._active = self._pending
            self._pending = None
            return True

    @property
    def active(self) -> str:
        """Get the active filter."""
        with self._lock:
            return self._active

    @contextmanager
    def hold(self) -> Iterator[str]:
        """Yield the active filter while holding the lock."""
        with self._lock:
            yield self._active


class InputListener:
    """
    Reads filter lines from a text stream in a daemon thread.

    Each line is stripped and published. End of input or a read error counts
    as an empty line: the empty filter is published, and after
    ``retry_interval`` the listener prompts and reads again. It ends when
    stop() is called or the stream is closed.
    """

    def __init__(
        self,
        state: FilterState,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
        prompt: str = FILTER_PROMPT,
        retry_interval: float = INPUT_RETRY_INTERVAL,
    ) -> None:
        self._state = state
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output_stream if output_stream is not None else sys.stdout
        self._prompt = prompt
        self._retry_interval = retry_interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        """Check if the listener thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the listener thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.listen,
            daemon=True,
            name="InputListener",
        )
        self._thread.start()

    def stop(self) -> None:
        """Ask the listener to finish after its current read."""
        self._stop_event.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def listen(self) -> None:
        """Read and publish lines until stopped or the stream is closed."""
        while not self._stop_event.is_set():
            self._output.write(self._prompt)
            self._output.flush()
            try:
                line = self._input.readline()
            except ValueError as exc:
                # Closed stream
                logger.debug("Filter input closed: %s", exc)
                self._state.publish("")
                return
            except OSError as exc:
                logger.debug("Filter input failed: %s", exc)
                line = ""

            if self._stop_event.is_set():
                return

            if not line:
                # End of input
                self._state.publish("")
                self._stop_event.wait(timeout=self._retry_interval)
                continue

            self._state.publish(line.strip())
