"""Real-time frame streaming loop."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from xledctl.core.errors import ChannelSendError, XledError
from xledctl.core.session import SessionManager
from xledctl.core.throttle import ModeThrottle
from xledctl.effects.base import DEFAULT_GAMMA, FrameProducer, encode_frame
from xledctl.transports.base import FrameChannel

REALTIME_MODE = "rt"
LOGGER = logging.getLogger(__name__)


class ModeSetter(Protocol):
    def set_mode(self, mode: str) -> None: ...


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class FrameStreamer:
    """Pushes producer frames to the device at a fixed pace on a background thread.

    Per-frame send failures are logged and the next tick carries on. Any other
    error (typically a session that can no longer be re-established) ends the
    loop and is kept in `error` for the controlling thread.
    """

    def __init__(
        self,
        *,
        device: ModeSetter,
        session: SessionManager,
        channel: FrameChannel,
        producer: FrameProducer,
        throttle: ModeThrottle,
        frame_interval_s: float,
        gamma: float = DEFAULT_GAMMA,
        mode_failure_warn_threshold: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.device = device
        self.session = session
        self.channel = channel
        self.producer = producer
        self.throttle = throttle
        self.frame_interval_s = frame_interval_s
        self.gamma = gamma
        self.mode_failure_warn_threshold = mode_failure_warn_threshold
        self._clock = clock

        self.state = StreamState.IDLE
        self.error: XledError | None = None
        self.frames_sent = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._mode_failures = 0
        self._mode_failures_lock = threading.Lock()
        self._mode_threads: list[threading.Thread] = []
        self._mode_threads_lock = threading.Lock()

    def start(self, address: str) -> None:
        if self.state is not StreamState.IDLE:
            raise RuntimeError(f"Streamer cannot start from state {self.state.value}")
        self.channel.init(address)
        self.state = StreamState.STREAMING
        self._thread = threading.Thread(target=self.run, name="xledctl-stream", daemon=True)
        self._thread.start()

    def tick(self, elapsed: float | None) -> int:
        """Produce, encode, and send one frame; returns the datagram count."""
        payload = encode_frame(self.producer.advance(elapsed), self.gamma)
        if self.throttle.due():
            self._dispatch_realtime_mode()
        token = self.session.get_token()
        sent = self.channel.send_frame(payload, token.binary)
        self.frames_sent += 1
        return sent

    def run(self) -> None:
        previous: float | None = None
        while not self._stop.is_set():
            now = self._clock()
            elapsed = None if previous is None else now - previous
            previous = now
            try:
                self.tick(elapsed)
            except ChannelSendError as exc:
                LOGGER.warning("Frame send failed: %s", exc)
            except XledError as exc:
                LOGGER.error("Streaming stopped: %s", exc)
                self.error = exc
                break
            self._stop.wait(self.frame_interval_s)

    def wait(self, stop: threading.Event | None = None, poll_s: float = 0.2) -> None:
        """Block until the streaming thread ends or `stop` is set.

        Joins in short slices so KeyboardInterrupt reaches the calling thread.
        """
        thread = self._thread
        while thread is not None and thread.is_alive():
            if stop is not None and stop.is_set():
                return
            thread.join(poll_s)

    def stop(self) -> None:
        if self.state is StreamState.STREAMING:
            self.state = StreamState.SHUTTING_DOWN
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()

    def shutdown(self, restore_mode: str | None) -> None:
        """Stop streaming and put the device back into `restore_mode`."""
        try:
            self.stop()
            self._join_mode_assertions()
            if restore_mode is not None:
                LOGGER.info("Restoring device mode '%s'", restore_mode)
                self.device.set_mode(restore_mode)
        finally:
            self.channel.close()
            self.state = StreamState.STOPPED

    def _dispatch_realtime_mode(self) -> None:
        thread = threading.Thread(
            target=self._assert_realtime_mode,
            name="xledctl-mode",
            daemon=True,
        )
        with self._mode_threads_lock:
            self._mode_threads = [t for t in self._mode_threads if t.is_alive()]
            self._mode_threads.append(thread)
        thread.start()

    def _join_mode_assertions(self) -> None:
        # An in-flight "rt" assertion must land before the restore call.
        with self._mode_threads_lock:
            pending, self._mode_threads = self._mode_threads, []
        for thread in pending:
            thread.join()

    def _assert_realtime_mode(self) -> None:
        try:
            self.device.set_mode(REALTIME_MODE)
        except XledError as exc:
            with self._mode_failures_lock:
                self._mode_failures += 1
                failures = self._mode_failures
            LOGGER.debug("Real-time mode assertion failed: %s", exc)
            if failures == self.mode_failure_warn_threshold:
                LOGGER.warning(
                    "Real-time mode assertion failed %d times in a row; the device may not be showing the stream",
                    failures,
                )
            return
        with self._mode_failures_lock:
            self._mode_failures = 0
