"""
Single-producer / single-consumer channel for render snapshots.

The simulation thread sends, the consumer (renderer, logger) receives.
Either side can close its end:
- closing the receiver makes the next send raise ChannelClosed, which the
  producer treats as the signal to stop simulating
- closing the sender lets the consumer drain what is queued, after which
  receive raises ChannelClosed

``capacity`` bounds the queue; 0 means unbounded. When the queue is full the
overflow policy decides: BLOCK waits for the consumer (every tick delivered,
in order), DROP_OLDEST discards the oldest queued snapshot (the producer
never waits, the consumer may skip ticks).
"""

import enum
import logging
import queue
import threading
import time
from typing import Iterator, Optional

from ..errors import ChannelClosed, ConfigurationError
from .snapshot import RenderSnapshot

logger = logging.getLogger(__name__)


class OverflowPolicy(enum.Enum):
    BLOCK = "block"
    DROP_OLDEST = "drop_oldest"


class SnapshotChannel:
    """Bounded FIFO of RenderSnapshot objects between two threads."""

    def __init__(self, capacity: int = 16,
                 overflow: OverflowPolicy = OverflowPolicy.BLOCK,
                 poll_interval: float = 0.05):
        if capacity < 0:
            raise ConfigurationError(f"Channel capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self.overflow = OverflowPolicy(overflow)
        self.dropped = 0
        self._poll_interval = poll_interval
        self._queue: "queue.Queue[RenderSnapshot]" = queue.Queue(maxsize=capacity)
        self._sender_closed = threading.Event()
        self._receiver_closed = threading.Event()

    @property
    def sender_closed(self) -> bool:
        return self._sender_closed.is_set()

    @property
    def receiver_closed(self) -> bool:
        return self._receiver_closed.is_set()

    def qsize(self) -> int:
        return self._queue.qsize()

    def send(self, snapshot: RenderSnapshot):
        """Hand one snapshot to the consumer.

        Raises:
            ChannelClosed: The receiver is closed (terminal), or this
                sender was already closed
        """
        if self._sender_closed.is_set():
            raise ChannelClosed("send on a closed sender")
        if self._receiver_closed.is_set():
            raise ChannelClosed("receiver closed")

        if self.overflow is OverflowPolicy.DROP_OLDEST:
            self._put_dropping(snapshot)
        else:
            self._put_blocking(snapshot)

        # close_receiver may have drained the queue while we waited, waking
        # the put above; the snapshot then sits in a dead queue
        if self._receiver_closed.is_set():
            self._drain()
            raise ChannelClosed("receiver closed during send")

    def _put_blocking(self, snapshot: RenderSnapshot):
        while True:
            try:
                self._queue.put(snapshot, timeout=self._poll_interval)
                return
            except queue.Full:
                if self._receiver_closed.is_set():
                    raise ChannelClosed("receiver closed while waiting for space")

    def _put_dropping(self, snapshot: RenderSnapshot):
        while True:
            try:
                self._queue.put_nowait(snapshot)
                return
            except queue.Full:
                try:
                    stale = self._queue.get_nowait()
                except queue.Empty:
                    continue
                self.dropped += 1
                logger.debug("Dropping snapshot for tick %d due to full queue", stale.tick)

    def receive(self, timeout: Optional[float] = None) -> RenderSnapshot:
        """Block until the next snapshot is available.

        Args:
            timeout: Seconds to wait; None waits until a snapshot arrives
                or the sender closes

        Raises:
            ChannelClosed: Sender closed and queue drained, or this
                receiver was closed
            TimeoutError: Nothing arrived within timeout
        """
        if self._receiver_closed.is_set():
            raise ChannelClosed("receive on a closed receiver")

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            wait = self._poll_interval
            if deadline is not None:
                wait = max(0.0, min(wait, deadline - time.monotonic()))
            try:
                return self._queue.get(timeout=wait)
            except queue.Empty:
                if self._sender_closed.is_set() and self._queue.empty():
                    raise ChannelClosed("sender closed")
                if deadline is not None and time.monotonic() >= deadline:
                    raise TimeoutError(f"No snapshot within {timeout} s")

    def close_sender(self):
        """Producer is done; queued snapshots remain receivable."""
        self._sender_closed.set()

    def close_receiver(self):
        """Consumer is gone; discard queued snapshots and fail future sends."""
        self._receiver_closed.set()
        self._drain()

    def _drain(self):
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def __iter__(self) -> Iterator[RenderSnapshot]:
        """Receive until the sender closes."""
        while True:
            try:
                yield self.receive()
            except ChannelClosed:
                return
