"""Single-producer/single-consumer channel between threads."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from typing import Generic, TypeVar

T = TypeVar("T")

_END = object()


class ChannelClosed(Exception):
    """The other side of the channel has gone away."""


class _State:
    def __init__(self) -> None:
        self.queue: queue.Queue = queue.Queue()  # unbounded
        self.sender_closed = threading.Event()
        self.receiver_closed = threading.Event()


class Sender(Generic[T]):
    """Producer half. Safe to use from a different thread than the Receiver."""

    def __init__(self, state: _State):
        self._state = state

    @property
    def is_closed(self) -> bool:
        """True once the receiver has been dropped."""
        return self._state.receiver_closed.is_set()

    def send(self, item: T) -> None:
        """
        Enqueue an item. Never blocks.

        Raises:
            ChannelClosed: If the receiver has been closed, or this sender was.
        """
        if self._state.receiver_closed.is_set():
            raise ChannelClosed("receiver closed")
        if self._state.sender_closed.is_set():
            raise ChannelClosed("sender closed")
        self._state.queue.put(item)

    def close(self) -> None:
        """Signal end-of-stream. Items already sent are still delivered."""
        if not self._state.sender_closed.is_set():
            self._state.sender_closed.set()
            self._state.queue.put(_END)


class Receiver(Generic[T]):
    """Consumer half. Iterating yields items in FIFO order until end-of-stream."""

    def __init__(self, state: _State):
        self._state = state
        self._drained = False

    def recv(self, timeout: float | None = None) -> T:
        """
        Block until the next item.

        Raises:
            ChannelClosed: End-of-stream (sender closed and buffer empty) or
                this receiver was closed.
            TimeoutError: No item within ``timeout`` seconds.
        """
        if self._drained or self._state.receiver_closed.is_set():
            raise ChannelClosed("channel drained")
        try:
            item = self._state.queue.get(timeout=timeout)
        except queue.Empty as e:
            raise TimeoutError(f"no item within {timeout}s") from e
        if item is _END:
            self._drained = True
            raise ChannelClosed("sender closed")
        return item

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.recv()
            except ChannelClosed:
                return

    def close(self) -> None:
        """Drop the receiver; the next send fails with ChannelClosed."""
        self._state.receiver_closed.set()
        # Unblock a consumer parked in recv() on another thread
        self._state.queue.put(_END)

    @property
    def is_closed(self) -> bool:
        return self._state.receiver_closed.is_set()


def open_channel() -> tuple[Sender, Receiver]:
    """Create a connected (Sender, Receiver) pair."""
    state = _State()
    return Sender(state), Receiver(state)
