# core/channel.py
from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import Generic, Optional, TypeVar

from .errors import ChannelClosed

T = TypeVar("T")

_EMPTY = object()


class HandoffChannel(Generic[T]):
    """
    Zero-capacity rendezvous channel between one producer and one consumer.

    `send` returns only after a receiver has taken the item, so a busy
    consumer blocks the producer. Items are delivered in send order.

    Closing wakes every waiter. An item that was offered but not yet taken
    when the channel closes is withdrawn and its `send` raises ChannelClosed.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: object = _EMPTY
        self._closed = False
        self._sent = 0
        self._taken = 0

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def send(self, item: T) -> None:
        """
        Offer `item` and block until it is received.

        Raises
        ------
        ChannelClosed
            If the channel is closed before the item is taken.
        """
        with self._cond:
            while self._item is not _EMPTY and not self._closed:
                self._cond.wait()
            if self._closed:
                raise ChannelClosed("send on closed channel")

            self._item = item
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            while self._taken < ticket and not self._closed:
                self._cond.wait()
            if self._taken < ticket:
                self._item = _EMPTY
                self._cond.notify_all()
                raise ChannelClosed("channel closed before the item was received")

    def receive(self, timeout: Optional[float] = None) -> T:
        """
        Block until an item is offered and take it.

        Raises
        ------
        ChannelClosed
            If the channel is closed and nothing is pending.
        TimeoutError
            If `timeout` elapses first.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._item is not _EMPTY or self._closed, timeout):
                raise TimeoutError("no item received in time")
            if self._item is _EMPTY:
                raise ChannelClosed("receive on closed channel")
            item = self._item
            self._item = _EMPTY
            self._taken += 1
            self._cond.notify_all()
            return item  # type: ignore[return-value]

    def close(self) -> None:
        """Close the channel. Idempotent."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.receive()
            except ChannelClosed:
                return


__all__ = ["HandoffChannel"]
