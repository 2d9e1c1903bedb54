# core/source.py
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Optional

import pyperclip

from airgrab.constants.tool_constants import AIR_WATCH_PREFIX
from airgrab.logging import add_context, get_logger

from .air import AirResource, parse_air
from .channel import HandoffChannel
from .errors import AirParseError, ChannelClosed

logger = get_logger(__name__)
add_context(logger, component="source")


def is_watch_candidate(text: str) -> bool:
    """
    True if `text` starts with "urn:air" (case-insensitive).

    Stricter than the parser, which also takes "urn:" and "air:" forms.
    """
    return text[: len(AIR_WATCH_PREFIX)].lower() == AIR_WATCH_PREFIX


def accept_any(text: str) -> bool:
    """Admit every snippet and let the parser decide."""
    return True


def produce(
    snippets: Iterable[str],
    channel: HandoffChannel[AirResource],
    *,
    accept: Callable[[str], bool] = is_watch_candidate,
) -> int:
    """
    Producer loop: parse accepted snippets and hand each AIR to the consumer.

    Snippets rejected by `accept` are skipped silently; unparsable ones are
    logged and dropped. The channel is closed when `snippets` is exhausted.

    Returns
    -------
    int
        Number of resources handed over.
    """
    sent = 0
    try:
        for text in snippets:
            if not accept(text):
                continue
            try:
                resource = parse_air(text)
            except AirParseError as e:
                logger.error("Invalid AIR: %s (%s)", text.strip(), e)
                continue
            try:
                channel.send(resource)
            except ChannelClosed:
                logger.warning("Consumer gone; dropping %s", resource)
                break
            sent += 1
    finally:
        channel.close()
    return sent


class ClipboardWatcher:
    """
    Iterate over clipboard text changes.

    The clipboard is polled every `interval` seconds; a value is yielded each
    time the text differs from the previous read. The content present when
    iteration starts is not yielded. `stop()` ends iteration from any thread.

    Parameters
    ----------
    interval : float, default=0.5
        Seconds between polls.
    paste : Callable[[], str], default=pyperclip.paste
        Clipboard reader.
    """

    def __init__(self, interval: float = 0.5, paste: Optional[Callable[[], str]] = None) -> None:
        self.interval = interval
        self._paste = paste if paste is not None else pyperclip.paste
        self._stop = threading.Event()

    @staticmethod
    def check_available() -> None:
        """
        Raise pyperclip.PyperclipException if no clipboard mechanism exists.
        """
        pyperclip.paste()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def _read(self, failing: bool) -> tuple[Optional[str], bool]:
        try:
            return self._paste() or "", False
        except Exception as e:
            # Warn once per failure streak; keep polling.
            if not failing:
                logger.warning("Clipboard read failed: %s", e)
            return None, True

    def __iter__(self) -> Iterator[str]:
        logger.info("Starting clipboard watcher")
        last, failing = self._read(False)
        while not self._stop.wait(self.interval):
            text, failing = self._read(failing)
            if text is None or text == last:
                continue
            last = text
            yield text
        logger.info("Clipboard watcher stopped")


__all__ = ["is_watch_candidate", "accept_any", "produce", "ClipboardWatcher"]
