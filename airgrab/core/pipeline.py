# core/pipeline.py
from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

from airgrab.constants.config_constants import DownloadPaths
from airgrab.logging import get_logger
from airgrab.misc.progress import ProgressFactory, transfer_progress

from .air import AirResource
from .channel import HandoffChannel
from .client import CivitaiClient
from .orchestrator import DownloadResult, download_models
from .source import is_watch_candidate, produce

logger = get_logger(__name__)


@dataclass
class PipelineReport:
    """What one pipeline run did."""

    forwarded: int = 0
    results: list[DownloadResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


class Pipeline:
    """
    One producer thread and one consumer thread joined by a handoff channel.

    The producer parses `snippets` and sends AIRs; the consumer resolves and
    downloads them one at a time. The run ends when both threads exit: the
    producer when `snippets` is exhausted, the consumer when the channel is
    closed and drained.
    """

    def __init__(
        self,
        snippets: Iterable[str],
        client: CivitaiClient,
        paths: DownloadPaths,
        *,
        accept: Callable[[str], bool] = is_watch_candidate,
        progress_factory: ProgressFactory = transfer_progress,
    ) -> None:
        self.snippets = snippets
        self.client = client
        self.paths = paths
        self.accept = accept
        self.progress_factory = progress_factory
        self.channel: HandoffChannel[AirResource] = HandoffChannel()
        self.report = PipelineReport()
        self._threads: list[threading.Thread] = []

    def _run_producer(self) -> None:
        self.report.forwarded = produce(self.snippets, self.channel, accept=self.accept)

    def _run_consumer(self) -> None:
        try:
            self.report.results = download_models(
                self.client, self.paths, self.channel, progress_factory=self.progress_factory
            )
        finally:
            # Unblocks a producer still waiting on send.
            self.channel.close()

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("pipeline already started")
        self._threads = [
            threading.Thread(target=self._run_producer, name="air-producer", daemon=True),
            threading.Thread(target=self._run_consumer, name="air-consumer", daemon=True),
        ]
        for t in self._threads:
            t.start()

    def join(self, poll: float = 0.5) -> PipelineReport:
        """
        Wait for both threads. Joins in short slices so KeyboardInterrupt
        reaches the calling thread.
        """
        for t in self._threads:
            while t.is_alive():
                t.join(poll)
        return self.report

    def close(self) -> None:
        """Stop accepting items; the consumer finishes the item in hand."""
        self.channel.close()
        stop: Optional[Any] = getattr(self.snippets, "stop", None)
        if callable(stop):
            stop()

    def run(self) -> PipelineReport:
        self.start()
        try:
            return self.join()
        except KeyboardInterrupt:
            logger.warning("Interrupted; shutting down")
            self.close()
            raise


def run_pipeline(
    snippets: Iterable[str],
    client: CivitaiClient,
    paths: DownloadPaths,
    *,
    accept: Callable[[str], bool] = is_watch_candidate,
    progress_factory: ProgressFactory = transfer_progress,
) -> PipelineReport:
    """Run a Pipeline to completion and return its report."""
    paths.ensure_root()
    return Pipeline(snippets, client, paths, accept=accept, progress_factory=progress_factory).run()


__all__ = ["Pipeline", "PipelineReport", "run_pipeline"]
