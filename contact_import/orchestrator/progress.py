"""Progress events published after every attempted batch."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..models import ImportProgress

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[ImportProgress], None]


class ProgressReporter:
    """Emits cumulative ``{current, total}`` pairs to an optional sink."""

    def __init__(self, total: int, batch_size: int, sink: Optional[ProgressCallback] = None) -> None:
        self._total = total
        self._batch_size = batch_size
        self._sink = sink
        self._last: Optional[ImportProgress] = None

    @property
    def last(self) -> Optional[ImportProgress]:
        return self._last

    @property
    def current(self) -> int:
        return self._last.current if self._last else 0

    def report(self, batch_index: int) -> ImportProgress:
        progress = ImportProgress(
            current=min((batch_index + 1) * self._batch_size, self._total),
            total=self._total,
        )
        self._last = progress
        LOGGER.debug("Progress %s/%s", progress.current, progress.total)
        if self._sink is not None:
            try:
                self._sink(progress)
            except Exception:
                # Committed batches stay counted; a broken sink only loses the event.
                LOGGER.exception("Progress callback failed at %s/%s", progress.current, progress.total)
        return progress


class ProgressRecorder:
    """Progress sink that keeps every event, useful for tests and previews."""

    def __init__(self) -> None:
        self.events: List[ImportProgress] = []

    def __call__(self, progress: ImportProgress) -> None:
        self.events.append(progress)


def log_progress(progress: ImportProgress) -> None:
    LOGGER.info("Imported %s of %s contacts", progress.current, progress.total)


__all__ = ["ProgressCallback", "ProgressRecorder", "ProgressReporter", "log_progress"]
