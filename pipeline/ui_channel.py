from __future__ import annotations
import logging
import queue
from typing import Callable

logger = logging.getLogger(__name__)


class UiChannel:
    """
    Single-consumer queue of callables. Any thread may post();
    only the UI-owning thread calls drain().
    """
    def __init__(self):
        self._q: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def post(self, fn: Callable[[], None]) -> None:
        self._q.put(fn)

    def pending(self) -> int:
        return self._q.qsize()

    def drain(self, limit=None) -> int:
        """Run queued callables in posting order. Returns how many ran."""
        ran = 0
        while limit is None or ran < limit:
            try:
                fn = self._q.get_nowait()
            except queue.Empty:
                break
            ran += 1
            try:
                fn()
            except Exception:
                logger.exception("UI update failed")
        return ran
