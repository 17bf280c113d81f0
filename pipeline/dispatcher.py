from __future__ import annotations
import logging
import queue
import threading
from typing import Optional

from detectors.base_detector import BaseDetector
from detectors.orientation import Orientation
from detectors.types import Frame
from pipeline.projector import LandmarkProjector

logger = logging.getLogger(__name__)

_STOP = object()


class FrameDispatcher:
    """
    Feeds camera frames to the detector one at a time on a single worker thread.

    submit() never blocks and never drops: frames queue up behind the one
    being detected.
    """
    def __init__(self, detector: BaseDetector, projector: LandmarkProjector,
                 orientation=Orientation.LEFT_MIRRORED):
        self.detector = detector
        self.projector = projector
        self.orientation = Orientation.parse(orientation)

        self._q: "queue.Queue[object]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

        self.processed = 0
        self.dropped = 0
        self.failed = 0

    # ---- worker lifecycle ----
    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name="video-data-queue", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0):
        """Stop after the frames already queued have been processed."""
        if self._thread is None:
            return
        self._q.put(_STOP)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Frame worker did not stop within %.1fs", timeout or 0.0)
        else:
            self._thread = None

    def pending(self) -> int:
        return self._q.qsize()

    def submit(self, frame: Frame):
        self._q.put(frame)

    def _run(self):
        while True:
            item = self._q.get()
            if item is _STOP:
                break
            try:
                self.process(item)
            except Exception:
                # Keep the worker alive for the next frame.
                logger.exception("Frame processing failed")

    # ---- per-frame work ----
    def process(self, frame: Optional[Frame]):
        buffer = frame.pixel_buffer() if frame is not None else None
        if buffer is None:
            self.dropped += 1
            return

        try:
            results = self.detector.detect(buffer, self.orientation)
        except Exception as e:
            self.failed += 1
            logger.error("Face detection failed on frame %s: %s", frame.index, e)
            logger.debug("Detection traceback", exc_info=True)
            return

        self.processed += 1
        self.projector.on_detection_complete(results, None)
