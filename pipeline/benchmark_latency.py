# pipeline/benchmark_latency.py
from __future__ import annotations
import json
import logging
import os
import time

import cv2

from detectors.base_detector import BaseDetector
from detectors.orientation import Orientation, oriented_size
from detectors.types import Frame
from metrics.perf import StageTimer
from overlay.face_view import FaceView
from overlay.transform import PreviewLayer
from pipeline.dispatcher import FrameDispatcher
from pipeline.projector import LandmarkProjector
from pipeline.ui_channel import UiChannel

logger = logging.getLogger(__name__)


class _TimedDetector(BaseDetector):
    def __init__(self, inner, timer: StageTimer):
        self.inner = inner
        self.timer = timer
        self.faces = 0

    def detect(self, image, orientation=Orientation.UP):
        with self.timer.time("detect"):
            faces = self.inner.detect(image, orientation)
        self.faces += 1 if faces else 0
        return faces


class _TimedProjector(LandmarkProjector):
    def __init__(self, face_view, preview, ui, timer: StageTimer):
        super().__init__(face_view, preview, ui)
        self.timer = timer

    def on_detection_complete(self, results, error=None):
        with self.timer.time("project"):
            super().on_detection_complete(results, error)


def benchmark_video_latency(
    detector,
    video_path,
    num_frames=300,
    warmup=30,
    layer_size=(480, 640),
    orientation=Orientation.UP,
):
    """
    Run detection + projection synchronously over a video file.
    The projector publishes into a real FaceView, drained after every frame.
    """
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open {video_path}")

    orientation = Orientation.parse(orientation)

    # ---- Warmup ----
    for _ in range(warmup):
        ret, image = cap.read()
        if not ret:
            break
        _ = detector.detect(image, orientation)

    timer = StageTimer()
    w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)) or layer_size[0]
    h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) or layer_size[1]
    content_w, content_h = oriented_size(w, h, orientation)
    preview = PreviewLayer(layer_size[0], layer_size[1], content_w, content_h)
    face_view = FaceView()
    ui = UiChannel()
    timed = _TimedDetector(detector, timer)
    dispatcher = FrameDispatcher(timed, _TimedProjector(face_view, preview, ui, timer), orientation)

    frames = 0
    while frames < num_frames:
        ret, image = cap.read()
        if not ret:
            break

        with timer.time("total"):
            dispatcher.process(Frame(image=image, index=frames, timestamp=time.time()))
        ui.drain()
        frames += 1

    cap.release()

    summary = timer.summary()
    return {
        "frames": frames,
        "faces": timed.faces,
        "failed": dispatcher.failed,
        "detect": summary.get("detect"),
        "project": summary.get("project"),
        "total": summary.get("total"),
    }


def save_benchmark(result, detector_name, out_dir="results"):
    os.makedirs(out_dir, exist_ok=True)
    out = dict(result)
    out["detector"] = detector_name
    out["timestamp"] = time.time()

    fname = os.path.join(out_dir, f"latency_{detector_name}.json")
    with open(fname, "w") as f:
        json.dump(out, f, indent=4)

    logger.info("Saved benchmark to %s", fname)
    return fname
