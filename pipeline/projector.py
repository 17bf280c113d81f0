from __future__ import annotations
import logging
from typing import Optional, Sequence

from detectors.types import LANDMARK_KEYS, FaceObservation, Rect
from overlay.face_view import FaceView, GeometryUpdate
from overlay.transform import PreviewGeometry, PreviewLayer, denormalize
from pipeline.ui_channel import UiChannel

logger = logging.getLogger(__name__)


class LandmarkProjector:
    """
    Converts the first detected face into preview-layer geometry and publishes
    it to the FaceView through the UI channel.

    Runs on the detection worker thread. Every call posts exactly one redraw
    request, whichever way it exits.
    """
    def __init__(self, face_view: FaceView, preview: PreviewLayer, ui: UiChannel):
        self.face_view = face_view
        self.preview = preview
        self.ui = ui

    def on_detection_complete(self, results: Optional[Sequence[FaceObservation]], error=None):
        try:
            if error is not None:
                logger.warning("Detection reported an error: %s", error)

            if not results:
                self.ui.post(self.face_view.clear)
                return

            update = self.project(results[0], self.preview.snapshot())
            self.ui.post(lambda: self.face_view.apply(update))
        finally:
            self.ui.post(self.face_view.set_needs_display)

    @staticmethod
    def convert_rect(rect: Rect, geometry: PreviewGeometry) -> Rect:
        origin = geometry.layer_point(rect.origin)
        corner = geometry.layer_point(rect.max_point)
        return Rect.from_points(origin, corner)

    @staticmethod
    def project(face: FaceObservation, geometry: PreviewGeometry) -> GeometryUpdate:
        box = face.bounding_box
        changes = {"bounding_box": LandmarkProjector.convert_rect(box, geometry)}

        landmarks = face.landmarks or {}
        for key in LANDMARK_KEYS:
            points = landmarks.get(key)
            if not points:
                continue
            changes[key] = tuple(geometry.layer_points(denormalize(p, box) for p in points))

        return GeometryUpdate(**changes)
