from __future__ import annotations

import numpy as np
import pytest

from detectors.base_detector import BaseDetector
from detectors.types import FaceObservation, Frame, Point, Rect
from overlay.face_view import FaceView
from overlay.transform import PreviewLayer
from pipeline.projector import LandmarkProjector
from pipeline.ui_channel import UiChannel


class RecordingUiChannel(UiChannel):
    """UiChannel that also remembers what was posted."""
    def __init__(self):
        super().__init__()
        self.posted = []

    def post(self, fn):
        self.posted.append(fn)
        super().post(fn)


class FakeDetector(BaseDetector):
    def __init__(self, results=None, error=None):
        self.results = results if results is not None else []
        self.error = error
        self.calls = []

    def detect(self, image, orientation=None):
        self.calls.append((image.shape, orientation))
        if self.error is not None:
            raise self.error
        return list(self.results)


def face(box=(0.2, 0.2, 0.3, 0.3), **groups):
    landmarks = {k: [Point(*p) for p in pts] for k, pts in groups.items()}
    return FaceObservation(bounding_box=Rect.from_xywh(*box), landmarks=landmarks)


@pytest.fixture
def make_face():
    return face


@pytest.fixture
def unit_layer():
    # Square layer over square content: layer_point(p) == p * 100.
    return PreviewLayer(100, 100, 100, 100)


@pytest.fixture
def ui():
    return RecordingUiChannel()


@pytest.fixture
def face_view():
    return FaceView()


@pytest.fixture
def projector(face_view, unit_layer, ui):
    return LandmarkProjector(face_view, unit_layer, ui)


@pytest.fixture
def frame():
    return Frame(image=np.zeros((48, 64, 3), dtype=np.uint8), index=7)


@pytest.fixture
def fake_detector():
    return FakeDetector
