from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Optional, Tuple

from detectors.types import LANDMARK_KEYS, Point, Rect

Points = Tuple[Point, ...]


@dataclass(frozen=True)
class FaceGeometry:
    """Everything the overlay draws, in preview-layer pixels."""
    bounding_box: Optional[Rect] = None
    left_eye: Points = ()
    right_eye: Points = ()
    left_eyebrow: Points = ()
    right_eyebrow: Points = ()
    nose: Points = ()
    outer_lips: Points = ()
    inner_lips: Points = ()
    face_contour: Points = ()

    @classmethod
    def empty(cls) -> "FaceGeometry":
        return cls()

    def group(self, key: str) -> Points:
        return getattr(self, key)


@dataclass(frozen=True)
class GeometryUpdate:
    """
    One frame's worth of converted geometry.
    A field left as None means "keep what the overlay already has".
    """
    bounding_box: Optional[Rect] = None
    left_eye: Optional[Points] = None
    right_eye: Optional[Points] = None
    left_eyebrow: Optional[Points] = None
    right_eyebrow: Optional[Points] = None
    nose: Optional[Points] = None
    outer_lips: Optional[Points] = None
    inner_lips: Optional[Points] = None
    face_contour: Optional[Points] = None

    def updated_fields(self):
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


def apply_update(previous: FaceGeometry, update: GeometryUpdate) -> FaceGeometry:
    changes = {name: getattr(update, name) for name in update.updated_fields()}
    if not changes:
        return previous
    return replace(previous, **changes)


class FaceView:
    """
    Overlay state owned by the UI thread.
    Only the UI channel drain should call the mutating methods.
    """
    def __init__(self):
        self.geometry = FaceGeometry.empty()
        self.is_hidden = False
        self.redraw_requests = 0

    # Convenience accessors mirroring the geometry fields.
    def __getattr__(self, name):
        if name in LANDMARK_KEYS or name == "bounding_box":
            return getattr(self.geometry, name)
        raise AttributeError(name)

    def apply(self, update: GeometryUpdate):
        self.geometry = apply_update(self.geometry, update)

    def clear(self):
        self.geometry = FaceGeometry.empty()

    def set_needs_display(self):
        self.redraw_requests += 1

    def toggle_hidden(self):
        self.is_hidden = not self.is_hidden
        self.set_needs_display()
