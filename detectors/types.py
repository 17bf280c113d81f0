from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


# Landmark groups every backend may report, in drawing order.
LANDMARK_KEYS: Tuple[str, ...] = (
    "left_eye",
    "right_eye",
    "left_eyebrow",
    "right_eyebrow",
    "nose",
    "outer_lips",
    "inner_lips",
    "face_contour",
)


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    origin: Point
    size: Size

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> "Rect":
        return cls(Point(float(x), float(y)), Size(float(w), float(h)))

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "Rect":
        """Rect spanning two corner points, in any order."""
        x1, x2 = sorted((a.x, b.x))
        y1, y2 = sorted((a.y, b.y))
        return cls(Point(x1, y1), Size(x2 - x1, y2 - y1))

    @property
    def max_point(self) -> Point:
        return Point(self.origin.x + self.size.width, self.origin.y + self.size.height)

    def as_xyxy(self) -> List[int]:
        p = self.max_point
        return [int(round(self.origin.x)), int(round(self.origin.y)), int(round(p.x)), int(round(p.y))]


LandmarkGroups = Dict[str, Optional[Sequence[Point]]]


@dataclass(frozen=True)
class FaceObservation:
    """
    One detected face as handed over by a detector backend.

    - bounding_box is normalized to the oriented image (top-left origin).
    - landmark points are normalized to bounding_box, not to the image.
    - landmarks is None when the backend does not produce landmarks at all.
    """
    bounding_box: Rect
    landmarks: Optional[LandmarkGroups] = None
    confidence: float = 1.0


@dataclass
class Frame:
    """A single camera frame. image is None when the capture gave nothing back."""
    image: Optional[np.ndarray]
    index: int = 0
    timestamp: float = 0.0

    def pixel_buffer(self) -> Optional[np.ndarray]:
        img = self.image
        if img is None or not isinstance(img, np.ndarray) or img.size == 0:
            return None
        return img
