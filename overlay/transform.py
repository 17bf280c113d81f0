from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Tuple

import cv2
import numpy as np

from detectors.types import Point, Rect, Size


def denormalize(point: Point, box: Rect) -> Point:
    """
    Box-relative normalized point -> image-normalized point.
    (0,0) lands on box.origin, (1,1) on box.origin + box.size.
    """
    return Point(
        box.origin.x + point.x * box.size.width,
        box.origin.y + point.y * box.size.height,
    )


class VideoGravity(str, Enum):
    RESIZE_ASPECT_FILL = "resize_aspect_fill"
    RESIZE_ASPECT = "resize_aspect"
    RESIZE = "resize"

    @classmethod
    def parse(cls, value) -> "VideoGravity":
        if isinstance(value, VideoGravity):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for g in cls:
            if g.value == key:
                return g
        raise ValueError(f"Unknown video gravity: {value!r}")


@dataclass(frozen=True)
class PreviewGeometry:
    """
    Where the video content sits inside the preview layer.

    bounds: layer rect in pixels.
    content_size: oriented frame size in pixels.
    """
    bounds: Rect
    content_size: Size
    gravity: VideoGravity = VideoGravity.RESIZE_ASPECT_FILL

    def scale(self) -> Tuple[float, float]:
        bw, bh = self.bounds.size.width, self.bounds.size.height
        cw = max(self.content_size.width, 1e-9)
        ch = max(self.content_size.height, 1e-9)
        sx, sy = bw / cw, bh / ch
        if self.gravity is VideoGravity.RESIZE:
            return sx, sy
        if self.gravity is VideoGravity.RESIZE_ASPECT:
            s = min(sx, sy)
        else:
            s = max(sx, sy)
        return s, s

    def video_rect(self) -> Rect:
        """Rect the scaled content occupies in layer pixels (may extend past bounds)."""
        sx, sy = self.scale()
        dw = self.content_size.width * sx
        dh = self.content_size.height * sy
        ox = self.bounds.origin.x + (self.bounds.size.width - dw) / 2.0
        oy = self.bounds.origin.y + (self.bounds.size.height - dh) / 2.0
        return Rect.from_xywh(ox, oy, dw, dh)

    def layer_point(self, point: Point) -> Point:
        v = self.video_rect()
        return Point(v.origin.x + point.x * v.size.width, v.origin.y + point.y * v.size.height)

    def layer_points(self, points: Iterable[Point]) -> List[Point]:
        v = self.video_rect()
        return [Point(v.origin.x + p.x * v.size.width, v.origin.y + p.y * v.size.height) for p in points]


class PreviewLayer:
    """
    Live device-to-layer mapping for the preview window.

    The geometry is an immutable snapshot replaced on every resize, so the
    worker thread can read it without locking. Callers that convert many
    points for one frame should take one snapshot() and use it throughout.
    """
    def __init__(self, width, height, content_width=None, content_height=None,
                 gravity=VideoGravity.RESIZE_ASPECT_FILL):
        cw = content_width if content_width is not None else width
        ch = content_height if content_height is not None else height
        self._geometry = PreviewGeometry(
            bounds=Rect.from_xywh(0, 0, width, height),
            content_size=Size(float(cw), float(ch)),
            gravity=VideoGravity.parse(gravity),
        )

    def snapshot(self) -> PreviewGeometry:
        return self._geometry

    @property
    def bounds(self) -> Rect:
        return self._geometry.bounds

    def set_bounds(self, width, height, x=0, y=0):
        g = self._geometry
        new_bounds = Rect.from_xywh(x, y, width, height)
        if new_bounds != g.bounds:
            self._geometry = replace(g, bounds=new_bounds)

    def set_content_size(self, width, height):
        g = self._geometry
        size = Size(float(width), float(height))
        if size != g.content_size:
            self._geometry = replace(g, content_size=size)

    def layer_point(self, point: Point) -> Point:
        return self._geometry.layer_point(point)

    def render(self, image: np.ndarray) -> np.ndarray:
        """Draw the oriented frame into a canvas the size of the layer."""
        h, w = image.shape[:2]
        self.set_content_size(w, h)
        g = self._geometry
        bw, bh = int(round(g.bounds.size.width)), int(round(g.bounds.size.height))
        canvas = np.zeros((max(bh, 1), max(bw, 1)) + image.shape[2:], dtype=image.dtype)

        v = g.video_rect()
        dw, dh = max(int(round(v.size.width)), 1), max(int(round(v.size.height)), 1)
        scaled = cv2.resize(image, (dw, dh), interpolation=cv2.INTER_LINEAR)

        # Video rect relative to the canvas, then crop whatever falls outside.
        ox = int(round(v.origin.x - g.bounds.origin.x))
        oy = int(round(v.origin.y - g.bounds.origin.y))
        x1, y1 = max(ox, 0), max(oy, 0)
        x2, y2 = min(ox + dw, canvas.shape[1]), min(oy + dh, canvas.shape[0])
        if x2 > x1 and y2 > y1:
            canvas[y1:y2, x1:x2] = scaled[y1 - oy:y2 - oy, x1 - ox:x2 - ox]
        return canvas
