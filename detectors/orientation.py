from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple

import cv2
import numpy as np


class Orientation(str, Enum):
    """
    How the camera buffer is stored relative to how it should be shown.
    Same eight cases as EXIF orientation tags.
    """
    UP = "up"
    UP_MIRRORED = "up_mirrored"
    DOWN = "down"
    DOWN_MIRRORED = "down_mirrored"
    LEFT = "left"
    LEFT_MIRRORED = "left_mirrored"
    RIGHT = "right"
    RIGHT_MIRRORED = "right_mirrored"

    @classmethod
    def parse(cls, value) -> "Orientation":
        if isinstance(value, Orientation):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for o in cls:
            if o.value == key:
                return o
        raise ValueError(f"Unknown orientation: {value!r}")


# orientation -> (cv2 rotate code or None, mirror horizontally after rotating)
_CORRECTIONS = {
    Orientation.UP: (None, False),
    Orientation.UP_MIRRORED: (None, True),
    Orientation.DOWN: (cv2.ROTATE_180, False),
    Orientation.DOWN_MIRRORED: (cv2.ROTATE_180, True),
    Orientation.LEFT: (cv2.ROTATE_90_COUNTERCLOCKWISE, False),
    Orientation.LEFT_MIRRORED: (cv2.ROTATE_90_CLOCKWISE, True),
    Orientation.RIGHT: (cv2.ROTATE_90_CLOCKWISE, False),
    Orientation.RIGHT_MIRRORED: (cv2.ROTATE_90_COUNTERCLOCKWISE, True),
}


def orient(image: np.ndarray, orientation: Orientation) -> np.ndarray:
    """Return the image as it should be displayed. Never modifies the input."""
    rotate_code, mirror = _CORRECTIONS[Orientation.parse(orientation)]
    out = image
    if rotate_code is not None:
        out = cv2.rotate(out, rotate_code)
    if mirror:
        out = cv2.flip(out, 1)
    if out is image:
        out = image.copy()
    return out


def swaps_axes(orientation: Orientation) -> bool:
    rotate_code, _ = _CORRECTIONS[Orientation.parse(orientation)]
    return rotate_code in (cv2.ROTATE_90_CLOCKWISE, cv2.ROTATE_90_COUNTERCLOCKWISE)


def oriented_size(width: int, height: int, orientation: Optional[Orientation]) -> Tuple[int, int]:
    if orientation is not None and swaps_axes(orientation):
        return height, width
    return width, height
