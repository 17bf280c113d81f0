import cv2
import numpy as np

from .face_view import FaceView

# (B, G, R)
GROUP_COLORS = {
    "left_eye": (0, 255, 0),
    "right_eye": (0, 255, 0),
    "left_eyebrow": (255, 200, 0),
    "right_eyebrow": (255, 200, 0),
    "nose": (0, 200, 255),
    "outer_lips": (0, 0, 255),
    "inner_lips": (0, 0, 255),
    "face_contour": (255, 255, 0),
}

# Groups drawn as open curves.
OPEN_GROUPS = {"left_eyebrow", "right_eyebrow", "face_contour"}

BOX_COLOR = (255, 0, 0)


class FaceRenderer:
    """
    Takes preview canvas + FaceView -> returns canvas with the overlay drawn.
    """
    def __init__(self, thickness=2):
        self.thickness = thickness

    def apply(self, canvas, view: FaceView):
        out = canvas.copy()
        if view.is_hidden:
            return out

        g = view.geometry
        if g.bounding_box is not None:
            x1, y1, x2, y2 = g.bounding_box.as_xyxy()
            cv2.rectangle(out, (x1, y1), (x2, y2), BOX_COLOR, self.thickness)

        for key, color in GROUP_COLORS.items():
            pts = g.group(key)
            if not pts:
                continue
            poly = np.array([[int(round(p.x)), int(round(p.y))] for p in pts], np.int32)
            cv2.polylines(out, [poly], isClosed=key not in OPEN_GROUPS,
                          color=color, thickness=self.thickness)

        return out
