import cv2
import mediapipe as mp
import numpy as np
from .base_detector import BaseDetector
from .orientation import Orientation, orient
from .types import FaceObservation, Point, Rect

# Ordered outlines on the 468-point FaceMesh topology.
# "left"/"right" are the subject's, as in FACEMESH_LEFT_EYE / FACEMESH_RIGHT_EYE.
FACEMESH_GROUPS = {
    "left_eye": [362, 382, 381, 380, 374, 373, 390, 249, 263, 466, 388, 387, 386, 385, 384, 398],
    "right_eye": [33, 7, 163, 144, 145, 153, 154, 155, 133, 173, 157, 158, 159, 160, 161, 246],
    "left_eyebrow": [276, 283, 282, 295, 285, 300, 293, 334, 296, 336],
    "right_eyebrow": [46, 53, 52, 65, 55, 70, 63, 105, 66, 107],
    "nose": [168, 6, 197, 195, 5, 4, 1, 19, 94, 2, 98, 64, 48, 115, 220, 45, 275, 440, 344, 278, 294, 327],
    "outer_lips": [61, 146, 91, 181, 84, 17, 314, 405, 321, 375, 291, 409, 270, 269, 267, 0, 37, 39, 40, 185],
    "inner_lips": [78, 95, 88, 178, 87, 14, 317, 402, 318, 324, 308, 415, 310, 311, 312, 13, 82, 81, 80, 191],
    "face_contour": [10, 338, 297, 332, 284, 251, 389, 356, 454, 323, 361, 288, 397, 365, 379, 378,
                     400, 377, 152, 148, 176, 149, 150, 136, 172, 58, 132, 93, 234, 127, 162, 21,
                     54, 103, 67, 109],
}


def box_relative(pts, box: Rect):
    """Re-express image-normalized points relative to box."""
    bw = box.size.width or 1e-9
    bh = box.size.height or 1e-9
    return [Point((float(x) - box.origin.x) / bw, (float(y) - box.origin.y) / bh) for x, y in pts]


def observation_from_mesh(pts: np.ndarray) -> FaceObservation:
    """
    pts: Nx2 FaceMesh landmarks normalized to the whole (oriented) image.
    Box = extent of the mesh, clamped to the image.
    """
    x1, y1 = np.clip(pts.min(axis=0), 0.0, 1.0)
    x2, y2 = np.clip(pts.max(axis=0), 0.0, 1.0)
    box = Rect.from_xywh(x1, y1, x2 - x1, y2 - y1)

    groups = {}
    for key, idxs in FACEMESH_GROUPS.items():
        if len(pts) <= max(idxs):
            groups[key] = None
            continue
        groups[key] = box_relative(pts[idxs], box)

    return FaceObservation(bounding_box=box, landmarks=groups)


class MediaPipeMeshDetector(BaseDetector):
    def __init__(self, max_num_faces=1, min_detection_confidence=0.5,
                 min_tracking_confidence=0.5, mesh=None):
        if mesh is None:
            mesh = mp.solutions.face_mesh.FaceMesh(
                max_num_faces=max_num_faces,
                refine_landmarks=False,
                static_image_mode=False,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        self.mesh = mesh

    def detect(self, image, orientation=Orientation.UP):
        upright = orient(image, orientation)
        rgb = cv2.cvtColor(upright, cv2.COLOR_BGR2RGB)
        res = self.mesh.process(rgb)

        faces = []
        if res.multi_face_landmarks:
            for fl in res.multi_face_landmarks:
                pts = np.array([(lm.x, lm.y) for lm in fl.landmark], dtype=np.float64)
                if pts.size == 0:
                    continue
                faces.append(observation_from_mesh(pts))

        return faces

    def close(self):
        self.mesh.close()
