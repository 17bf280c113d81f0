from ultralytics import YOLO
from .base_detector import BaseDetector
from .orientation import Orientation, orient
from .types import FaceObservation, Rect

class YOLOFaceDetector(BaseDetector):
    """Face boxes only; the projector keeps whatever landmarks it had."""
    def __init__(self, model_path="pretrained_model.pt", conf=0.25, model=None):
        self.model = model if model is not None else YOLO(model_path)
        self.conf = conf

    def detect(self, image, orientation=Orientation.UP):
        upright = orient(image, orientation)
        h, w = upright.shape[:2]
        results = self.model(upright, stream=False, conf=self.conf, verbose=False)[0]
        faces = []
        for box in results.boxes:
            x1, y1, x2, y2 = box.xyxy[0].tolist()
            x1, x2 = max(0.0, x1) / w, min(float(w), x2) / w
            y1, y2 = max(0.0, y1) / h, min(float(h), y2) / h
            faces.append(FaceObservation(
                bounding_box=Rect.from_xywh(x1, y1, x2 - x1, y2 - y1),
                landmarks=None,   # YOLO baseline has no landmarks
                confidence=float(box.conf[0]),
            ))
        faces.sort(key=lambda f: f.confidence, reverse=True)
        return faces
