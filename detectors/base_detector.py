from typing import List

from .orientation import Orientation
from .types import FaceObservation


class BaseDetector:
    """
    All detectors take a raw BGR camera buffer plus the orientation it was
    captured in, and return a list of FaceObservation (best face first):
        - bounding_box normalized to the oriented image
        - landmarks normalized to bounding_box, or None
    An empty list means no face. Failures are raised, not returned.
    """
    def detect(self, image, orientation: Orientation = Orientation.UP) -> List[FaceObservation]:
        raise NotImplementedError

    def close(self) -> None:
        pass
