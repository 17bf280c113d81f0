from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from detectors.orientation import Orientation
from overlay.transform import VideoGravity

logger = logging.getLogger(__name__)

BACKENDS = ("mediapipe", "yolo")


@dataclass(frozen=True)
class CameraConfig:
    device: int = 0
    width: int = 640
    height: int = 480
    # Front camera mounted sideways and mirrored.
    orientation: Orientation = Orientation.LEFT_MIRRORED


@dataclass(frozen=True)
class DetectorConfig:
    backend: str = "mediapipe"  # mediapipe / yolo
    max_num_faces: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    yolo_weights: str = "weights/pretrained_model.pt"


@dataclass(frozen=True)
class PreviewConfig:
    window_name: str = "FaceLasers"
    width: int = 480
    height: int = 640
    gravity: VideoGravity = VideoGravity.RESIZE_ASPECT_FILL
    line_thickness: int = 2


@dataclass(frozen=True)
class AppConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)


def _deep_get(d: Dict[str, Any], keys: list, default: Any = None) -> Any:
    cur: Any = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
    return cur if cur is not None else default


def _as_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)


def _as_float(v: Any, default: float) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(default)


def _as_str(v: Any, default: str = "") -> str:
    return str(v) if v is not None else str(default)


def _as_orientation(v: Any, default: Orientation) -> Orientation:
    try:
        return Orientation.parse(v)
    except ValueError:
        logger.warning("Ignoring unknown orientation %r, using %s", v, default.value)
        return default


def _as_gravity(v: Any, default: VideoGravity) -> VideoGravity:
    try:
        return VideoGravity.parse(v)
    except ValueError:
        logger.warning("Ignoring unknown video gravity %r, using %s", v, default.value)
        return default


def _positive(v: int, default: int) -> int:
    return v if v > 0 else default


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Read config from a JSON file. Missing file, malformed JSON or bad values
    fall back to defaults so the demo still starts.
    """
    if not path:
        return AppConfig()
    p = Path(path).expanduser().resolve()
    if not p.exists():
        logger.warning("Config file %s not found, using defaults", p)
        return AppConfig()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read config %s (%s), using defaults", p, e)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    d_cam, d_det, d_prev = CameraConfig(), DetectorConfig(), PreviewConfig()

    backend = _as_str(_deep_get(raw, ["detector", "backend"], d_det.backend)).strip().lower()
    if backend not in BACKENDS:
        logger.warning("Ignoring unknown detector backend %r, using %s", backend, d_det.backend)
        backend = d_det.backend

    return AppConfig(
        camera=CameraConfig(
            device=_as_int(_deep_get(raw, ["camera", "device"], d_cam.device), d_cam.device),
            width=_positive(_as_int(_deep_get(raw, ["camera", "width"], d_cam.width), d_cam.width), d_cam.width),
            height=_positive(_as_int(_deep_get(raw, ["camera", "height"], d_cam.height), d_cam.height), d_cam.height),
            orientation=_as_orientation(_deep_get(raw, ["camera", "orientation"], d_cam.orientation), d_cam.orientation),
        ),
        detector=DetectorConfig(
            backend=backend,
            max_num_faces=_positive(
                _as_int(_deep_get(raw, ["detector", "max_num_faces"], d_det.max_num_faces), d_det.max_num_faces),
                d_det.max_num_faces,
            ),
            min_detection_confidence=_as_float(
                _deep_get(raw, ["detector", "min_detection_confidence"], d_det.min_detection_confidence),
                d_det.min_detection_confidence,
            ),
            min_tracking_confidence=_as_float(
                _deep_get(raw, ["detector", "min_tracking_confidence"], d_det.min_tracking_confidence),
                d_det.min_tracking_confidence,
            ),
            yolo_weights=_as_str(_deep_get(raw, ["detector", "yolo_weights"], d_det.yolo_weights), d_det.yolo_weights),
        ),
        preview=PreviewConfig(
            window_name=_as_str(_deep_get(raw, ["preview", "window_name"], d_prev.window_name), d_prev.window_name),
            width=_positive(_as_int(_deep_get(raw, ["preview", "width"], d_prev.width), d_prev.width), d_prev.width),
            height=_positive(_as_int(_deep_get(raw, ["preview", "height"], d_prev.height), d_prev.height), d_prev.height),
            gravity=_as_gravity(_deep_get(raw, ["preview", "gravity"], d_prev.gravity), d_prev.gravity),
            line_thickness=_positive(
                _as_int(_deep_get(raw, ["preview", "line_thickness"], d_prev.line_thickness), d_prev.line_thickness),
                d_prev.line_thickness,
            ),
        ),
    )
