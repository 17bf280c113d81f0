import logging
import time

import cv2

from config import AppConfig
from detectors.orientation import oriented_size, orient
from detectors.types import Frame
from overlay.face_view import FaceView
from overlay.renderer import FaceRenderer
from overlay.transform import PreviewLayer
from pipeline.dispatcher import FrameDispatcher
from pipeline.projector import LandmarkProjector
from pipeline.ui_channel import UiChannel

logger = logging.getLogger(__name__)


def _window_size(window_name, fallback):
    try:
        _, _, w, h = cv2.getWindowImageRect(window_name)
    except cv2.error:
        return fallback
    if w <= 0 or h <= 0:
        return fallback
    return w, h


def offer_frame(dispatcher, frame):
    """
    Hand a camera frame to the dispatcher unless one is already waiting.
    Late frames are dropped here, on the camera side, so at most one frame
    queues behind the one being detected.
    """
    if dispatcher.pending() > 0:
        return False
    dispatcher.submit(frame)
    return True


def run_realtime(detector, config: AppConfig):
    cam, prev = config.camera, config.preview

    cap = cv2.VideoCapture(cam.device)
    if not cap.isOpened():
        raise RuntimeError(f"Camera {cam.device} not opened. Try another index (0/1/2).")
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, cam.width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cam.height)

    content_w, content_h = oriented_size(cam.width, cam.height, cam.orientation)
    preview = PreviewLayer(prev.width, prev.height, content_w, content_h, gravity=prev.gravity)
    face_view = FaceView()
    ui = UiChannel()
    renderer = FaceRenderer(thickness=prev.line_thickness)
    dispatcher = FrameDispatcher(detector, LandmarkProjector(face_view, preview, ui), cam.orientation)

    cv2.namedWindow(prev.window_name, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(prev.window_name, prev.width, prev.height)

    print("FaceLasers preview. Press 'h' to show/hide the face overlay, 'q' to quit.")
    dispatcher.start()
    index = 0
    late = 0
    try:
        while True:
            ret, image = cap.read()
            if not ret:
                logger.warning("Failed to read frame from camera %s", cam.device)
                break

            if not offer_frame(dispatcher, Frame(image=image, index=index, timestamp=time.time())):
                late += 1
            index += 1

            preview.set_bounds(*_window_size(prev.window_name, (prev.width, prev.height)))
            ui.drain()

            canvas = preview.render(orient(image, cam.orientation))
            cv2.imshow(prev.window_name, renderer.apply(canvas, face_view))

            key = cv2.waitKey(1) & 0xFF
            if key in (ord("q"), 27):
                break
            if key == ord("h"):
                face_view.toggle_hidden()
    finally:
        dispatcher.stop()
        logger.info("Processed %d frames (%d late, %d dropped, %d failed)",
                    dispatcher.processed, late, dispatcher.dropped, dispatcher.failed)
        cap.release()
        cv2.destroyAllWindows()
