import logging

import cv2

from face_emotion.config import CAMERA_INDEX

logger = logging.getLogger(__name__)


class Camera:
    def __init__(self, index=CAMERA_INDEX, capture_factory=cv2.VideoCapture):
        self.index = index
        self.capture_factory = capture_factory
        self.cap = None

    @property
    def is_running(self):
        return self.cap is not None and self.cap.isOpened()

    def start(self):
        if self.is_running:
            return self
        cap = self.capture_factory(self.index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Could not open webcam {self.index}. Try another camera index.")
        self.cap = cap
        logger.info("Camera %s started", self.index)
        return self

    def stop(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("Camera %s stopped", self.index)

    def read(self):
        if not self.is_running:
            return None
        ok, frame = self.cap.read()
        if not ok:
            logger.warning("Camera %s read failed", self.index)
            return None
        return frame

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()
