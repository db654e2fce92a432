import logging
import os

import cv2
import numpy as np
import onnxruntime as ort

from face_emotion.config import (
    CONFIDENCE_THRESHOLD,
    DETECTOR_INPUT_SIZE,
    DETECTOR_MEAN,
    DETECTOR_STD,
    NMS_THRESHOLD,
)
from face_emotion.utils.vision import preprocess_detector_input, square_box

logger = logging.getLogger(__name__)


def load_session(model_path, providers=None):
    if not os.path.exists(model_path):
        raise FileNotFoundError(f"Missing model: {model_path}")
    return ort.InferenceSession(model_path, providers=providers or ["CPUExecutionProvider"])


class FaceDetector:
    """ONNX face detector producing square (x, y, w, h) boxes in frame pixels.

    The model takes a (1,3,H,W) normalized RGB tensor and returns two outputs:
    scores first, (1,N,2), (1,N,1) or (1,N), then boxes (1,N,4) as normalized corners.
    """

    def __init__(self, model_path=None, session=None, input_size=DETECTOR_INPUT_SIZE,
                 mean=DETECTOR_MEAN, std=DETECTOR_STD, nms_threshold=NMS_THRESHOLD,
                 providers=None):
        self.input_size = input_size
        self.mean = mean
        self.std = std
        self.nms_threshold = nms_threshold
        self.providers = providers
        self.session = None
        self.input_name = None
        self.output_names = []
        if session is not None:
            self._bind(session)
        elif model_path is not None:
            self.load(model_path)

    def load(self, model_path):
        self._bind(load_session(model_path, self.providers))

    def _bind(self, session):
        self.session = session
        self.input_name = session.get_inputs()[0].name
        self.output_names = [o.name for o in session.get_outputs()]
        for i, name in enumerate(self.output_names):
            logger.info("Detector output %d: %s", i, name)

    @property
    def is_loaded(self):
        return self.session is not None

    def detect(self, frame_bgr, threshold=CONFIDENCE_THRESHOLD):
        if not self.is_loaded:
            logger.error("Face detector: model not loaded.")
            return []

        if len(self.output_names) < 2:
            logger.error("Face detector: model does not have enough outputs.")
            return []

        inp = preprocess_detector_input(frame_bgr, self.input_size, self.mean, self.std)
        # scores first, boxes second
        scores, boxes = self.session.run(self.output_names[:2], {self.input_name: inp})
        logger.debug("Scores shape: %s | boxes shape: %s", np.shape(scores), np.shape(boxes))

        img_h, img_w = frame_bgr.shape[:2]
        return self.postprocess(scores, boxes, img_w, img_h, threshold)

    def postprocess(self, scores, boxes, img_w, img_h, threshold=CONFIDENCE_THRESHOLD):
        scores = np.asarray(scores, dtype=np.float32)
        boxes = np.asarray(boxes, dtype=np.float32)

        if scores.ndim < 2 or scores.shape[0] != 1:
            logger.error("Face detector: unexpected batch size in scores %s.", scores.shape)
            return []
        if boxes.ndim != 3 or boxes.shape[0] != 1 or boxes.shape[2] != 4:
            logger.error("Face detector: unexpected shape in boxes %s.", boxes.shape)
            return []

        # (1,N,2) carries [background, face]; (1,N) and (1,N,1) carry the face score
        if scores.ndim == 2:
            conf = scores[0]
        elif scores.ndim == 3 and scores.shape[2] == 2:
            conf = scores[0, :, 1]
        elif scores.ndim == 3 and scores.shape[2] == 1:
            conf = scores[0, :, 0]
        else:
            logger.error("Face detector: unsupported scores layout %s.", scores.shape)
            return []

        n = min(len(conf), boxes.shape[1])
        logger.debug("Number of candidate boxes: %d", n)

        rects, kept = [], []
        for i in range(n):
            if conf[i] > threshold:
                x1 = float(boxes[0, i, 0]) * img_w
                y1 = float(boxes[0, i, 1]) * img_h
                x2 = float(boxes[0, i, 2]) * img_w
                y2 = float(boxes[0, i, 3]) * img_h
                rects.append(square_box((x1, y1, x2 - x1, y2 - y1)))
                kept.append(float(conf[i]))
                logger.debug("Detected face %d: %s score=%.3f", i, rects[-1], conf[i])

        # suppression runs on the squared boxes that are returned
        if self.nms_threshold is not None and len(rects) > 1:
            idx = cv2.dnn.NMSBoxes([list(r) for r in rects], kept, threshold, self.nms_threshold)
            idx = np.array(idx, dtype=np.int64).reshape(-1)
            rects = [rects[i] for i in idx]

        return rects
