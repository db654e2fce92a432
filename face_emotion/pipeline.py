import logging
from collections import namedtuple

import numpy as np

from face_emotion.classifier import ExpressionClassifier, Prediction
from face_emotion.config import (
    BOX_COLOR,
    CLASSIFIER_MODEL,
    CONFIDENCE_THRESHOLD,
    DETECTOR_MODEL,
    NO_FACE_MESSAGE,
    TEXT_COLOR,
    default_model_path,
)
from face_emotion.detector import FaceDetector
from face_emotion.utils.vision import crop, draw_box, ema, pick_largest

logger = logging.getLogger(__name__)

FaceResult = namedtuple("FaceResult", ["box", "prediction"])
FrameResult = namedtuple("FrameResult", ["faces", "status"])


class EmotionPipeline:
    """Detect faces in a frame and classify the expression of each one.

    With ``smoothing_alpha`` set, the probabilities of the largest face are
    exponentially smoothed across calls; the history resets on frames with no
    face.
    """

    def __init__(self, detector, classifier, threshold=CONFIDENCE_THRESHOLD, smoothing_alpha=None):
        self.detector = detector
        self.classifier = classifier
        self.threshold = threshold
        self.smoothing_alpha = smoothing_alpha
        self.smooth_probs = None

    @classmethod
    def from_paths(cls, detector_path=None, classifier_path=None, **kwargs):
        detector = FaceDetector(detector_path or default_model_path(DETECTOR_MODEL))
        classifier = ExpressionClassifier(classifier_path or default_model_path(CLASSIFIER_MODEL))
        return cls(detector, classifier, **kwargs)

    def reset(self):
        self.smooth_probs = None

    def process(self, frame):
        boxes = self.detector.detect(frame, threshold=self.threshold)
        if not boxes:
            self.reset()
            return FrameResult([], NO_FACE_MESSAGE)

        faces = [FaceResult(box, self.classifier.predict(crop(frame, box))) for box in boxes]
        logger.debug("Classified %d face(s): %s", len(faces), [f.prediction.label for f in faces])

        if self.smoothing_alpha is not None:
            faces = self._smooth_largest(faces)

        # the status line follows the last classified face
        return FrameResult(faces, faces[-1].prediction.label)

    def _smooth_largest(self, faces):
        boxes = [f.box for f in faces]
        i = boxes.index(pick_largest(boxes))
        pred = faces[i].prediction
        if pred.probs is None:
            return faces
        self.smooth_probs = ema(self.smooth_probs, pred.probs, alpha=self.smoothing_alpha)
        idx = int(np.argmax(self.smooth_probs))
        smoothed = Prediction(self.classifier.labels[idx], float(self.smooth_probs[idx]), self.smooth_probs.copy())
        faces = list(faces)
        faces[i] = FaceResult(faces[i].box, smoothed)
        return faces

    def annotate(self, frame, result, color=BOX_COLOR, text_color=TEXT_COLOR):
        for face in result.faces:
            pred = face.prediction
            label = f"{pred.label} {pred.confidence:.2f}" if pred.probs is not None else pred.label
            draw_box(frame, face.box, color=color, label=label, text_color=text_color)
        return frame


def status_prediction(result):
    """Return the prediction ``result.status`` reports, or None when no face was found."""
    return result.faces[-1].prediction if result.faces else None
