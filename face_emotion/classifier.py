import logging
from collections import namedtuple

import numpy as np

from face_emotion.config import (
    CLASSIFIER_INPUT_SIZE,
    CLASSIFIER_SCALE,
    EMOTIONS,
    NO_MODEL_MESSAGE,
    UNKNOWN_LABEL,
)
from face_emotion.detector import load_session
from face_emotion.utils.vision import preprocess_face, softmax

logger = logging.getLogger(__name__)

Prediction = namedtuple("Prediction", ["label", "confidence", "probs"])


def infer_layout(input_shape):
    # (N,H,W,1) models put the channel last; everything else is treated as NCHW
    if input_shape is not None and len(input_shape) == 4 and input_shape[-1] == 1 and input_shape[1] != 1:
        return "NHWC"
    return "NCHW"


class ExpressionClassifier:
    def __init__(self, model_path=None, session=None, labels=None,
                 input_size=CLASSIFIER_INPUT_SIZE, scale=CLASSIFIER_SCALE,
                 apply_softmax=True, providers=None):
        self.labels = list(labels) if labels is not None else list(EMOTIONS)
        self.input_size = input_size
        self.scale = scale
        self.apply_softmax = apply_softmax
        self.providers = providers
        self.session = None
        self.input_name = None
        self.layout = "NCHW"
        if session is not None:
            self._bind(session)
        elif model_path is not None:
            self.load(model_path)

    def load(self, model_path):
        self._bind(load_session(model_path, self.providers))

    def _bind(self, session):
        self.session = session
        inp = session.get_inputs()[0]
        self.input_name = inp.name
        self.layout = infer_layout(getattr(inp, "shape", None))
        logger.info("Classifier input %s layout=%s labels=%s", self.input_name, self.layout, self.labels)

    @property
    def is_loaded(self):
        return self.session is not None

    def predict(self, face_bgr):
        if not self.is_loaded:
            return Prediction(NO_MODEL_MESSAGE, 0.0, None)
        if face_bgr is None or face_bgr.size == 0:
            return Prediction(UNKNOWN_LABEL, 0.0, None)

        inp = preprocess_face(face_bgr, self.input_size, self.scale, self.layout)
        out = np.asarray(self.session.run(None, {self.input_name: inp})[0], dtype=np.float32).reshape(-1)

        if out.shape[0] != len(self.labels):
            logger.error(
                "Classifier produced %d scores for %d labels.", out.shape[0], len(self.labels)
            )
            return Prediction(UNKNOWN_LABEL, 0.0, None)

        probs = softmax(out) if self.apply_softmax else out
        idx = int(np.argmax(probs))
        return Prediction(self.labels[idx], float(probs[idx]), probs)

    def predict_emotion(self, face_bgr):
        return self.predict(face_bgr).label
