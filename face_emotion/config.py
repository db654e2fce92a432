"""Configuration constants for the face emotion pipeline."""
import logging
import os

# Face detector (RFB-320 style: 320x240 RGB, (p - 127) / 128)
DETECTOR_MODEL = "face_detector.onnx"
DETECTOR_INPUT_SIZE = (320, 240)  # (width, height)
DETECTOR_MEAN = 127.0
DETECTOR_STD = 128.0
CONFIDENCE_THRESHOLD = 0.7   # keep detections scoring strictly above this
NMS_THRESHOLD = 0.3          # IoU for suppression; None disables it

# Expression classifier (FER2013 style: 48x48 grayscale in [0, 1])
CLASSIFIER_MODEL = "emotion.onnx"
CLASSIFIER_INPUT_SIZE = (48, 48)
CLASSIFIER_SCALE = 1.0 / 255.0
EMOTIONS = ["angry", "disgust", "fear", "happy", "sad", "surprise", "neutral"]

# Status strings shown in place of an emotion
NO_MODEL_MESSAGE = "No model loaded."
NO_FACE_MESSAGE = "No face detected"
UNKNOWN_LABEL = "Unknown"

# Capture / display
CAMERA_INDEX = 0
SMOOTHING_ALPHA = 0.45
BOX_COLOR = (0, 0, 255)  # BGR red
TEXT_COLOR = (0, 255, 0)

_MODEL_ENV = {
    DETECTOR_MODEL: "FACE_EMOTION_DETECTOR_MODEL",
    CLASSIFIER_MODEL: "FACE_EMOTION_CLASSIFIER_MODEL",
}


def default_model_path(name):
    """Resolve a model file, preferring the matching env var over models/<name>."""
    env_key = _MODEL_ENV.get(name)
    if env_key and os.environ.get(env_key):
        return os.environ[env_key]
    # models/ sits next to this file, independent of the working directory
    base_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(base_dir, "models", name)


def configure_logging(level=None):
    level = level or os.environ.get("FACE_EMOTION_LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
