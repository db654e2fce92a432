import cv2
import numpy as np

from face_emotion.config import (
    CLASSIFIER_INPUT_SIZE,
    CLASSIFIER_SCALE,
    DETECTOR_INPUT_SIZE,
    DETECTOR_MEAN,
    DETECTOR_STD,
)

# Boxes are (x, y, w, h) floats in frame pixels.


def preprocess_detector_input(frame_bgr, size=DETECTOR_INPUT_SIZE,
                              mean=DETECTOR_MEAN, std=DETECTOR_STD):
    resized = cv2.resize(frame_bgr, size, interpolation=cv2.INTER_LINEAR)
    rgb = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
    x = (rgb.astype(np.float32) - mean) / std
    x = np.transpose(x, (2, 0, 1))
    return x[None, :, :, :]  # (1,3,H,W)


def preprocess_face(face_bgr, size=CLASSIFIER_INPUT_SIZE, scale=CLASSIFIER_SCALE,
                    layout="NCHW"):
    if face_bgr.ndim == 2:
        gray = face_bgr
    else:
        gray = cv2.cvtColor(face_bgr, cv2.COLOR_BGR2GRAY)
    resized = cv2.resize(gray, size, interpolation=cv2.INTER_AREA)
    x = resized.astype(np.float32) * scale
    if layout == "NHWC":
        return x[None, :, :, None]  # (1,H,W,1)
    return x[None, None, :, :]  # (1,1,H,W)


def square_box(box):
    """Grow the shorter side of ``box`` to match the longer one, keeping its centre."""
    x, y, w, h = box
    m = max(w, h)
    dx = (m - w) / 2.0
    dy = (m - h) / 2.0
    return (x - dx, y - dy, w + 2 * dx, h + 2 * dy)


def clip_box(box, img_w, img_h):
    x, y, w, h = box
    x1 = int(min(max(0, x), img_w))
    y1 = int(min(max(0, y), img_h))
    x2 = int(min(max(0, x + w), img_w))
    y2 = int(min(max(0, y + h), img_h))
    return x1, y1, x2, y2


def crop(frame, box):
    h, w = frame.shape[:2]
    x1, y1, x2, y2 = clip_box(box, w, h)
    if x2 <= x1 or y2 <= y1:
        return None
    return frame[y1:y2, x1:x2]


def draw_box(frame, box, color=(0, 0, 255), label=None, text_color=(0, 255, 0)):
    h, w = frame.shape[:2]
    x1, y1, x2, y2 = clip_box(box, w - 1, h - 1)
    cv2.rectangle(frame, (x1, y1), (x2, y2), color, 2)
    if label:
        cv2.putText(
            frame,
            label,
            (x1, max(30, y1 - 10)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.9,
            text_color,
            2,
        )
    return frame


def softmax(logits):
    logits = logits - np.max(logits)
    e = np.exp(logits)
    return e / (np.sum(e) + 1e-9)


def ema(prev, cur, alpha=0.45):
    return cur if prev is None else (alpha * cur + (1 - alpha) * prev)


def pick_largest(boxes):
    return max(boxes, key=lambda b: b[2] * b[3])
