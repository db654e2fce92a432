import os
import time

import cv2
import streamlit as st

from face_emotion.camera import Camera
from face_emotion.classifier import ExpressionClassifier
from face_emotion.config import (
    CLASSIFIER_MODEL,
    DETECTOR_MODEL,
    SMOOTHING_ALPHA,
    configure_logging,
    default_model_path,
)
from face_emotion.detector import FaceDetector
from face_emotion.pipeline import EmotionPipeline, status_prediction


@st.cache_resource
def load_models(detector_path, classifier_path):
    # only the ORT sessions are shared between browser sessions
    return FaceDetector(detector_path), ExpressionClassifier(classifier_path)


def build_pipeline(detector, classifier, threshold):
    # one per camera run, so smoothing history never leaks between runs or sessions
    return EmotionPipeline(detector, classifier, threshold=threshold, smoothing_alpha=SMOOTHING_ALPHA)


def summarize(result):
    """Label, confidence and per-label probabilities, all taken from the face the status names."""
    pred = status_prediction(result)
    if pred is None or pred.probs is None:
        return result.status, None, None
    return result.status, pred.confidence, pred.probs


def main():
    configure_logging()
    st.set_page_config(page_title="Emotion Dashboard", layout="wide")
    st.title("Face Emotion Recognition Dashboard (ONNX detector)")

    col1, col2 = st.columns([2, 1])

    with col2:
        cam_index = st.number_input("Camera index", min_value=0, max_value=5, value=0, step=1)
        threshold = st.slider("Detection threshold", 0.1, 0.99, 0.7, 0.01)
        run = st.toggle("Run", value=False)
        st.caption("If camera is blank on macOS, try Camera index = 1.")

    detector_path = default_model_path(DETECTOR_MODEL)
    classifier_path = default_model_path(CLASSIFIER_MODEL)
    for path in (detector_path, classifier_path):
        if not os.path.exists(path):
            st.error(f"Missing model: {path}")
            return

    detector, classifier = load_models(detector_path, classifier_path)
    labels = classifier.labels

    frame_slot = col1.empty()
    metric_slot = col2.empty()
    chart_slot = col2.empty()

    if not run:
        metric_slot.metric("Current emotion", "—")
        return

    cam = Camera(int(cam_index))
    try:
        cam.start()
    except RuntimeError as e:
        st.error(str(e))
        return

    pipeline = build_pipeline(detector, classifier, threshold)
    last_chart = 0.0
    try:
        while run:
            frame = cam.read()
            if frame is None:
                st.error("Camera read failed. Try another camera index.")
                break

            result = pipeline.process(frame)
            pipeline.annotate(frame, result)

            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            frame_slot.image(frame_rgb, channels="RGB", use_container_width=True)

            label, conf, probs = summarize(result)
            metric_slot.metric("Current emotion", label, f"{conf:.2f}" if conf is not None else None)

            if probs is not None and (time.time() - last_chart) > 0.2:
                last_chart = time.time()
                chart_slot.bar_chart({labels[i]: float(probs[i]) for i in range(len(labels))})
    finally:
        cam.stop()


if __name__ == "__main__":
    main()
