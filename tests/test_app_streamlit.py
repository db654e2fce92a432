import numpy as np
import pytest

from face_emotion.app_streamlit import build_pipeline, summarize
from face_emotion.classifier import ExpressionClassifier, Prediction
from face_emotion.config import NO_FACE_MESSAGE, SMOOTHING_ALPHA
from face_emotion.detector import FaceDetector
from face_emotion.pipeline import FaceResult, FrameResult


class TestBuildPipeline:
    def test_fresh_pipeline_per_run_shares_models(self):
        detector, classifier = FaceDetector(), ExpressionClassifier()
        first = build_pipeline(detector, classifier, 0.6)
        first.smooth_probs = np.array([0.5, 0.5])
        second = build_pipeline(detector, classifier, 0.8)
        assert second is not first
        assert second.detector is detector and second.classifier is classifier
        assert second.smooth_probs is None
        assert (first.threshold, second.threshold) == (0.6, 0.8)
        assert second.smoothing_alpha == SMOOTHING_ALPHA


class TestSummarize:
    def test_no_face(self):
        assert summarize(FrameResult([], NO_FACE_MESSAGE)) == (NO_FACE_MESSAGE, None, None)

    def test_numbers_come_from_status_face(self):
        faces = [
            FaceResult((0, 0, 60, 60), Prediction("a", 0.9, np.array([0.9, 0.1]))),
            FaceResult((70, 70, 20, 20), Prediction("b", 0.8, np.array([0.2, 0.8]))),
        ]
        label, conf, probs = summarize(FrameResult(faces, "b"))
        assert label == "b"
        assert conf == pytest.approx(0.8)
        assert np.allclose(probs, [0.2, 0.8])

    def test_face_without_probs(self):
        faces = [FaceResult((0, 0, 10, 10), Prediction("Unknown", 0.0, None))]
        assert summarize(FrameResult(faces, "Unknown")) == ("Unknown", None, None)
