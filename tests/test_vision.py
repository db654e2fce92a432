"""
Unit tests for face_emotion.utils.vision (pure numpy / cv2, no models).
"""
import numpy as np
import pytest

from face_emotion.utils.vision import (
    clip_box,
    crop,
    draw_box,
    ema,
    pick_largest,
    preprocess_detector_input,
    preprocess_face,
    softmax,
    square_box,
)


class TestSquareBox:
    def test_tall_box_grows_horizontally(self):
        assert square_box((20, 10, 20, 40)) == (10.0, 10.0, 40.0, 40.0)

    def test_wide_box_grows_vertically(self):
        assert square_box((0, 10, 30, 10)) == (0.0, 0.0, 30.0, 30.0)

    def test_square_box_unchanged(self):
        assert square_box((5, 5, 10, 10)) == (5.0, 5.0, 10.0, 10.0)

    def test_keeps_centre(self):
        x, y, w, h = square_box((3, 7, 8, 2))
        assert (x + w / 2, y + h / 2) == (7.0, 8.0)


class TestClipAndCrop:
    def test_clip_box_clamps_negative_coordinates(self):
        assert clip_box((-5, -5, 20, 20), 100, 100) == (0, 0, 15, 15)

    def test_clip_box_clamps_to_image(self):
        assert clip_box((90, 90, 30, 30), 100, 100) == (90, 90, 100, 100)

    def test_crop_returns_region(self, frame):
        frame[10:20, 30:40] = 255
        face = crop(frame, (30, 10, 10, 10))
        assert face.shape == (10, 10, 3)
        assert face.min() == 255

    def test_crop_off_frame_is_none(self, frame):
        assert crop(frame, (500, 500, 10, 10)) is None
        assert crop(frame, (-50, -50, 10, 10)) is None


class TestPreprocess:
    def test_detector_input_shape_and_normalization(self, frame):
        frame[:, :] = (255, 0, 0)  # pure blue in BGR
        x = preprocess_detector_input(frame)
        assert x.shape == (1, 3, 240, 320)
        assert x.dtype == np.float32
        # RGB order: blue ends up in channel 2
        assert np.allclose(x[0, 2], (255 - 127) / 128.0)
        assert np.allclose(x[0, 0], -127 / 128.0)

    def test_detector_input_custom_size(self, frame):
        x = preprocess_detector_input(frame, size=(64, 32))
        assert x.shape == (1, 3, 32, 64)

    def test_face_nchw_grayscale(self):
        face = np.full((80, 60, 3), 255, dtype=np.uint8)
        x = preprocess_face(face)
        assert x.shape == (1, 1, 48, 48)
        assert np.allclose(x, 1.0)

    def test_face_nhwc(self):
        face = np.zeros((80, 60, 3), dtype=np.uint8)
        assert preprocess_face(face, layout="NHWC").shape == (1, 48, 48, 1)

    def test_face_accepts_gray_input_and_scale(self):
        face = np.full((30, 30), 10, dtype=np.uint8)
        x = preprocess_face(face, size=(64, 64), scale=1.0)
        assert x.shape == (1, 1, 64, 64)
        assert np.allclose(x, 10.0)


class TestDrawBox:
    def test_draws_rectangle_edges(self, frame):
        draw_box(frame, (10, 10, 20, 20), color=(0, 0, 255))
        assert tuple(frame[10, 15]) == (0, 0, 255)
        assert tuple(frame[50, 100]) == (0, 0, 0)

    def test_box_outside_frame_is_clamped(self, frame):
        draw_box(frame, (-30, -30, 500, 500), color=(0, 255, 0), label="happy")
        assert tuple(frame[0, 0]) == (0, 255, 0)


class TestNumeric:
    def test_softmax_sums_to_one(self):
        p = softmax(np.array([1.0, 2.0, 3.0], dtype=np.float32))
        assert p.sum() == pytest.approx(1.0, abs=1e-6)
        assert int(np.argmax(p)) == 2

    def test_ema_first_value_passthrough(self):
        cur = np.array([0.2, 0.8])
        assert ema(None, cur) is cur

    def test_ema_blends(self):
        out = ema(np.array([1.0, 0.0]), np.array([0.0, 1.0]), alpha=0.25)
        assert np.allclose(out, [0.75, 0.25])

    def test_pick_largest(self):
        assert pick_largest([(0, 0, 5, 5), (0, 0, 10, 2), (1, 1, 6, 6)]) == (1, 1, 6, 6)
