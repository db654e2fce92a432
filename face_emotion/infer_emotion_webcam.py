import argparse

import cv2

from face_emotion.camera import Camera
from face_emotion.config import (
    CAMERA_INDEX,
    CONFIDENCE_THRESHOLD,
    SMOOTHING_ALPHA,
    TEXT_COLOR,
    configure_logging,
)
from face_emotion.pipeline import EmotionPipeline


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Webcam face emotion overlay (q to quit)")
    p.add_argument("--camera", type=int, default=CAMERA_INDEX)
    p.add_argument("--detector", default=None, help="face detector .onnx")
    p.add_argument("--classifier", default=None, help="expression classifier .onnx")
    p.add_argument("--threshold", type=float, default=CONFIDENCE_THRESHOLD)
    p.add_argument("--smooth", action="store_true", help="EMA-smooth the largest face")
    return p.parse_args(argv)


def main(argv=None):
    configure_logging()
    args = parse_args(argv)

    pipeline = EmotionPipeline.from_paths(
        args.detector,
        args.classifier,
        threshold=args.threshold,
        smoothing_alpha=SMOOTHING_ALPHA if args.smooth else None,
    )

    with Camera(args.camera) as cam:
        while True:
            frame = cam.read()
            if frame is None:
                break

            result = pipeline.process(frame)
            pipeline.annotate(frame, result)
            cv2.putText(frame, result.status, (20, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.9, TEXT_COLOR, 2)

            cv2.imshow("Emotion (ONNX face detect) - q to quit", frame)
            if cv2.waitKey(1) & 0xFF == ord("q"):
                break

    cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
