import argparse
import os

import cv2

from face_emotion.config import CONFIDENCE_THRESHOLD, configure_logging
from face_emotion.pipeline import EmotionPipeline


def load_image(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Missing image: {path}")
    img = cv2.imread(path)
    if img is None:
        raise ValueError(f"Could not decode image: {path}")
    return img


def format_result(result):
    if not result.faces:
        return [result.status]
    lines = []
    for i, face in enumerate(result.faces):
        x, y, w, h = face.box
        pred = face.prediction
        lines.append(f"face {i}: ({x:.0f}, {y:.0f}, {w:.0f}, {h:.0f}) {pred.label} {pred.confidence:.2f}")
    return lines


def main(argv=None):
    configure_logging()
    p = argparse.ArgumentParser(description="Run face emotion prediction on a still image")
    p.add_argument("image")
    p.add_argument("--out", default=None, help="write the annotated image here")
    p.add_argument("--detector", default=None)
    p.add_argument("--classifier", default=None)
    p.add_argument("--threshold", type=float, default=CONFIDENCE_THRESHOLD)
    args = p.parse_args(argv)

    img = load_image(args.image)
    pipeline = EmotionPipeline.from_paths(args.detector, args.classifier, threshold=args.threshold)
    result = pipeline.process(img)

    for line in format_result(result):
        print(line)

    if args.out:
        cv2.imwrite(args.out, pipeline.annotate(img, result))
        print("Saved:", args.out)


if __name__ == "__main__":
    main()
