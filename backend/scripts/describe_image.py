"""
Generate Korean alt text for an image from the command line.

Usage:
  python backend/scripts/describe_image.py samples/dog.jpg
  python backend/scripts/describe_image.py https://example.com/cat.png --top-k 3 --json

Model and label locations come from the environment / .env (ALTIMATE_MODEL_URL, ALTIMATE_LABELS_URL, ...).
"""

import argparse
import json
import sys
from dataclasses import asdict

from altimate.domain.entities.options_entity import AnalyzeImageOptions, ModelLoadOptions
from altimate.domain.errors import ImageAnalysisError
from altimate.session import AltTextSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Korean alt text from MobileNet classification")
    parser.add_argument("image", type=str, help="local path, http(s) URL or data:image URL")
    parser.add_argument("--top-k", type=int, default=5, help="number of classifications to compute")
    parser.add_argument("--size", type=int, default=224, help="model input size")
    parser.add_argument("--no-normalize", action="store_true", help="keep 0-255 pixel values in the tensor")
    parser.add_argument("--json", action="store_true", help="print the full result as JSON")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    def on_progress(value: float) -> None:
        print(f"모델 로딩 {value * 100:.0f}%", file=sys.stderr)

    options = AnalyzeImageOptions(
        target_size=args.size,
        normalize=not args.no_normalize,
        max_predictions=args.top_k,
        model_options=ModelLoadOptions(on_load_progress=on_progress),
    )

    with AltTextSession() as session:
        try:
            result = session.analyze_image(args.image, options)
        except ImageAnalysisError as e:
            print(f"ERROR [{e.code}]: {e.message}", file=sys.stderr)
            return 1
        if session.get_model_status().labels_placeholder:
            print("WARNING: 라벨 파일을 불러오지 못해 임시 라벨(class_N)을 사용했습니다.", file=sys.stderr)

    if args.json:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        print(result.alt_text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
