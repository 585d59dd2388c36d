"""
디렉토리의 이미지를 사분면으로 잘라 저장하는 스크립트.

사용법:
    cd src && python -m scripts.slice_images <input_dir> [-o OUTPUT] [--scale 300]
        [--watermark TEXT] [--transparency 30]

결과물:
    OUTPUT/ 에 <name>_0.png ~ <name>_3.png 저장 (좌상, 우상, 좌하, 우하)
"""

import argparse
import os
import sys
import time

from core.exceptions import AppException
from service.slice_service import SlicePipeline
from service.source_service import decode_image
from utility.logger import setup_logger

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Slice images into four quadrants")
    parser.add_argument("input_dir")
    parser.add_argument("-o", "--output", default="output")
    parser.add_argument("--scale", type=int, default=0)
    parser.add_argument("--watermark", default=None)
    parser.add_argument("--transparency", type=int, default=30, choices=range(0, 101), metavar="0-100")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logger("WARNING")
    os.makedirs(args.output, exist_ok=True)

    images = [f for f in sorted(os.listdir(args.input_dir)) if f.lower().endswith(IMAGE_EXTENSIONS)]
    if not images:
        print(f"No images found in {args.input_dir}")
        return 1

    total_count = 0
    for fname in images:
        name = os.path.splitext(fname)[0]
        with open(os.path.join(args.input_dir, fname), "rb") as f:
            data = f.read()

        pipeline = SlicePipeline(
            scale_px=args.scale,
            watermark_text=args.watermark,
            transparency=args.transparency,
        )
        start = time.perf_counter()
        try:
            quadrants = pipeline.slice(decode_image(data))
        except AppException as e:
            print(f"  {fname}: skipped ({e.message})")
            continue
        elapsed = time.perf_counter() - start

        for index, quadrant in enumerate(quadrants):
            quadrant.save(os.path.join(args.output, f"{name}_{index}.png"), "PNG")
            total_count += 1

        w, h = quadrants[0].size
        print(f"  {fname:24s} -> 4 x {w}x{h}  {elapsed * 1000:6.1f}ms")

    print(f"Done: {total_count} files saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
