#!/usr/bin/env python3
"""
Check a single image for fire and/or smoke and write the intermediate masks.

Exit status: 0 nothing detected, 3 alert raised, 1 image could not be processed.
"""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from models.errors import DecodeFailure, InvalidImage, IOFailure
from pipeline.detection import detect_fire, detect_smoke, log_detection_result
from repositories.image_repository import ImageRepository

MASK_DIR = os.getenv("MASK_DIR_PATH", ".")
EXIT_ALERT = 3

logger = logging.getLogger(__name__)

DETECTORS = {"fire": detect_fire, "smoke": detect_smoke}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="firesmoke-detect",
        description="Colour-rule fire / smoke detection for a single image.",
    )
    ap.add_argument("image", help="image file to analyse")
    ap.add_argument("--kind", choices=["fire", "smoke", "both"], default="both")
    ap.add_argument("--threshold", type=float, default=None,
                    help="alert when more than this percent of pixels is positive")
    masks = ap.add_mutually_exclusive_group()
    masks.add_argument("--mask-dir", default=MASK_DIR, help="where the PNG masks are written")
    masks.add_argument("--no-masks", action="store_true", help="do not write masks")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        img = ImageRepository.load(args.image)
    except DecodeFailure as err:
        print(f"ERROR: {err}", file=sys.stderr)
        return 1
    print(f"Image '{args.image}' loaded: {img.width} x {img.height}, channels: {img.channels}\n")

    kinds = ["fire", "smoke"] if args.kind == "both" else [args.kind]
    mask_dir = None if args.no_masks else args.mask_dir

    alert = False
    for kind in kinds:
        options = {"mask_dir": mask_dir}
        if args.threshold is not None:
            options["threshold"] = args.threshold
        try:
            result = DETECTORS[kind](img, **options)
        except (InvalidImage, IOFailure) as err:
            print(f"ERROR: {err}", file=sys.stderr)
            return 1
        log_detection_result(result)
        alert = alert or result.detected

    return EXIT_ALERT if alert else 0


if __name__ == "__main__":
    sys.exit(main())
