#!/usr/bin/env python3
"""
Derive RGB / HSI colour thresholds from a directory of sample images
and export them as a time-stamped CSV.

Usage: firesmoke-thresholds <image_dir> [output_dir]
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from models.errors import InsufficientData, IOFailure
from pipeline.threshold_extractor import (
    extract_thresholds, save_thresholds, log_thresholds, CORPUS_WORKERS, THRESHOLDS_DIR,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="firesmoke-thresholds",
        description="Derive mean ± 2σ colour thresholds from a corpus of images.",
        epilog="Example: firesmoke-thresholds ./smoke_images ./results",
    )
    ap.add_argument("image_dir", help="directory with the sample images")
    ap.add_argument("output_dir", nargs="?", default=THRESHOLDS_DIR,
                    help="where the CSV is written (default: current directory)")
    ap.add_argument("--workers", type=int, default=CORPUS_WORKERS,
                    help="images decoded and accumulated concurrently")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        table = extract_thresholds(args.image_dir, workers=args.workers)
    except (NotADirectoryError, PermissionError, FileNotFoundError) as err:
        print(f"Error opening directory: {err}", file=sys.stderr)
        return 1
    except InsufficientData as err:
        print(f"No usable images in {args.image_dir}: {err}", file=sys.stderr)
        return 1

    log_thresholds(table)

    try:
        save_thresholds(table, args.output_dir)
    except IOFailure as err:
        print(f"Error creating CSV file: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
