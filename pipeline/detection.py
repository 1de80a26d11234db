"""
Fire / Smoke Detection Pipeline
Segments one RGB image with two colour-space rules, keeps the pixels both
rules agree on, and raises an alert when they cover more than a threshold
percentage of the frame.
"""

import os
import logging
from pathlib import Path
from typing import Sequence
from dotenv import load_dotenv

from models.image import Image
from models.detection_result import DetectionResult
from models.segmentation_rule import (
    SegmentationRule, RgbFireRule, YCbCrFireRule, RgbSmokeRule, HsiSmokeRule,
)
from repositories.image_repository import ImageRepository
from services.segmentation_service import FINAL_STAGE, SegmentationService
from services.mask_service import MaskService
from services.detection_service import DetectionService

# Load environment variables
load_dotenv()

FIRE_THRESHOLD = float(os.getenv("FIRE_DETECTION_THRESHOLD", "0.1"))
SMOKE_THRESHOLD = float(os.getenv("SMOKE_DETECTION_THRESHOLD", "0.2"))
MASK_EXT = ".png"

logger = logging.getLogger(__name__)


def detect(
    img: Image,
    rules: Sequence[SegmentationRule],
    threshold: float,
    kind: str,
    *,
    segmentation_service: SegmentationService = SegmentationService(),
    mask_service: MaskService = MaskService(),
    detection_service: DetectionService = DetectionService(),
    mask_dir: str | Path | None = None,
    image_repository: ImageRepository = ImageRepository(),
) -> DetectionResult:
    """
    Run every rule on *img*, AND the masks together and decide.

    Args:
        img: RGB image (3 channels)
        rules: Segmentation rules whose masks must all agree
        threshold: Percent of positive pixels that must be exceeded
        kind: Label for the result ("fire", "smoke", ...)
        mask_dir: When given, every mask is written there as PNG

    Returns:
        DetectionResult with the per-rule masks and the combined "final" mask
    """
    masks = segmentation_service.segment_all(img, rules)
    masks[FINAL_STAGE] = mask_service.combine_all(list(masks.values()))
    detected, percent = detection_service.decide(masks[FINAL_STAGE], threshold)

    result = DetectionResult(kind=kind, detected=detected, percent=percent,
                             threshold=threshold, masks=masks)
    if mask_dir is not None:
        save_masks(result, img, mask_dir, image_repository=image_repository)
    return result


def save_masks(
    result: DetectionResult,
    img: Image,
    mask_dir: str | Path,
    *,
    image_repository: ImageRepository = ImageRepository(),
) -> list[Path]:
    """Write `<stem>_<kind>_<stage>.png` for every mask of *result*."""
    mask_dir = Path(mask_dir)
    stem = img.path.stem if img.path else "image"
    saved = []
    for stage, mask in result.masks.items():
        target = mask_dir / f"{stem}_{result.kind}_{stage}{MASK_EXT}"
        saved.append(image_repository.save_mask(mask, target))
        logger.info(f"Saved {stage} {result.kind} mask: {target}")
    return saved


def detect_fire(
    img: Image,
    *,
    threshold: float = FIRE_THRESHOLD,
    rules: Sequence[SegmentationRule] | None = None,
    **kwargs,
) -> DetectionResult:
    """RGB fire rule AND YCbCr fire rule."""
    rules = rules or (RgbFireRule.from_env(), YCbCrFireRule.from_env())
    return detect(img, rules, threshold, "fire", **kwargs)


def detect_smoke(
    img: Image,
    *,
    threshold: float = SMOKE_THRESHOLD,
    rules: Sequence[SegmentationRule] | None = None,
    **kwargs,
) -> DetectionResult:
    """RGB smoke rule AND HSI smoke rule."""
    rules = rules or (RgbSmokeRule.from_env(), HsiSmokeRule.from_env())
    return detect(img, rules, threshold, "smoke", **kwargs)


def log_detection_result(result: DetectionResult) -> None:
    """
    Print the human-readable report for one verdict.
    """
    print(f"Analysis: {result.percent:.4f}% of the image was classified as {result.kind}.")
    if result.detected:
        banner = f">>> ALERT: possible {result.kind} detected! <<<"
    else:
        banner = f">>> No clear sign of {result.kind} detected. <<<"
    print(f"\n{'=' * len(banner)}")
    print(banner)
    print(f"{'=' * len(banner)}\n")
