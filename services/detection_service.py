from typing import Tuple
import logging

from models.errors import InvalidImage
from models.mask import Mask

logger = logging.getLogger(__name__)


class DetectionService:
    """Converts a final mask into a verdict."""

    @staticmethod
    def positive_percent(mask: Mask) -> float:
        total = mask.width * mask.height
        if total == 0:
            raise InvalidImage("Cannot score an empty (zero-pixel) mask")
        return 100.0 * mask.positive_count / total

    def decide(self, mask: Mask, threshold_percent: float) -> Tuple[bool, float]:
        """
        Args:
            mask (Mask): Final binary mask.
            threshold_percent (float): Percent of positive pixels that must be exceeded.

        Returns:
            (detected, percent): detected is True iff percent > threshold_percent.
        """
        percent = self.positive_percent(mask)
        detected = percent > threshold_percent
        logger.debug(f"{percent:.4f}% positive (threshold {threshold_percent}%) -> {detected}")
        return detected, percent
