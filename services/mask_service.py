from __future__ import annotations

from functools import reduce
from typing import Iterable

import numpy as np

from models.errors import DimensionMismatch
from models.mask import Mask, MASK_ON
from services.pixel_map_service import PixelMapService


def _and(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return (a == MASK_ON) & (b == MASK_ON)


class MaskService:
    """
    Pixel-wise logical AND of binary masks, shared by the fire and smoke pipelines.
    """

    def __init__(self, pixel_map: PixelMapService | None = None):
        self.pixel_map = pixel_map or PixelMapService()

    def combine(self, a: Mask, b: Mask) -> Mask:
        if a.pixels.shape != b.pixels.shape:
            raise DimensionMismatch(
                f"Cannot combine masks of size {a.width}x{a.height} and {b.width}x{b.height}"
            )
        return Mask.from_bool(self.pixel_map.map_rows(_and, a.pixels, b.pixels))

    def combine_all(self, masks: Iterable[Mask]) -> Mask:
        masks = list(masks)
        if not masks:
            raise ValueError("combine_all needs at least one mask")
        if len(masks) == 1:
            return Mask(masks[0].pixels.copy())
        return reduce(self.combine, masks)
