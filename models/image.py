from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np

from models.errors import InvalidImage


@dataclass
class Image:
    """
    Simple data object: row-major, channel-interleaved uint8 pixels
    (+ optional source path for bookkeeping).
    No OpenCV logic outside the repository layer.
    """
    pixels: np.ndarray # Shape (H, W, C) or (H, W), dtype uint8. RGB order when C == 3.
    path: Path | None = None # Source of the image.

    def __post_init__(self):
        if self.pixels.ndim not in (2, 3):
            raise InvalidImage(f"Expected a 2-D or 3-D pixel array, got shape {self.pixels.shape}")
        if self.channels not in (1, 3):
            raise InvalidImage(f"Channel count must be 1 or 3, got {self.channels}")

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else self.pixels.shape[2]
