from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np

from models.errors import InvalidImage

MASK_ON = 255
MASK_OFF = 0


@dataclass
class Mask:
    """
    Single-channel binary image: 255 marks a pixel accepted by a rule, 0 rejects it.
    """
    pixels: np.ndarray # Shape (H, W), dtype uint8, values in {0, 255}.
    path: Path | None = None # Where the mask is (or will be) written.

    def __post_init__(self):
        if self.pixels.ndim != 2:
            raise InvalidImage(f"Mask must be 2-D, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise InvalidImage(f"Mask must be uint8, got {self.pixels.dtype}")
        if not np.isin(self.pixels, (MASK_OFF, MASK_ON)).all():
            raise InvalidImage("Mask values must be 0 or 255")

    @classmethod
    def from_bool(cls, selected: np.ndarray) -> "Mask":
        return cls(np.where(selected, MASK_ON, MASK_OFF).astype(np.uint8))

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def positive_count(self) -> int:
        return int(np.count_nonzero(self.pixels == MASK_ON))
