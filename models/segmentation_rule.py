from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import os

import numpy as np
from dotenv import load_dotenv

from models.channel import ColorSpace

# Load environment variables
load_dotenv()


class SegmentationRule(ABC):
    """
    Per-pixel predicate over one colour space.

    Subclasses declare the colour space they read and return a boolean
    (H, W) array; the service turns it into a Mask. New rules are added by
    subclassing, existing ones never change.
    """
    name: str = "rule"
    color_space: ColorSpace = ColorSpace.RGB

    @abstractmethod
    def predicate(self, pixels: np.ndarray) -> np.ndarray:
        """pixels: (H, W, 3) uint8 in `color_space` → bool (H, W)."""

    @staticmethod
    def _split(pixels: np.ndarray):
        # int16 so differences and comparisons never wrap around
        wide = pixels.astype(np.int16)
        return wide[..., 0], wide[..., 1], wide[..., 2]


# ── Fire ──────────────────────────────────────────────────────────────
@dataclass
class RgbFireRule(SegmentationRule):
    """Bright, red-dominant pixels with R > G > B."""
    red_min: int = 210

    name = "rgb"
    color_space = ColorSpace.RGB

    @classmethod
    def from_env(cls) -> "RgbFireRule":
        return cls(red_min=int(os.getenv("FIRE_RGB_RED_MIN", "210")))

    def predicate(self, pixels: np.ndarray) -> np.ndarray:
        r, g, b = self._split(pixels)
        return (r > self.red_min) & (r > g) & (g > b)


@dataclass
class YCbCrFireRule(SegmentationRule):
    """High luma, low blue chroma, high red chroma."""
    y_min: int = 130
    cb_max: int = 120
    cr_min: int = 150

    name = "ycbcr"
    color_space = ColorSpace.YCBCR

    @classmethod
    def from_env(cls) -> "YCbCrFireRule":
        return cls(
            y_min=int(os.getenv("FIRE_YCBCR_Y_MIN", "130")),
            cb_max=int(os.getenv("FIRE_YCBCR_CB_MAX", "120")),
            cr_min=int(os.getenv("FIRE_YCBCR_CR_MIN", "150")),
        )

    def predicate(self, pixels: np.ndarray) -> np.ndarray:
        y, cb, cr = self._split(pixels)
        return (y > self.y_min) & (cb < self.cb_max) & (cr > self.cr_min)


# ── Smoke ─────────────────────────────────────────────────────────────
@dataclass
class RgbSmokeRule(SegmentationRule):
    """Bright and near-gray: every channel high, every pair close."""
    brightness_min: int = 190
    gray_tolerance: int = 25

    name = "rgb"
    color_space = ColorSpace.RGB

    @classmethod
    def from_env(cls) -> "RgbSmokeRule":
        return cls(
            brightness_min=int(os.getenv("SMOKE_RGB_BRIGHTNESS_MIN", "190")),
            gray_tolerance=int(os.getenv("SMOKE_RGB_GRAY_TOLERANCE", "25")),
        )

    def predicate(self, pixels: np.ndarray) -> np.ndarray:
        r, g, b = self._split(pixels)
        bright = (r > self.brightness_min) & (g > self.brightness_min) & (b > self.brightness_min)
        gray = (
            (np.abs(r - g) < self.gray_tolerance)
            & (np.abs(r - b) < self.gray_tolerance)
            & (np.abs(g - b) < self.gray_tolerance)
        )
        return bright & gray


@dataclass
class HsiSmokeRule(SegmentationRule):
    """Low saturation, medium-to-high intensity (both on a 0-255 scale)."""
    saturation_max: int = 50
    intensity_min: int = 150

    name = "hsi"
    color_space = ColorSpace.HSI

    @classmethod
    def from_env(cls) -> "HsiSmokeRule":
        return cls(
            saturation_max=int(os.getenv("SMOKE_HSI_SATURATION_MAX", "50")),
            intensity_min=int(os.getenv("SMOKE_HSI_INTENSITY_MIN", "150")),
        )

    def predicate(self, pixels: np.ndarray) -> np.ndarray:
        _, s, i = self._split(pixels)
        return (s < self.saturation_max) & (i > self.intensity_min)
