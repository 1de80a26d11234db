from __future__ import annotations

import numpy as np

from models.channel import ColorSpace
from models.errors import InvalidImage
from models.image import Image
from services.pixel_map_service import PixelMapService

EPS = 1e-3


def _to_u8(channels: np.ndarray) -> np.ndarray:
    # truncation toward zero, clamped so out-of-range values never wrap
    return np.clip(channels, 0, 255).astype(np.uint8)


def _rgb_to_ycbcr(rgb: np.ndarray) -> np.ndarray:
    x = rgb.astype(np.float64)
    r, g, b = x[..., 0], x[..., 1], x[..., 2]

    y = 0.299 * r + 0.587 * g + 0.114 * b
    cb = 128 - 0.168736 * r - 0.331264 * g + 0.5 * b
    cr = 128 + 0.5 * r - 0.418688 * g - 0.081312 * b
    return _to_u8(np.stack([y, cb, cr], axis=-1))


def _rgb_to_hsi(rgb: np.ndarray) -> np.ndarray:
    """Geometric (arccos) HSI, every channel scaled to 0-255."""
    x = rgb.astype(np.float64) / 255.0
    r, g, b = x[..., 0], x[..., 1], x[..., 2]

    intensity = (r + g + b) / 3.0
    lit = intensity > EPS
    ratio = np.divide(np.minimum(np.minimum(r, g), b), intensity,
                      out=np.zeros_like(intensity), where=lit)
    saturation = np.where(lit, 1.0 - ratio, 0.0)

    num = 0.5 * ((r - g) + (r - b))
    den = np.sqrt((r - g) ** 2 + (r - b) * (g - b))
    chromatic = (saturation > EPS) & (den > EPS)
    cos_theta = np.divide(num, den, out=np.zeros_like(num), where=chromatic)
    theta = np.degrees(np.arccos(np.clip(cos_theta, -1.0, 1.0)))
    hue = np.where(chromatic, np.where(b > g, 360.0 - theta, theta), 0.0)

    return _to_u8(np.stack([hue / 360.0 * 255.0,
                            saturation * 255.0,
                            intensity * 255.0], axis=-1))


def _rgb_to_hsi_components(rgb: np.ndarray) -> np.ndarray:
    """
    Max-branch HSI as float64:
    hue in degrees [0, 360), saturation in [0, 1], intensity in [0, 255].
    """
    x = rgb.astype(np.float64) / 255.0
    r, g, b = x[..., 0], x[..., 1], x[..., 2]

    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    delta = mx - mn
    intensity = (r + g + b) / 3.0
    gray = delta == 0

    safe_delta = np.where(gray, 1.0, delta)
    safe_intensity = np.where(gray, 1.0, intensity)
    saturation = np.where(gray, 0.0, 1.0 - mn / safe_intensity)

    hue = np.select(
        [gray, mx == r, mx == g],
        [
            np.zeros_like(r),
            np.fmod(60.0 * ((g - b) / safe_delta) + 360.0, 360.0),
            60.0 * ((b - r) / safe_delta + 2.0),
        ],
        default=60.0 * ((r - g) / safe_delta + 4.0),
    )
    return np.stack([hue, saturation, intensity * 255.0], axis=-1)


class ColorSpaceService:
    """
    Pure RGB → YCbCr / HSI transforms.
    Inputs are read-only; every call returns a freshly allocated buffer.
    """

    def __init__(self, pixel_map: PixelMapService | None = None):
        self.pixel_map = pixel_map or PixelMapService()

    @staticmethod
    def require_rgb(img: Image) -> None:
        if img.channels != 3:
            raise InvalidImage(f"Expected a 3-channel RGB image, got {img.channels} channel(s)")

    def to_ycbcr(self, img: Image) -> Image:
        self.require_rgb(img)
        return Image(self.pixel_map.map_rows(_rgb_to_ycbcr, img.pixels), path=img.path)

    def to_hsi(self, img: Image) -> Image:
        """
        HSI used by segmentation: arccos hue, H/S/I each on 0-255.
        """
        self.require_rgb(img)
        return Image(self.pixel_map.map_rows(_rgb_to_hsi, img.pixels), path=img.path)

    def to_hsi_components(self, img: Image) -> np.ndarray:
        """
        HSI used by corpus statistics: max-branch hue in degrees,
        saturation as a fraction, intensity on 0-255. Not interchangeable
        with `to_hsi`; the two hue formulas disagree for most colours.
        """
        self.require_rgb(img)
        return self.pixel_map.map_rows(_rgb_to_hsi_components, img.pixels)

    def convert(self, img: Image, space: ColorSpace) -> Image:
        if space is ColorSpace.RGB:
            self.require_rgb(img)
            return Image(img.pixels.copy(), path=img.path)
        if space is ColorSpace.YCBCR:
            return self.to_ycbcr(img)
        if space is ColorSpace.HSI:
            return self.to_hsi(img)
        raise ValueError(f"Unsupported colour space: {space}")
