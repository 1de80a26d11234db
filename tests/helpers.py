"""Synthetic image builders shared by the test modules."""
from pathlib import Path

import cv2
import numpy as np

FIRE_PIXEL = (255, 200, 0)     # passes the RGB and the YCbCr fire rules
SMOKE_PIXEL = (220, 220, 220)  # passes the RGB and the HSI smoke rules
BLACK_PIXEL = (0, 0, 0)


def solid(rgb, height=4, width=4) -> np.ndarray:
    return np.tile(np.array(rgb, dtype=np.uint8), (height, width, 1))


def write_rgb(path: Path, pixels: np.ndarray) -> Path:
    """Write RGB pixels losslessly (OpenCV expects BGR)."""
    assert cv2.imwrite(str(path), np.ascontiguousarray(pixels[:, :, ::-1]))
    return path


def png_bytes(pixels: np.ndarray) -> bytes:
    ok, buf = cv2.imencode(".png", np.ascontiguousarray(pixels[:, :, ::-1]))
    assert ok
    return buf.tobytes()
