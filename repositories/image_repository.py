from io import BytesIO
from pathlib import Path
from typing import Union, List
import logging
import os

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from models.image import Image
from models.mask import Mask
from models.errors import DecodeFailure, IOFailure

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image and Mask entities.
    """
    def __init__(self):
        # Empty means "try every regular file", decode failures are reported per file
        raw = os.getenv("VALID_IMAGE_EXTENSIONS", "")
        self.VALID_EXTS = {ext.strip().lower() for ext in raw.split(",") if ext.strip()}

    @staticmethod
    def _from_bgr(arr_bgr: np.ndarray, path: Union[str, Path, None]) -> Image:
        return Image(pixels=np.ascontiguousarray(arr_bgr[:, :, ::-1]),
                     path=Path(path) if path else None)

    @classmethod
    def load(cls, path: Union[str, Path]) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise DecodeFailure(f"Image not found or unreadable: {path}")
        return cls._from_bgr(arr_bgr, path)

    @classmethod
    def decode(cls, data: bytes, path: Union[str, Path] = None) -> Image:
        """Decode an in-memory encoded image (PNG, JPEG, ...) into RGB pixels."""
        buf = np.frombuffer(data, dtype=np.uint8)
        arr_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR) if buf.size else None
        if arr_bgr is None:
            raise DecodeFailure(f"Could not decode image bytes{f' from {path}' if path else ''}")
        return cls._from_bgr(arr_bgr, path)

    @staticmethod
    def save_mask(mask: Mask, path: Union[str, Path] = None) -> Path:
        """Write a mask as a lossless single-channel image."""
        target = Path(path) if path is not None else mask.path
        if target is None:
            raise IOFailure("Mask has no destination path")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            PILImage.fromarray(mask.pixels).save(target)
        except (OSError, ValueError) as err:
            raise IOFailure(f"Could not write mask {target}: {err}") from err
        mask.path = target
        return target

    @staticmethod
    def encode_png(mask: Mask) -> bytes:
        buffer = BytesIO()
        PILImage.fromarray(mask.pixels).save(buffer, format="PNG")
        return buffer.getvalue()

    def list_files(self, folder: Union[str, Path]) -> List[Path]:
        """
        Regular files of *folder* in name order, optionally filtered by extension.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)
        if not os.access(folder, os.R_OK | os.X_OK):
            raise PermissionError(f"Directory is not readable: {folder}")

        files = []
        for p in sorted(folder.iterdir()):
            if not p.is_file():
                continue
            if self.VALID_EXTS and p.suffix.lower() not in self.VALID_EXTS:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            files.append(p)
        return files
