from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable
import logging
import os

import numpy as np
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class PixelMapService:
    """
    Row-parallel map over pixel buffers.

    `fn` must be a pure per-row function (output row k depends only on input
    row k); bands are processed in a thread pool and re-assembled in row
    order, so the result is identical for any worker count.
    """

    def __init__(self, workers: int | None = None):
        self.workers = workers if workers is not None else int(os.getenv("PIXEL_MAP_WORKERS", "1"))

    def map_rows(self, fn: Callable[..., np.ndarray], *arrays: np.ndarray) -> np.ndarray:
        height = arrays[0].shape[0]
        if any(a.shape[0] != height for a in arrays):
            raise ValueError("All arrays must have the same number of rows")

        if self.workers <= 1 or height < 2:
            return fn(*arrays)

        n_bands = min(self.workers, height)
        bounds = np.linspace(0, height, n_bands + 1, dtype=int)
        bands = [
            tuple(a[lo:hi] for a in arrays)
            for lo, hi in zip(bounds[:-1], bounds[1:])
        ]
        logger.debug(f"Mapping {height} rows in {n_bands} bands")

        with ThreadPoolExecutor(max_workers=n_bands) as pool:
            parts = list(pool.map(lambda band: fn(*band), bands))
        return np.concatenate(parts, axis=0)
