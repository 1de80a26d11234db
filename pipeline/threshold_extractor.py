"""
Threshold Extraction Pipeline
Streams every pixel of a labelled corpus through per-channel Welford
accumulators and derives mean ± k·σ acceptance intervals (RGB and HSI).
"""

import os
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv
from tqdm import tqdm

from models.channel import ColorSpace
from models.channel_stats import ChannelStats
from models.errors import DecodeFailure
from repositories.image_repository import ImageRepository
from repositories.threshold_repository import ThresholdRepository
from services.stats_service import Accumulators, StreamingStatsService
from services.threshold_service import ThresholdService

# Load environment variables
load_dotenv()

CORPUS_WORKERS = int(os.getenv("CORPUS_WORKERS", "1"))
THRESHOLDS_DIR = os.getenv("THRESHOLDS_DIR_PATH", ".")

logger = logging.getLogger(__name__)


def _accumulate_file(
    path: Path,
    image_repository: ImageRepository,
    stats_service: StreamingStatsService,
) -> Optional[Accumulators]:
    """One image → its own accumulator shard, or None when it cannot be decoded."""
    try:
        img = image_repository.load(path)
    except DecodeFailure as err:
        logger.warning(f"Skipping {path.name}: {err}")
        return None
    shard = stats_service.new_accumulators()
    stats_service.accumulate_image(img, shard)
    return shard


def accumulate_corpus(
    corpus_dir: str | Path,
    *,
    workers: int = CORPUS_WORKERS,
    image_repository: ImageRepository = ImageRepository(),
    stats_service: StreamingStatsService = StreamingStatsService(),
    progress: bool = True,
) -> tuple[Accumulators, int]:
    """
    Returns the merged accumulators and the number of images that decoded.

    Each image is accumulated into a private shard (optionally on a worker
    thread); shards are merged here, on a single writer, in file order.
    """
    paths = image_repository.list_files(corpus_dir)
    logger.info(f"Found {len(paths)} file(s) in {corpus_dir} ({workers} worker(s))")

    totals = stats_service.new_accumulators()
    processed = 0

    def work(p: Path):
        logger.debug(f"Processing: {p}")
        return _accumulate_file(p, image_repository, stats_service)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        shards = pool.map(work, paths)
        for shard in tqdm(shards, total=len(paths), desc="corpus", ncols=70, disable=not progress):
            if shard is None:
                continue
            totals = stats_service.merge_sets(totals, shard)
            processed += 1

    return totals, processed


def extract_thresholds(
    corpus_dir: str | Path,
    *,
    workers: int = CORPUS_WORKERS,
    image_repository: ImageRepository = ImageRepository(),
    stats_service: StreamingStatsService = StreamingStatsService(),
    threshold_service: ThresholdService = ThresholdService(),
    progress: bool = True,
) -> List[ChannelStats]:
    """
    Derive the threshold table for a corpus directory.

    Raises:
        NotADirectoryError / PermissionError: corpus cannot be listed
        InsufficientData: not a single pixel could be accumulated
    """
    totals, processed = accumulate_corpus(
        corpus_dir,
        workers=workers,
        image_repository=image_repository,
        stats_service=stats_service,
        progress=progress,
    )
    logger.info(f"Accumulated {processed} image(s)")
    return threshold_service.build_table(totals)


def save_thresholds(
    table: List[ChannelStats],
    output_dir: str | Path = THRESHOLDS_DIR,
    *,
    threshold_repository: ThresholdRepository = ThresholdRepository(),
) -> Path:
    path = threshold_repository.save(table, output_dir)
    print(f"CSV file saved: {path}")
    return path


def log_thresholds(table: List[ChannelStats]) -> None:
    """Print the derived intervals grouped by colour space."""
    for space in (ColorSpace.RGB, ColorSpace.HSI):
        rows = [s for s in table if s.channel.space is space]
        if not rows:
            continue
        print(f"\n=== {space.value} THRESHOLDS ===")
        for s in rows:
            print(f"{s.channel.label}: Min={s.min:.2f} Max={s.max:.2f} "
                  f"Mean={s.mean:.2f} Std={s.std_dev:.2f}")
