from __future__ import annotations

from typing import List, Tuple
import logging
import os

from dotenv import load_dotenv

from models.channel import Channel
from models.channel_accumulator import ChannelAccumulator
from models.channel_stats import ChannelStats
from services.stats_service import Accumulators, StreamingStatsService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ThresholdService:
    """
    Derives [mean - k·σ, mean + k·σ] acceptance intervals from finalised accumulators.
    k = 2 covers ~95 % of a normal distribution.
    """

    def __init__(self, sigma_k: float | None = None, stats_service: StreamingStatsService | None = None):
        self.sigma_k = sigma_k if sigma_k is not None else float(os.getenv("THRESHOLD_SIGMA_K", "2.0"))
        self.stats_service = stats_service or StreamingStatsService()

    def derive(self, mean: float, std_dev: float) -> Tuple[float, float]:
        spread = self.sigma_k * std_dev
        return mean - spread, mean + spread

    def to_channel_stats(self, acc: ChannelAccumulator) -> ChannelStats:
        std_dev = self.stats_service.finalize(acc)
        low, high = self.derive(acc.mean, std_dev)
        return ChannelStats(channel=acc.channel, min=low, max=high, mean=acc.mean, std_dev=std_dev)

    def build_table(self, accumulators: Accumulators) -> List[ChannelStats]:
        """One ChannelStats per accumulator, in Channel declaration order."""
        order = list(Channel)
        table = [
            self.to_channel_stats(accumulators[channel])
            for channel in sorted(accumulators, key=order.index)
        ]
        logger.info(f"Derived thresholds for {len(table)} channels (k = {self.sigma_k})")
        return table
