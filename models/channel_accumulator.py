from __future__ import annotations
from dataclasses import dataclass

from models.channel import Channel


@dataclass
class ChannelAccumulator:
    """
    Welford running state for one channel.
    Zero-initialised; only StreamingStatsService mutates it.
    """
    channel: Channel
    count: int = 0
    mean: float = 0.0
    m2: float = 0.0   # running sum of squared deviations from the mean
