from __future__ import annotations
from dataclasses import dataclass

from models.channel import Channel


@dataclass(frozen=True)
class ChannelStats:
    """
    Immutable snapshot of a finalised channel:
    acceptance interval [min, max] plus the moments it was derived from.
    """
    channel: Channel
    min: float
    max: float
    mean: float
    std_dev: float
