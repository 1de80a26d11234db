from __future__ import annotations

from typing import Dict, Iterable
import math

import numpy as np

from models.channel import Channel, ColorSpace
from models.channel_accumulator import ChannelAccumulator
from models.errors import InsufficientData
from models.image import Image
from services.color_space_service import ColorSpaceService

Accumulators = Dict[Channel, ChannelAccumulator]


class StreamingStatsService:
    """
    Welford's online mean / variance, one accumulator per channel tag.

    Single-pass and numerically stable over millions of pixels. Partial
    accumulators built on disjoint shards are combined with `merge`, which
    gives the same moments as one sequential pass over the union.
    """

    def __init__(self, color_space_service: ColorSpaceService | None = None):
        self.color_space_service = color_space_service or ColorSpaceService()

    # ─── Single accumulator ───────────────────────────────────────
    @staticmethod
    def update(acc: ChannelAccumulator, value: float) -> None:
        acc.count += 1
        delta = value - acc.mean
        acc.mean += delta / acc.count
        delta2 = value - acc.mean
        acc.m2 += delta * delta2

    @staticmethod
    def merge(a: ChannelAccumulator, b: ChannelAccumulator) -> ChannelAccumulator:
        """
        Pairwise (Chan et al.) merge; returns a new accumulator, inputs untouched.
        """
        if a.channel is not b.channel:
            raise ValueError(f"Cannot merge {a.channel.column_name} with {b.channel.column_name}")
        if a.count == 0:
            return ChannelAccumulator(b.channel, b.count, b.mean, b.m2)
        if b.count == 0:
            return ChannelAccumulator(a.channel, a.count, a.mean, a.m2)

        count = a.count + b.count
        delta = b.mean - a.mean
        mean = a.mean + delta * b.count / count
        m2 = a.m2 + b.m2 + delta * delta * a.count * b.count / count
        return ChannelAccumulator(a.channel, count, mean, m2)

    def update_batch(self, acc: ChannelAccumulator, values: np.ndarray) -> None:
        """Fold a whole shard of values into *acc* (same result as per-value updates)."""
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size == 0:
            return
        shard_mean = float(values.mean())
        shard = ChannelAccumulator(
            acc.channel,
            count=int(values.size),
            mean=shard_mean,
            m2=float(np.square(values - shard_mean).sum()),
        )
        merged = self.merge(acc, shard)
        acc.count, acc.mean, acc.m2 = merged.count, merged.mean, merged.m2

    @staticmethod
    def finalize(acc: ChannelAccumulator) -> float:
        """Population standard deviation sqrt(M2 / count)."""
        if acc.count == 0:
            raise InsufficientData(f"No values accumulated for {acc.channel.column_name}")
        return math.sqrt(acc.m2 / acc.count)

    # ─── Accumulator sets ─────────────────────────────────────────
    @staticmethod
    def new_accumulators(channels: Iterable[Channel] = Channel) -> Accumulators:
        return {channel: ChannelAccumulator(channel) for channel in channels}

    def merge_sets(self, a: Accumulators, b: Accumulators) -> Accumulators:
        return {channel: self.merge(a[channel], b[channel]) for channel in a}

    def accumulate_image(self, img: Image, accumulators: Accumulators) -> None:
        """
        Feed every pixel of *img* into the RGB and HSI accumulators.
        HSI values use the max-branch formulation (hue in degrees,
        saturation as a fraction, intensity on 0-255).
        """
        self.color_space_service.require_rgb(img)
        buffers = {ColorSpace.RGB: img.pixels}
        if any(c.space is ColorSpace.HSI for c in accumulators):
            buffers[ColorSpace.HSI] = self.color_space_service.to_hsi_components(img)

        for channel, acc in accumulators.items():
            self.update_batch(acc, buffers[channel.space][..., channel.position])
