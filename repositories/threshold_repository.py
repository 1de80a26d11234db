from datetime import datetime
from pathlib import Path
from typing import List, Union
import logging

import pandas as pd

from models.channel_stats import ChannelStats
from models.errors import IOFailure

logger = logging.getLogger(__name__)

COLUMNS = ["Channel", "Min", "Max", "Mean", "Std_Dev"]


class ThresholdRepository:
    """
    Tabular export of derived thresholds: one row per channel per colour space.
    """

    @staticmethod
    def to_frame(table: List[ChannelStats]) -> pd.DataFrame:
        rows = [
            (s.channel.column_name, s.min, s.max, s.mean, s.std_dev)
            for s in table
        ]
        return pd.DataFrame(rows, columns=COLUMNS)

    @staticmethod
    def build_filename(now: datetime | None = None) -> str:
        now = now or datetime.now()
        return now.strftime("thresholds_%Y%m%d_%H%M%S.csv")

    def save(
        self,
        table: List[ChannelStats],
        output_dir: Union[str, Path] = ".",
        *,
        now: datetime | None = None,
    ) -> Path:
        output_dir = Path(output_dir or ".")
        path = output_dir / self.build_filename(now)
        try:
            self.to_frame(table).to_csv(path, index=False, float_format="%.2f")
        except OSError as err:
            raise IOFailure(f"Could not write threshold CSV {path}: {err}") from err
        logger.info(f"Threshold CSV saved: {path}")
        return path
