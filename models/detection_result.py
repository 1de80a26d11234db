from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict

from models.mask import Mask


@dataclass
class DetectionResult:
    """
    Data object containing the verdict for one image and the masks behind it.
    """
    kind: str              # "fire" or "smoke"
    detected: bool
    percent: float         # share of positive pixels in the final mask (0-100)
    threshold: float       # percent that had to be exceeded
    masks: Dict[str, Mask] = field(default_factory=dict)  # stage name -> mask
