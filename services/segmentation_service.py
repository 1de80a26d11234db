# services/segmentation_service.py
from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence

from models.image import Image
from models.mask import Mask
from models.segmentation_rule import SegmentationRule
from services.color_space_service import ColorSpaceService
from services.pixel_map_service import PixelMapService

# Stage name of the combined mask, never handed out to a rule
FINAL_STAGE = "final"


def stage_names(rules: Sequence[SegmentationRule]) -> List[str]:
    """
    One distinct stage label per rule, in rule order.
    Unique names are kept as-is; repeated names (and a rule called "final")
    get a 1-based occurrence suffix: rgb, rgb -> rgb_1, rgb_2.
    """
    counts = Counter(rule.name for rule in rules)
    taken = {name for name, n in counts.items() if n == 1 and name != FINAL_STAGE}
    taken.add(FINAL_STAGE)

    names = []
    seen: Counter = Counter()
    for rule in rules:
        if counts[rule.name] == 1 and rule.name != FINAL_STAGE:
            names.append(rule.name)
            continue
        seen[rule.name] += 1
        label = f"{rule.name}_{seen[rule.name]}"
        while label in taken:
            seen[rule.name] += 1
            label = f"{rule.name}_{seen[rule.name]}"
        taken.add(label)
        names.append(label)
    return names


class SegmentationService:
    """
    Turns an RGB image into binary masks, one per rule.
    Conversions are shared between rules that read the same colour space.
    """

    def __init__(
        self,
        color_space_service: ColorSpaceService | None = None,
        pixel_map: PixelMapService | None = None,
    ) -> None:
        self.pixel_map = pixel_map or PixelMapService()
        self.color_space_service = color_space_service or ColorSpaceService(self.pixel_map)

    def segment(self, img: Image, rule: SegmentationRule) -> Mask:
        converted = self.color_space_service.convert(img, rule.color_space)
        return self._apply(converted, rule)

    def segment_all(self, img: Image, rules: Iterable[SegmentationRule]) -> Dict[str, Mask]:
        """
        Masks keyed by stage name, one entry for every rule given.
        Rules sharing a name are all kept (see `stage_names`).
        """
        rules = list(rules)
        converted_cache: Dict[str, Image] = {}
        masks: Dict[str, Mask] = {}
        for stage, rule in zip(stage_names(rules), rules):
            key = rule.color_space.value
            if key not in converted_cache:
                converted_cache[key] = self.color_space_service.convert(img, rule.color_space)
            masks[stage] = self._apply(converted_cache[key], rule)
        return masks

    def _apply(self, converted: Image, rule: SegmentationRule) -> Mask:
        selected = self.pixel_map.map_rows(rule.predicate, converted.pixels)
        return Mask.from_bool(selected)
