"""
Unit tests for models.segmentation_rule and services.segmentation_service
"""
from dataclasses import dataclass

import numpy as np
import pytest

from models.channel import ColorSpace
from models.image import Image
from models.segmentation_rule import (
    SegmentationRule, RgbFireRule, YCbCrFireRule, RgbSmokeRule, HsiSmokeRule,
)
from services.pixel_map_service import PixelMapService
from services.segmentation_service import SegmentationService, stage_names


def _px(*triples) -> np.ndarray:
    return np.array([list(triples)], dtype=np.uint8)


class TestRgbFireRule:
    @pytest.mark.parametrize("rgb, expected", [
        ((211, 210, 209), True),
        ((255, 200, 0), True),
        ((211, 100, 99), True),
        ((210, 100, 50), False),   # R must be strictly above 210
        ((211, 211, 100), False),  # G == R
        ((211, 100, 100), False),  # G == B
        ((211, 100, 150), False),  # B > G
        ((0, 0, 0), False),
    ])
    def test_boundaries(self, rgb, expected):
        assert RgbFireRule().predicate(_px(rgb))[0, 0] == expected

    def test_exhaustive_around_red_threshold(self):
        r, g, b = np.meshgrid(np.arange(205, 216), np.arange(256), np.arange(256), indexing="ij")
        pixels = np.stack([r, g, b], axis=-1).astype(np.uint8).reshape(-1, 256, 3)
        selected = RgbFireRule().predicate(pixels)
        expected = (r > 210) & (r > g) & (g > b)
        np.testing.assert_array_equal(selected, expected.reshape(-1, 256))

    def test_configurable_threshold(self):
        assert RgbFireRule(red_min=100).predicate(_px((150, 100, 50)))[0, 0]
        assert not RgbFireRule().predicate(_px((150, 100, 50)))[0, 0]

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FIRE_RGB_RED_MIN", "120")
        assert RgbFireRule.from_env().red_min == 120


class TestYCbCrFireRule:
    @pytest.mark.parametrize("ycbcr, expected", [
        ((131, 119, 151), True),
        ((130, 119, 151), False),
        ((131, 120, 151), False),
        ((131, 119, 150), False),
    ])
    def test_boundaries(self, ycbcr, expected):
        assert YCbCrFireRule().predicate(_px(ycbcr))[0, 0] == expected

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FIRE_YCBCR_CR_MIN", "160")
        rule = YCbCrFireRule.from_env()
        assert (rule.y_min, rule.cb_max, rule.cr_min) == (130, 120, 160)


class TestRgbSmokeRule:
    @pytest.mark.parametrize("rgb, expected", [
        ((200, 200, 200), True),
        ((191, 191, 191), True),
        ((220, 200, 196), True),    # largest gap 24
        ((221, 200, 196), False),   # gap 25 is not < 25
        ((190, 200, 200), False),   # R not above 190
        ((255, 200, 230), False),   # no uint8 wraparound on differences
        ((100, 100, 100), False),
    ])
    def test_boundaries(self, rgb, expected):
        assert RgbSmokeRule().predicate(_px(rgb))[0, 0] == expected


class TestHsiSmokeRule:
    @pytest.mark.parametrize("hsi, expected", [
        ((0, 49, 151), True),
        ((200, 0, 255), True),
        ((0, 50, 151), False),
        ((0, 49, 150), False),
    ])
    def test_boundaries(self, hsi, expected):
        assert HsiSmokeRule().predicate(_px(hsi))[0, 0] == expected


@dataclass
class BlueSkyRule(SegmentationRule):
    """A rule defined outside the package, to show the strategy seam."""
    blue_min: int = 150

    name = "sky"
    color_space = ColorSpace.RGB

    def predicate(self, pixels):
        r, g, b = self._split(pixels)
        return (b > self.blue_min) & (b > r) & (b > g)


class TestSegmentationService:
    @pytest.fixture
    def service(self):
        return SegmentationService(pixel_map=PixelMapService(workers=1))

    def test_fire_masks(self, service, make_image):
        img = make_image([[(255, 0, 0), (255, 200, 0)]])
        rgb_mask = service.segment(img, RgbFireRule())
        ycbcr_mask = service.segment(img, YCbCrFireRule())
        assert rgb_mask.pixels.tolist() == [[0, 0]]  # G == B for pure red
        assert ycbcr_mask.pixels.tolist() == [[0, 255]]

    def test_smoke_masks(self, service, make_image):
        img = make_image([[(220, 220, 220), (255, 0, 0)]])
        masks = service.segment_all(img, [RgbSmokeRule(), HsiSmokeRule()])
        assert masks["rgb"].pixels.tolist() == [[255, 0]]
        assert masks["hsi"].pixels.tolist() == [[255, 0]]

    def test_custom_rule_plugs_in(self, service, make_image):
        img = make_image([[(10, 20, 200), (200, 20, 10)]])
        assert service.segment(img, BlueSkyRule()).pixels.tolist() == [[255, 0]]

    def test_mask_matches_image_size(self, service, random_rgb):
        mask = service.segment(Image(random_rgb), YCbCrFireRule())
        assert mask.pixels.shape == random_rgb.shape[:2]

    def test_parallel_matches_sequential(self, service, random_rgb):
        parallel = SegmentationService(pixel_map=PixelMapService(workers=4))
        for rule in (RgbFireRule(), YCbCrFireRule(), RgbSmokeRule(), HsiSmokeRule()):
            np.testing.assert_array_equal(
                parallel.segment(Image(random_rgb), rule).pixels,
                service.segment(Image(random_rgb), rule).pixels,
            )

    def test_input_untouched(self, service, random_rgb):
        original = random_rgb.copy()
        service.segment(Image(random_rgb), HsiSmokeRule())
        np.testing.assert_array_equal(random_rgb, original)

    def test_same_named_rules_all_kept(self, service, make_image):
        img = make_image([[(240, 100, 50)]])
        masks = service.segment_all(img, [RgbFireRule(red_min=250), RgbFireRule()])
        assert list(masks) == ["rgb_1", "rgb_2"]
        assert masks["rgb_1"].pixels.tolist() == [[0]]
        assert masks["rgb_2"].pixels.tolist() == [[255]]


class TestStageNames:
    def test_unique_names_unchanged(self):
        assert stage_names([RgbFireRule(), YCbCrFireRule()]) == ["rgb", "ycbcr"]

    def test_duplicates_are_numbered(self):
        assert stage_names([RgbFireRule(), BlueSkyRule(), RgbFireRule()]) == ["rgb_1", "sky", "rgb_2"]

    def test_final_is_reserved(self):
        rule = BlueSkyRule()
        rule.name = "final"
        assert stage_names([rule]) == ["final_1"]

    def test_suffix_skips_existing_name(self):
        taken = BlueSkyRule()
        taken.name = "rgb_1"
        assert stage_names([RgbFireRule(), taken, RgbFireRule()]) == ["rgb_2", "rgb_1", "rgb_3"]
