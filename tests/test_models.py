"""
Unit tests for the data objects in models/
"""
import numpy as np
import pytest

from models.channel import Channel, ColorSpace
from models.errors import InvalidImage, DetectorError
from models.image import Image
from models.mask import Mask


class TestImage:
    def test_dimensions(self):
        img = Image(np.zeros((3, 5, 3), dtype=np.uint8))
        assert (img.width, img.height, img.channels) == (5, 3, 3)

    def test_single_channel_2d(self):
        img = Image(np.zeros((2, 2), dtype=np.uint8))
        assert img.channels == 1

    @pytest.mark.parametrize("shape", [(2, 2, 2), (2, 2, 4), (2,), (1, 1, 1, 3)])
    def test_rejects_bad_shapes(self, shape):
        with pytest.raises(InvalidImage):
            Image(np.zeros(shape, dtype=np.uint8))


class TestMask:
    def test_positive_count(self):
        mask = Mask(np.array([[0, 255], [255, 255]], dtype=np.uint8))
        assert mask.positive_count == 3
        assert (mask.width, mask.height) == (2, 2)

    def test_rejects_non_binary_values(self):
        with pytest.raises(InvalidImage):
            Mask(np.array([[0, 128]], dtype=np.uint8))

    def test_rejects_multi_channel(self):
        with pytest.raises(InvalidImage):
            Mask(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_from_bool(self):
        mask = Mask.from_bool(np.array([[True, False]]))
        assert mask.pixels.dtype == np.uint8
        assert mask.pixels.tolist() == [[255, 0]]

    def test_invalid_image_is_detector_error(self):
        with pytest.raises(DetectorError):
            Mask(np.array([[7]], dtype=np.uint8))


class TestChannel:
    def test_column_names(self):
        assert Channel.RGB_RED.column_name == "RGB_Red"
        assert Channel.HSI_INTENSITY.column_name == "HSI_Intensity"

    def test_positions_are_bound_to_tags(self):
        assert [c.position for c in Channel.of_space(ColorSpace.RGB)] == [0, 1, 2]
        assert [c.label for c in Channel.of_space(ColorSpace.HSI)] == ["Hue", "Saturation", "Intensity"]

    def test_six_distinct_tags(self):
        assert len(set(Channel)) == 6
