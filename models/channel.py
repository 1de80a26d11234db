from enum import Enum


class ColorSpace(str, Enum):
    RGB = "RGB"
    YCBCR = "YCbCr"
    HSI = "HSI"


class Channel(Enum):
    """
    Explicit (colour space, channel) tag.

    Each member knows the position of its values inside a converted buffer,
    so accumulators are looked up by tag rather than by a bare index.
    """
    RGB_RED = (ColorSpace.RGB, "Red", 0)
    RGB_GREEN = (ColorSpace.RGB, "Green", 1)
    RGB_BLUE = (ColorSpace.RGB, "Blue", 2)
    HSI_HUE = (ColorSpace.HSI, "Hue", 0)
    HSI_SATURATION = (ColorSpace.HSI, "Saturation", 1)
    HSI_INTENSITY = (ColorSpace.HSI, "Intensity", 2)

    def __init__(self, space: ColorSpace, label: str, position: int):
        self.space = space
        self.label = label
        self.position = position

    @property
    def column_name(self) -> str:
        return f"{self.space.value}_{self.label}"

    @classmethod
    def of_space(cls, space: ColorSpace) -> list["Channel"]:
        return [c for c in cls if c.space is space]
