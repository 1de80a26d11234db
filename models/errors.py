class DetectorError(Exception):
    """Base class for every failure raised by the detector."""


class DecodeFailure(DetectorError, ValueError):
    """Input bytes could not be decoded as an image."""


class DimensionMismatch(DetectorError, ValueError):
    """Two masks (or images) that must share a shape do not."""


class InvalidImage(DetectorError, ValueError):
    """Pixel buffer violates its shape / channel / value invariants."""


class InsufficientData(DetectorError):
    """A statistic was finalised before any value was accumulated."""


class IOFailure(DetectorError, OSError):
    """A mask, report or threshold table could not be written."""
