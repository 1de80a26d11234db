"""
Shared pytest fixtures: synthetic RGB images and on-disk corpora.
"""
import numpy as np
import pytest

from helpers import solid, write_rgb
from models.image import Image


@pytest.fixture
def make_image():
    """Factory: rows of RGB triples (or an ndarray) -> Image."""
    def _make(rows, path=None):
        pixels = rows if isinstance(rows, np.ndarray) else np.array(rows, dtype=np.uint8)
        return Image(pixels=pixels, path=path)
    return _make


@pytest.fixture
def random_rgb():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(37, 23, 3), dtype=np.uint8)


@pytest.fixture
def corpus_dir(tmp_path):
    """Two lossless solid images plus a file that is not an image."""
    corpus = tmp_path / "corpus"
    corpus.mkdir()
    write_rgb(corpus / "a.png", solid((10, 20, 30), 2, 2))
    write_rgb(corpus / "b.png", solid((30, 40, 50), 2, 2))
    (corpus / "notes.txt").write_text("not an image")
    return corpus
