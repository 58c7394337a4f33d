import numpy as np
import pytest
from skimage import io

from bgcut.solvers import Solver
from bgcut.trimap import Label, new_trimap


class FakeWindow:
    """Records shown frames and replays scripted keys; closes once they run out."""

    def __init__(self, keys=()):
        self.keys = list(keys)
        self.frames = []
        self.on_pointer = None
        self.opened = False
        self.closed = False

    def open(self, on_pointer):
        self.on_pointer = on_pointer
        self.opened = True

    def show(self, rgb):
        self.frames.append(rgb.copy())

    def wait_key(self):
        return self.keys.pop(0) if self.keys else None

    def is_open(self):
        return self.opened and not self.closed and bool(self.keys)

    def close(self):
        self.closed = True


class RecordingSolver(Solver):
    """Seeds like GrabCut, then relabels every pixel PROBABLE_BACKGROUND on refine."""

    def __init__(self):
        self.init_calls = 0
        self.refine_calls = 0

    def initialize(self, image, rect):
        self.init_calls += 1
        return new_trimap(image.shape[:2], rect), {"fits": 1}

    def refine(self, image, trimap, models):
        self.refine_calls += 1
        models["fits"] += 1
        return np.full_like(trimap, Label.PROBABLE_BACKGROUND), models


def synthetic_image(size=100, lo=35, hi=65):
    """Noisy blue background with a noisy red square in the middle."""
    rng = np.random.default_rng(0)
    img = np.empty((size, size, 3), dtype=np.float64)
    img[:] = (30, 60, 200)
    img[lo:hi, lo:hi] = (210, 40, 30)
    img += rng.normal(0, 8, img.shape)
    return np.clip(img, 0, 255).astype(np.uint8)


@pytest.fixture
def image():
    return synthetic_image()


@pytest.fixture
def image_path(tmp_path, image):
    path = tmp_path / "photo.png"
    io.imsave(path, image, check_contrast=False)
    return path


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def solver():
    return RecordingSolver()
