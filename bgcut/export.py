from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
from skimage import color, io, util

from bgcut.config import OUTPUT_SUFFIX


def output_path_for(path: str | Path) -> Path:
    return Path(f"{path}{OUTPUT_SUFFIX}")


def load_image(path: str | Path) -> np.ndarray:
    """Read ``path`` as an (H, W, 3) uint8 RGB array; any alpha channel is dropped."""
    img = io.imread(path)
    if img.ndim == 2:
        img = color.gray2rgb(img)
    elif img.shape[2] == 2:
        img = color.gray2rgb(img[..., 0])
    elif img.shape[2] == 4:
        img = img[..., :3]
    elif img.shape[2] != 3:
        raise ValueError(f"Unsupported channel count {img.shape[2]}: {path}")
    return np.ascontiguousarray(util.img_as_ubyte(img))


def to_rgba(composite: np.ndarray) -> np.ndarray:
    """
    Append a binary alpha channel to a composite.

    Alpha is 255 wherever the grayscale brightness of the composite is above
    zero and 0 everywhere else.
    """
    gray = cv2.cvtColor(composite, cv2.COLOR_RGB2GRAY)
    _, alpha = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY)
    return np.dstack((composite, alpha)).astype(np.uint8)


def save_rgba(path: str | Path, rgba: np.ndarray) -> None:
    io.imsave(path, rgba, check_contrast=False)
