from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

import cv2
import numpy as np

from bgcut.config import BRUSH_RADIUS
from bgcut.events import PaintMode

logger = logging.getLogger(__name__)

Point = tuple[int, int]


class Label(IntEnum):
    # Same values as the cv2.GC_* mask constants.
    BACKGROUND = cv2.GC_BGD
    FOREGROUND = cv2.GC_FGD
    PROBABLE_BACKGROUND = cv2.GC_PR_BGD
    PROBABLE_FOREGROUND = cv2.GC_PR_FGD


def foreground_mask(trimap: np.ndarray) -> np.ndarray:
    """1 where the label is FOREGROUND or PROBABLE_FOREGROUND, 0 elsewhere."""
    return (trimap & 1).astype(np.uint8)


def is_definite(trimap: np.ndarray) -> np.ndarray:
    return (trimap == Label.BACKGROUND) | (trimap == Label.FOREGROUND)


def new_trimap(shape: tuple[int, int], rect: "Rect") -> np.ndarray:
    """BACKGROUND outside ``rect``, PROBABLE_FOREGROUND inside."""
    trimap = np.full(shape, Label.BACKGROUND, dtype=np.uint8)
    x, y, w, h = rect
    trimap[y : y + h, x : x + w] = Label.PROBABLE_FOREGROUND
    return trimap


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_points(cls, start: Point, end: Point) -> "Rect":
        return cls(start[0], start[1], end[0] - start[0], end[1] - start[1])

    @property
    def area(self) -> int:
        if self.width <= 0 or self.height <= 0:
            return 0
        return self.width * self.height

    def __iter__(self):
        return iter((self.x, self.y, self.width, self.height))


class TrimapEditor:
    """
    Holds the per-pixel label map and the pending drag start.

    The trimap is ``None`` until a seed rectangle has been turned into one
    and again after :meth:`clear_all`.
    """

    def __init__(self, shape: tuple[int, int]) -> None:
        self.shape = shape
        self.trimap: np.ndarray | None = None
        self.drag_start: Point | None = None

    @property
    def has_trimap(self) -> bool:
        return self.trimap is not None

    @property
    def dragging(self) -> bool:
        return self.drag_start is not None

    def begin_drag(self, point: Point) -> None:
        self.drag_start = point

    def end_drag(self) -> Point | None:
        start, self.drag_start = self.drag_start, None
        return start

    def paint_at(self, point: Point, mode: PaintMode) -> None:
        if self.trimap is None or mode is PaintMode.NONE:
            return
        label = Label.FOREGROUND if mode is PaintMode.FOREGROUND else Label.BACKGROUND
        cv2.circle(self.trimap, point, BRUSH_RADIUS, int(label), -1)

    def seed_rect(self, start: Point, end: Point) -> Rect | None:
        """Rectangle from ``start`` to ``end``, or ``None`` if it is degenerate
        or a trimap already exists."""
        if self.trimap is not None:
            return None
        rect = Rect.from_points(start, end)
        if rect.area <= 0:
            logger.debug("Discarding degenerate seed rectangle %s", rect)
            return None
        return rect

    def set_trimap(self, trimap: np.ndarray) -> None:
        if trimap.shape != self.shape:
            raise ValueError(f"trimap shape {trimap.shape} does not match image {self.shape}")
        self.trimap = np.ascontiguousarray(trimap, dtype=np.uint8)

    def fill(self, label: Label) -> None:
        if self.trimap is not None:
            self.trimap[:] = label

    def clear_all(self) -> None:
        self.trimap = None
