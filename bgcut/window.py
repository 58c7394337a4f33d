from __future__ import annotations

from typing import Callable

import cv2
import numpy as np

from bgcut.config import KEY_POLL_MS, WINDOW_SIZE, WINDOW_TITLE
from bgcut.events import PointerEvent, pointer_event_from_cv


class OpenCVWindow:
    """HighGUI window that shows RGB frames and reports pointer and key input."""

    def __init__(self, title: str = WINDOW_TITLE, size: tuple[int, int] = WINDOW_SIZE) -> None:
        self.title = title
        self.size = size
        self._on_pointer: Callable[[PointerEvent], None] | None = None
        self._opened = False

    def open(self, on_pointer: Callable[[PointerEvent], None]) -> None:
        self._on_pointer = on_pointer
        cv2.namedWindow(self.title, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.title, *self.size)
        cv2.setMouseCallback(self.title, self._mouse_callback)
        self._opened = True

    def _mouse_callback(self, event: int, x: int, y: int, flags: int, param: object) -> None:
        pointer_event = pointer_event_from_cv(event, x, y, flags)
        if pointer_event is not None and self._on_pointer is not None:
            self._on_pointer(pointer_event)

    def show(self, rgb: np.ndarray) -> None:
        cv2.imshow(self.title, cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))

    def wait_key(self) -> str | None:
        key = cv2.waitKey(KEY_POLL_MS)
        if key < 0:
            return None
        return chr(key & 0xFF)

    def is_open(self) -> bool:
        # WND_PROP_VISIBLE drops below 1 once the user closes the window
        return self._opened and cv2.getWindowProperty(self.title, cv2.WND_PROP_VISIBLE) >= 1

    def close(self) -> None:
        if self.is_open():
            cv2.destroyWindow(self.title)
        self._opened = False
