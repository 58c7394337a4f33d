from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import cv2


class PointerAction(Enum):
    MOVE = "move"
    PRESS = "press"
    RELEASE = "release"


class PaintMode(Enum):
    NONE = "none"
    FOREGROUND = "foreground"
    BACKGROUND = "background"


@dataclass(frozen=True)
class PointerEvent:
    action: PointerAction
    x: int
    y: int
    mode: PaintMode = PaintMode.NONE

    @property
    def point(self) -> tuple[int, int]:
        return (self.x, self.y)


_ACTIONS = {
    cv2.EVENT_MOUSEMOVE: PointerAction.MOVE,
    cv2.EVENT_LBUTTONDOWN: PointerAction.PRESS,
    cv2.EVENT_LBUTTONUP: PointerAction.RELEASE,
}


def paint_mode_from_flags(flags: int) -> PaintMode:
    """Ctrl marks foreground, shift marks background; ctrl wins if both are held."""
    if flags & cv2.EVENT_FLAG_CTRLKEY:
        return PaintMode.FOREGROUND
    if flags & cv2.EVENT_FLAG_SHIFTKEY:
        return PaintMode.BACKGROUND
    return PaintMode.NONE


def pointer_event_from_cv(event: int, x: int, y: int, flags: int) -> PointerEvent | None:
    action = _ACTIONS.get(event)
    if action is None:
        return None
    return PointerEvent(action, x, y, paint_mode_from_flags(flags))
