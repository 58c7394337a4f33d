from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from bgcut.config import SEED_COLOR, SEED_THICKNESS
from bgcut.driver import SegmentationDriver
from bgcut.events import PointerAction, PointerEvent
from bgcut.export import load_image, output_path_for, save_rgba, to_rgba
from bgcut.solvers import Solver
from bgcut.trimap import Label, Rect, TrimapEditor

logger = logging.getLogger(__name__)


class BgCut:
    """
    Interactive session: routes pointer and key input to the trimap editor
    and the segmentation driver.

    Keys
    ----
    c : show the whole image as foreground, then drop the trimap
    s : save the current composite with a transparent background
    n : run one more GrabCut iteration
    q : quit
    """

    def __init__(self, path: str | Path, window, solver: Solver) -> None:
        self.image = load_image(path)
        self.output_path = output_path_for(path)
        self.window = window
        self.editor = TrimapEditor(self.image.shape[:2])
        self.driver = SegmentationDriver(self.image, solver)

    def run(self) -> None:
        self.window.open(self.handle_pointer)
        self.window.show(self.image)
        try:
            while self.window.is_open():
                key = self.window.wait_key()
                if key is not None and self.handle_key(key):
                    break
        finally:
            self.window.close()

    # ---------- pointer input ----------
    def handle_pointer(self, event: PointerEvent) -> None:
        if event.action is PointerAction.PRESS:
            self.editor.begin_drag(event.point)
        elif event.action is PointerAction.MOVE:
            if self.editor.dragging:
                self.editor.paint_at(event.point, event.mode)
        elif event.action is PointerAction.RELEASE:
            start = self.editor.end_drag()
            if self.editor.has_trimap:
                self.editor.paint_at(event.point, event.mode)
            elif start is not None:
                rect = self.editor.seed_rect(start, event.point)
                if rect is not None:
                    self._seed(rect)

    def _seed(self, rect: Rect) -> None:
        overlay = self.image.copy()
        x, y, w, h = rect
        cv2.rectangle(overlay, (x, y), (x + w, y + h), SEED_COLOR, SEED_THICKNESS)
        self.window.show(overlay)
        self.driver.run_iteration(self.editor, rect)

    # ---------- key input ----------
    def handle_key(self, key: str) -> bool:
        """Apply a key command; True means the session should end."""
        if key == "c":
            self.editor.fill(Label.FOREGROUND)
            self.show_composite()
            self.editor.clear_all()
        elif key == "s":
            self.show_composite()
            self.save()
        elif key == "n":
            if self.editor.has_trimap:
                self.driver.run_iteration(self.editor)
                self.show_composite()
            else:
                logger.debug("Ignoring 'n': no selection yet")
        elif key == "q":
            return True
        return False

    def composite(self) -> np.ndarray:
        return self.driver.composite(self.editor.trimap)

    def show_composite(self) -> None:
        self.window.show(self.composite())

    def save(self) -> None:
        rgba = to_rgba(self.composite())
        try:
            save_rgba(self.output_path, rgba)
        except (OSError, ValueError) as exc:
            logger.error("Could not save %s: %s", self.output_path, exc)
            return
        logger.info("Saved %s", self.output_path)
