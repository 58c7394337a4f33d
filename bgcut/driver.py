from __future__ import annotations

import logging
from typing import Any

import numpy as np

from bgcut.solvers import Solver
from bgcut.trimap import Rect, TrimapEditor, foreground_mask, is_definite

logger = logging.getLogger(__name__)


class SegmentationDriver:
    """
    Owns the color models and calls the solver, one iteration at a time.
    """

    def __init__(self, image: np.ndarray, solver: Solver) -> None:
        self.image = image
        self.solver = solver
        self._models: Any = None
        self._iterations = 0

    @property
    def iterations(self) -> int:
        return self._iterations

    def run_iteration(self, editor: TrimapEditor, rect: Rect | None = None) -> None:
        if rect is not None:
            trimap, self._models = self.solver.initialize(self.image, rect)
        else:
            if editor.trimap is None:
                raise ValueError("refinement needs an existing trimap")
            before = editor.trimap
            trimap, self._models = self.solver.refine(self.image, before.copy(), self._models)
            definite = is_definite(before)
            trimap = np.where(definite, before, trimap)

        editor.set_trimap(trimap)
        self._iterations += 1
        logger.info("GrabCut iteration %d (%s)", self._iterations, "seed" if rect is not None else "refine")

    def composite(self, trimap: np.ndarray | None) -> np.ndarray:
        """Source image with every non-foreground pixel set to zero."""
        if trimap is None:
            return self.image.copy()
        return self.image * foreground_mask(trimap)[:, :, np.newaxis]
