from __future__ import annotations

import abc
import logging
from typing import Any

import cv2
import maxflow
import numpy as np
from sklearn.mixture import GaussianMixture

from bgcut.trimap import Label, Rect, is_definite, new_trimap

logger = logging.getLogger(__name__)

# Terminal capacity that pins a definite pixel to its side of the cut.
HARD_CONSTRAINT = 1e9

_RIGHT = np.array([[0, 0, 0], [0, 0, 1], [0, 0, 0]])
_DOWN = np.array([[0, 0, 0], [0, 0, 0], [0, 1, 0]])


class Solver(abc.ABC):
    """
    One GrabCut iteration per call.

    ``models`` is whatever the implementation needs to carry between calls;
    callers pass it back untouched.
    """

    @abc.abstractmethod
    def initialize(self, image: np.ndarray, rect: Rect) -> tuple[np.ndarray, Any]:
        """Bootstrap a trimap and color models from ``rect`` and run one iteration."""

    @abc.abstractmethod
    def refine(self, image: np.ndarray, trimap: np.ndarray, models: Any) -> tuple[np.ndarray, Any]:
        """Run one iteration starting from ``trimap`` and ``models``."""


class OpenCVGrabCut(Solver):
    """``cv2.grabCut`` with a single iteration per call."""

    def initialize(self, image: np.ndarray, rect: Rect) -> tuple[np.ndarray, Any]:
        trimap = np.zeros(image.shape[:2], dtype=np.uint8)
        bgd_model = np.zeros((1, 65), np.float64)
        fgd_model = np.zeros((1, 65), np.float64)
        cv2.grabCut(image, trimap, tuple(rect), bgd_model, fgd_model, 1, cv2.GC_INIT_WITH_RECT)
        return trimap, (bgd_model, fgd_model)

    def refine(self, image: np.ndarray, trimap: np.ndarray, models: Any) -> tuple[np.ndarray, Any]:
        bgd_model, fgd_model = models
        trimap = trimap.copy()
        fg = (trimap & 1).astype(bool)
        if fg.all() or not fg.any():
            logger.debug("Trimap holds a single class, trimap unchanged")
            return trimap, models
        # GC_EVAL continues from the given models instead of re-clustering the mask
        cv2.grabCut(image, trimap, None, bgd_model, fgd_model, 1, cv2.GC_EVAL)
        return trimap, (bgd_model, fgd_model)


def _build_gmm(n_components: int) -> GaussianMixture:
    # warm_start keeps the previous fit as the starting point of the next one
    return GaussianMixture(
        n_components=n_components,
        covariance_type="full",
        max_iter=100,
        warm_start=True,
        random_state=0,
    )


def _unary_costs(img: np.ndarray, fg_gmm: GaussianMixture, bg_gmm: GaussianMixture) -> tuple[np.ndarray, np.ndarray]:
    """Return negative log-likelihood (data cost) for each pixel being FG / BG."""
    h, w, _ = img.shape
    flat = img.reshape(-1, 3)
    fg_cost = -fg_gmm.score_samples(flat).reshape(h, w)
    bg_cost = -bg_gmm.score_samples(flat).reshape(h, w)
    # only the difference matters to the cut; capacities must be non-negative
    offset = np.minimum(fg_cost, bg_cost)
    return fg_cost - offset, bg_cost - offset


def _smoothness_weights(img: np.ndarray, lam: float) -> tuple[np.ndarray, np.ndarray]:
    """Contrast-sensitive weights to the right and lower neighbour of every pixel."""
    h, w, _ = img.shape
    right_diff = np.sum((img[:, 1:] - img[:, :-1]) ** 2, axis=2)
    down_diff = np.sum((img[1:] - img[:-1]) ** 2, axis=2)

    mean_diff = (right_diff.sum() + down_diff.sum()) / max(right_diff.size + down_diff.size, 1)
    beta = 1.0 / (2.0 * mean_diff) if mean_diff > 0 else 0.0

    right_w = np.zeros((h, w))
    down_w = np.zeros((h, w))
    right_w[:, :-1] = lam * np.exp(-beta * right_diff)
    down_w[:-1, :] = lam * np.exp(-beta * down_diff)
    return right_w, down_w


class MaxflowGrabCut(Solver):
    """
    GrabCut on scikit-learn mixtures and a PyMaxflow grid graph.

    Parameters
    ----------
    n_components : int  mixture components per color model
    lam : float  smoothness weight
    """

    def __init__(self, n_components: int = 5, lam: float = 50.0) -> None:
        self.n_components = n_components
        self.lam = lam

    def initialize(self, image: np.ndarray, rect: Rect) -> tuple[np.ndarray, Any]:
        trimap = new_trimap(image.shape[:2], rect)
        models = (_build_gmm(self.n_components), _build_gmm(self.n_components))
        return self.refine(image, trimap, models)

    def refine(self, image: np.ndarray, trimap: np.ndarray, models: Any) -> tuple[np.ndarray, Any]:
        fg_gmm, bg_gmm = models
        img = image.astype(np.float64)
        h, w, _ = img.shape

        fg = (trimap & 1).astype(bool)
        fg_samples = img[fg]
        bg_samples = img[~fg]
        if len(fg_samples) < self.n_components or len(bg_samples) < self.n_components:
            logger.debug("Too few samples to fit color models, trimap unchanged")
            return trimap.copy(), models

        fg_gmm.fit(fg_samples)
        bg_gmm.fit(bg_samples)
        fg_cost, bg_cost = _unary_costs(img, fg_gmm=fg_gmm, bg_gmm=bg_gmm)

        fg_cost[trimap == Label.BACKGROUND] = HARD_CONSTRAINT
        bg_cost[trimap == Label.BACKGROUND] = 0
        fg_cost[trimap == Label.FOREGROUND] = 0
        bg_cost[trimap == Label.FOREGROUND] = HARD_CONSTRAINT

        g = maxflow.Graph[float]()
        nodeids = g.add_grid_nodes((h, w))
        # a node on the sink side pays its source capacity, i.e. the FG cost
        g.add_grid_tedges(nodeids, fg_cost, bg_cost)

        right_w, down_w = _smoothness_weights(img, self.lam)
        g.add_grid_edges(nodeids, weights=right_w, structure=_RIGHT, symmetric=True)
        g.add_grid_edges(nodeids, weights=down_w, structure=_DOWN, symmetric=True)

        g.maxflow()
        is_fg = g.get_grid_segments(nodeids)

        relabelled = np.where(is_fg, Label.PROBABLE_FOREGROUND, Label.PROBABLE_BACKGROUND)
        return np.where(is_definite(trimap), trimap, relabelled).astype(np.uint8), models


SOLVERS: dict[str, type[Solver]] = {
    "opencv": OpenCVGrabCut,
    "maxflow": MaxflowGrabCut,
}
