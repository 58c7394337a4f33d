import numpy as np
import pytest
from sklearn.mixture import GaussianMixture

from bgcut.solvers import SOLVERS, MaxflowGrabCut, OpenCVGrabCut
from bgcut.trimap import Label, Rect

RECT = Rect(20, 20, 60, 60)


@pytest.fixture(params=sorted(SOLVERS))
def grabcut(request):
    return SOLVERS[request.param]()


def test_initialize_separates_square(grabcut, image):
    trimap, _ = grabcut.initialize(image, RECT)
    assert trimap.shape == image.shape[:2]
    assert trimap.dtype == np.uint8
    assert trimap[50, 50] & 1
    assert trimap[5, 5] == Label.BACKGROUND
    assert (trimap[:20] == Label.BACKGROUND).all()


def test_refine_keeps_definite_labels(grabcut, image):
    trimap, models = grabcut.initialize(image, RECT)
    trimap[25, 25] = Label.FOREGROUND
    trimap[50, 50] = Label.BACKGROUND
    refined, models = grabcut.refine(image, trimap, models)
    assert refined[25, 25] == Label.FOREGROUND
    assert refined[50, 50] == Label.BACKGROUND
    assert refined[52, 52] & 1


def test_opencv_models_are_updated_in_place(image):
    solver = OpenCVGrabCut()
    trimap, models = solver.initialize(image, RECT)
    bgd_model, fgd_model = models
    assert bgd_model.shape == fgd_model.shape == (1, 65)
    assert fgd_model.any()
    _, again = solver.refine(image, trimap, models)
    assert again[0] is bgd_model and again[1] is fgd_model


def test_maxflow_skips_when_a_class_is_empty(image):
    solver = MaxflowGrabCut()
    trimap, models = solver.initialize(image, RECT)
    all_background = np.full_like(trimap, Label.BACKGROUND)
    refined, _ = solver.refine(image, all_background, models)
    np.testing.assert_array_equal(refined, all_background)


def test_maxflow_relabels_only_probable_pixels(image):
    solver = MaxflowGrabCut()
    trimap, _ = solver.initialize(image, RECT)
    assert set(np.unique(trimap[20:80, 20:80])) <= {Label.PROBABLE_BACKGROUND, Label.PROBABLE_FOREGROUND}


def test_opencv_refine_continues_from_given_models(image):
    solver = OpenCVGrabCut()
    trimap, models = solver.initialize(image, RECT)
    _, foreign = solver.initialize(255 - image, RECT)

    _, (_, fgd_own) = solver.refine(image, trimap.copy(), models)
    _, (_, fgd_foreign) = solver.refine(image, trimap.copy(), foreign)

    assert not np.allclose(fgd_own, fgd_foreign)


@pytest.mark.parametrize("label", [Label.PROBABLE_BACKGROUND, Label.PROBABLE_FOREGROUND])
def test_opencv_refine_single_class_trimap_is_unchanged(image, label):
    solver = OpenCVGrabCut()
    _, models = solver.initialize(image, RECT)
    trimap = np.full(image.shape[:2], label, dtype=np.uint8)
    refined, _ = solver.refine(image, trimap, models)
    np.testing.assert_array_equal(refined, trimap)


def test_maxflow_refine_warm_starts_fitted_models(image, monkeypatch):
    solver = MaxflowGrabCut()
    trimap, models = solver.initialize(image, RECT)

    initialized = []
    original = GaussianMixture._initialize_parameters

    def record(self, *args, **kwargs):
        initialized.append(self)
        return original(self, *args, **kwargs)

    monkeypatch.setattr(GaussianMixture, "_initialize_parameters", record)

    solver.refine(image, trimap, models)
    assert initialized == []

    fresh = (GaussianMixture(n_components=5, warm_start=True), GaussianMixture(n_components=5, warm_start=True))
    solver.refine(image, trimap, fresh)
    assert len(initialized) == 2
