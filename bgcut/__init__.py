"""Interactive GrabCut background removal."""
from bgcut.app import BgCut
from bgcut.driver import SegmentationDriver
from bgcut.solvers import SOLVERS, MaxflowGrabCut, OpenCVGrabCut, Solver
from bgcut.trimap import Label, Rect, TrimapEditor

__version__ = "0.1.0"

__all__ = [
    "BgCut",
    "Label",
    "MaxflowGrabCut",
    "OpenCVGrabCut",
    "Rect",
    "SOLVERS",
    "SegmentationDriver",
    "Solver",
    "TrimapEditor",
]
