from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

WINDOW_TITLE = "BgCut powered by GrabCut OpenCV"
WINDOW_SIZE = (500, 500)
KEY_POLL_MS = 100

OUTPUT_SUFFIX = ".bgcut.png"

BRUSH_RADIUS = 1
SEED_COLOR = (110, 250, 110) # RGB
SEED_THICKNESS = 3

DEFAULT_SOLVER = "opencv"


@dataclass(frozen=True)
class Settings:
    """Runtime options resolved from the command line."""
    image: Path
    solver: str = DEFAULT_SOLVER
    verbose: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Settings":
        return cls(image=Path(args.image), solver=args.solver, verbose=args.verbose)
