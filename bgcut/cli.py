from __future__ import annotations

import argparse
import logging
import sys

from bgcut.app import BgCut
from bgcut.config import DEFAULT_SOLVER, Settings
from bgcut.solvers import SOLVERS
from bgcut.window import OpenCVWindow

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """Raised when the session cannot be started."""


class _ArgumentParser(argparse.ArgumentParser):
    # surface usage errors to main() instead of exiting with status 2
    def error(self, message):
        raise StartupError(f"{self.prog}: error: {message}")


def _parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="bgcut",
        description="Interactively remove image background using the GrabCut algorithm",
    )
    p.add_argument("--image", required=True, help="image file to remove background from")
    p.add_argument("--solver", choices=sorted(SOLVERS), default=DEFAULT_SOLVER,
                   help=f"GrabCut implementation [{DEFAULT_SOLVER}]")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings.from_args(_parser().parse_args(argv))
        logging.basicConfig(
            level=logging.DEBUG if settings.verbose else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        bgcut = BgCut(settings.image, OpenCVWindow(), SOLVERS[settings.solver]())
        logger.debug("Session for %s using %s solver", settings.image, settings.solver)
        bgcut.run()
    except Exception as err:
        print(err, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
