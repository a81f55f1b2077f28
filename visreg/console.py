"""Console logging for scripts and test runners that drive the launcher.

visreg only logs through ``logging.getLogger(__name__)``; nothing in the
package installs handlers on import. Runners call ``setup_logging`` once to
get rich-formatted output for the ``visreg`` loggers without touching the
root logger or any handler the host test runner already installed.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose: bool = False, logger_name: str = "visreg") -> logging.Logger:
    """Attach a rich handler to the ``visreg`` logger and return it.

    ``verbose`` shows per-hook debug lines. Calling again only updates the
    level, so a runner can switch verbosity between suites.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=verbose)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        # root handlers from the host runner would print every line twice
        logger.propagate = False
    return logger
