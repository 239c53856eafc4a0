"""Logging helpers.

``log`` is the per-instruction trace: cheap to call and silent unless
tracing has been switched on (F1 in the window, or ``set_logging``).
Everything else goes through ordinary ``logging.getLogger(__name__)``
loggers under the ``chip8`` namespace.
"""

import logging
import sys

logger = logging.getLogger("chip8.trace")

#make it true if you want the logs
logsOn = False

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def log(*args):
    if logsOn:
        logger.debug(" ".join(str(a) for a in args))


def set_logging(enabled):
    global logsOn
    logsOn = bool(enabled)
    if logsOn:
        logger.setLevel(logging.DEBUG)
    return logsOn


def toggle_logging():
    return set_logging(not logsOn)


def configure(level=logging.INFO, stream=sys.stderr):
    """Set up root logging for the command line entry point."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=stream)
