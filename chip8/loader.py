"""Read a ROM image into memory at 0x200."""

import logging

from .config import MEMORY_SIZE, PROGRAM_START
from .errors import LoadError
from .logs import log

logger = logging.getLogger(__name__)


def load_bytes(state, data):
    """Copy ``data`` into memory starting at 0x200.

    Anything that doesn't fit in the 4096 byte arena is dropped.
    Returns the number of bytes actually loaded.
    """
    room = MEMORY_SIZE - PROGRAM_START
    if len(data) > room:
        logger.warning("ROM is %d bytes, only the first %d fit in memory",
                       len(data), room)
        data = data[:room]
    state.memory[PROGRAM_START:PROGRAM_START + len(data)] = bytes(data)
    return len(data)


def load_stream(state, stream):
    """Like ``load_bytes`` but reads from a binary file object."""
    return load_bytes(state, stream.read(MEMORY_SIZE - PROGRAM_START + 1))


def load_rom(state, path):
    log("Loading ROM:", path)
    try:
        with open(path, "rb") as f:
            loaded = load_stream(state, f)
    except OSError as e:
        raise LoadError(path, e.strerror or str(e)) from e
    logger.info("Loaded %s: %d bytes", path, loaded)
    return loaded
