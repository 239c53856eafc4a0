"""CHIP-8 interpreter.

Loads a ROM at 0x200 and runs the original 35 CHIP-8 instructions
against a 4K memory arena, sixteen V registers and a 64x32 display.
The pyglet window in ``chip8.window`` is only imported on demand so the
core can be driven headless.
"""

__version__ = "0.1.0"

from .clock import ClockRegulator
from .cpu import Chip8
from .decoder import Instruction, decode
from .display import DisplayBuffer
from .errors import (
    Chip8Error,
    LoadError,
    MemoryAccessError,
    StackUnderflow,
    UnknownInstruction,
)
from .loader import load_bytes, load_rom
from .state import Chip8State

__all__ = [
    "Chip8", "Chip8State", "ClockRegulator", "DisplayBuffer", "Instruction",
    "decode", "load_bytes", "load_rom",
    "Chip8Error", "LoadError", "MemoryAccessError", "StackUnderflow",
    "UnknownInstruction",
]
