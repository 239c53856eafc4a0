"""Machine state for one CHIP-8 emulator.

Everything the instructions touch lives on a single ``Chip8State``:
memory, the V registers, I, the program counter, the call stack, the
delay timer and the display buffer. Each emulator owns its own
instance, so several machines can live in the same process.
"""

from .config import (
    FLAG_REGISTER,
    FONT_ADDRESS,
    FONTSET,
    MEMORY_SIZE,
    PROGRAM_START,
    REGISTER_COUNT,
)
from .display import DisplayBuffer
from .errors import MemoryAccessError


class Chip8State:

    def __init__(self):
        self.reset()

    def reset(self):
        """Zero everything, reload the font table and point PC at 0x200."""
        self.memory = bytearray(MEMORY_SIZE)    # max 4096 bytes
        self.V = [0] * REGISTER_COUNT           # 16 general-purpose registers
        self.I = 0                              # index register (memory pointer)
        self.pc = PROGRAM_START
        self.stack = []                         # return addresses for 2NNN / 00EE
        self.delay_timer = 0
        self.display = DisplayBuffer()

        # Load fontset into memory
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = bytes(FONTSET)

    # ---- Flag register ----
    @property
    def VF(self):
        return self.V[FLAG_REGISTER]

    @VF.setter
    def VF(self, value):
        self.V[FLAG_REGISTER] = value & 0xFF

    # ---- Memory access ----
    def read(self, address):
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)
        return self.memory[address]

    def write(self, address, value):
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address, write=True)
        self.memory[address] = value & 0xFF

    def _check_range(self, address, length, write=False):
        if length and (address < 0 or address + length > MEMORY_SIZE):
            bad = address if not 0 <= address < MEMORY_SIZE else MEMORY_SIZE
            raise MemoryAccessError(bad, write=write)

    def read_block(self, address, length):
        self._check_range(address, length)
        return self.memory[address:address + length]

    def write_block(self, address, data):
        self._check_range(address, len(data), write=True)
        self.memory[address:address + len(data)] = bytes(data)

    def fetch(self):
        """Two bytes at PC, big-endian."""
        return (self.read(self.pc) << 8) | self.read(self.pc + 1)

    def __str__(self):
        regs = " ".join("V%X=%02X" % (i, v) for i, v in enumerate(self.V))
        return "PC=%03X I=%03X DT=%d SP=%d %s" % (
            self.pc, self.I, self.delay_timer, len(self.stack), regs)
