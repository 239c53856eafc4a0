"""Exceptions raised by the CHIP-8 interpreter."""


class Chip8Error(Exception):
    """Base class for every interpreter error."""


class LoadError(Chip8Error):
    """The program image could not be opened or read."""

    def __init__(self, path, reason=None):
        self.path = path
        self.reason = reason
        message = "Cannot load ROM %s" % path
        if reason:
            message += ": %s" % reason
        super().__init__(message)


class StackUnderflow(Chip8Error):
    """00EE executed with an empty call stack."""

    def __init__(self, pc):
        self.pc = pc
        super().__init__("Stack underflow on 00EE at 0x%03X" % pc)


class UnknownInstruction(Chip8Error):
    """Instruction has no defined behaviour. Reported, never fatal."""

    def __init__(self, instruction, pc):
        self.instruction = instruction
        self.pc = pc
        super().__init__("Unknown opcode: %04X at 0x%03X" % (instruction, pc))


class MemoryAccessError(Chip8Error):
    """Read or write outside the 4096 byte arena."""

    def __init__(self, address, write=False):
        self.address = address
        self.write = write
        kind = "write to" if write else "read from"
        super().__init__("Memory %s out of bounds: 0x%04X" % (kind, address))
