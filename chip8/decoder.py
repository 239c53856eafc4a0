"""Split a 16-bit CHIP-8 instruction into its fields.

Instructions come in a handful of shapes:
  - 0xTXYN
  - 0xTXNN
  - 0xTNNN
where T is the type of instruction, X and Y are register indices and
N[NN] are constants. ``decode`` pulls all of them out at once; which
ones matter is up to the handler for that opcode class.
"""

from collections import namedtuple

Instruction = namedtuple(
    "Instruction", "raw opcode_class reg1 reg2 imm8 imm12 subop")


def opcode_class(word):
    return (word & 0xF000) >> 12


def register1(word):
    return (word & 0x0F00) >> 8


def register2(word):
    return (word & 0x00F0) >> 4


def constant8(word):
    return word & 0x00FF


def constant12(word):
    return word & 0x0FFF


def nibble(word):
    return word & 0x000F


def decode(word):
    word &= 0xFFFF
    return Instruction(
        raw=word,
        opcode_class=opcode_class(word),
        reg1=register1(word),
        reg2=register2(word),
        imm8=constant8(word),
        imm12=constant12(word),
        subop=nibble(word),
    )


def decode_bytes(high, low):
    return decode((high << 8) | low)
