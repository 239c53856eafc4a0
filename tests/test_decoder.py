"""Tests for instruction field extraction."""

import random

from chip8.decoder import Instruction, decode, decode_bytes


class TestDecodeFields:
    """Each field comes from the right bits."""

    def test_txyn(self):
        ins = decode(0xD125)
        assert ins.opcode_class == 0xD
        assert ins.reg1 == 0x1
        assert ins.reg2 == 0x2
        assert ins.subop == 0x5

    def test_txnn(self):
        ins = decode(0x6A7F)
        assert ins.opcode_class == 0x6
        assert ins.reg1 == 0xA
        assert ins.imm8 == 0x7F

    def test_tnnn(self):
        ins = decode(0x2ABC)
        assert ins.opcode_class == 0x2
        assert ins.imm12 == 0xABC

    def test_raw_is_kept(self):
        assert decode(0x00EE).raw == 0x00EE

    def test_returns_instruction_tuple(self):
        assert isinstance(decode(0x1234), Instruction)

    def test_extremes(self):
        assert decode(0x0000) == Instruction(0, 0, 0, 0, 0, 0, 0)
        assert decode(0xFFFF) == Instruction(0xFFFF, 0xF, 0xF, 0xF, 0xFF, 0xFFF, 0xF)


class TestDecodeBytes:
    """Decoding two bytes agrees with direct masking."""

    def test_matches_masks(self):
        rng = random.Random(8)
        for _ in range(500):
            b1, b2 = rng.randrange(256), rng.randrange(256)
            word = (b1 << 8) | b2
            ins = decode_bytes(b1, b2)
            assert ins.opcode_class == b1 >> 4
            assert ins.reg1 == b1 & 0xF
            assert ins.reg2 == b2 >> 4
            assert ins.imm8 == b2
            assert ins.imm12 == word & 0xFFF
            assert ins.subop == b2 & 0xF
