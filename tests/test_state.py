"""Tests for the machine state and the ROM loader."""

import io

import pytest

from chip8.config import FONT_ADDRESS, FONTSET, MEMORY_SIZE, PROGRAM_START
from chip8.errors import LoadError, MemoryAccessError
from chip8.loader import load_bytes, load_rom, load_stream
from chip8.state import Chip8State


class TestInitialState:
    """A fresh machine."""

    def test_registers_zeroed(self):
        s = Chip8State()
        assert s.V == [0] * 16
        assert s.I == 0
        assert s.delay_timer == 0
        assert s.stack == []

    def test_pc_starts_at_program(self):
        assert Chip8State().pc == 0x200

    def test_font_table_loaded(self):
        s = Chip8State()
        assert len(s.memory) == MEMORY_SIZE
        assert list(s.memory[0x050:0x0A0]) == FONTSET
        assert not any(s.memory[:FONT_ADDRESS])
        assert not any(s.memory[0x0A0:])

    def test_display_blank(self):
        assert Chip8State().display.lit() == []

    def test_reset(self):
        s = Chip8State()
        s.V[3] = 9
        s.pc = 0x300
        s.stack.append(0x202)
        s.memory[0x300] = 1
        s.reset()
        assert s.V[3] == 0
        assert s.pc == PROGRAM_START
        assert s.stack == []
        assert s.memory[0x300] == 0

    def test_instances_are_independent(self):
        a, b = Chip8State(), Chip8State()
        a.V[0] = 1
        a.memory[0x200] = 0xFF
        assert b.V[0] == 0
        assert b.memory[0x200] == 0


class TestMemoryAccess:
    """Reads and writes stay inside the arena."""

    def test_write_masks_to_byte(self):
        s = Chip8State()
        s.write(0x300, 0x1FF)
        assert s.read(0x300) == 0xFF

    def test_read_out_of_bounds(self):
        with pytest.raises(MemoryAccessError):
            Chip8State().read(MEMORY_SIZE)

    def test_write_out_of_bounds(self):
        with pytest.raises(MemoryAccessError) as exc:
            Chip8State().write(MEMORY_SIZE + 5, 1)
        assert exc.value.write is True

    def test_block_past_end(self):
        s = Chip8State()
        with pytest.raises(MemoryAccessError) as exc:
            s.write_block(MEMORY_SIZE - 2, [1, 2, 3])
        assert exc.value.address == MEMORY_SIZE
        # nothing partially written
        assert s.memory[MEMORY_SIZE - 2] == 0

    def test_block_at_end_fits(self):
        s = Chip8State()
        s.write_block(MEMORY_SIZE - 3, [1, 2, 3])
        assert list(s.read_block(MEMORY_SIZE - 3, 3)) == [1, 2, 3]

    def test_fetch_big_endian(self):
        s = Chip8State()
        s.memory[0x200:0x202] = b"\x12\x34"
        assert s.fetch() == 0x1234

    def test_fetch_past_end(self):
        s = Chip8State()
        s.pc = MEMORY_SIZE - 1
        with pytest.raises(MemoryAccessError):
            s.fetch()


class TestLoader:
    """ROM images land at 0x200."""

    def test_load_bytes(self):
        s = Chip8State()
        assert load_bytes(s, b"\x60\x05\x70\x03") == 4
        assert list(s.memory[0x200:0x204]) == [0x60, 0x05, 0x70, 0x03]
        assert s.memory[0x204] == 0

    def test_load_stream(self):
        s = Chip8State()
        load_stream(s, io.BytesIO(b"\xA2\x50"))
        assert s.fetch() == 0xA250

    def test_oversized_rom_truncated(self):
        s = Chip8State()
        room = MEMORY_SIZE - PROGRAM_START
        loaded = load_bytes(s, b"\xAB" * (room + 100))
        assert loaded == room
        assert s.memory[MEMORY_SIZE - 1] == 0xAB
        assert list(s.memory[FONT_ADDRESS:FONT_ADDRESS + 80]) == FONTSET

    def test_load_rom_file(self, tmp_path):
        rom = tmp_path / "test.ch8"
        rom.write_bytes(b"\x00\xE0")
        s = Chip8State()
        assert load_rom(s, str(rom)) == 2
        assert s.fetch() == 0x00E0

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError) as exc:
            load_rom(Chip8State(), str(tmp_path / "nope.ch8"))
        assert "nope.ch8" in str(exc.value)
