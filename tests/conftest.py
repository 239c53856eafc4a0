"""Shared fakes standing in for the pyglet host."""

import random

import pytest

from chip8.config import PROGRAM_START
from chip8.cpu import Chip8
from chip8.loader import load_bytes


class FakeScreen:
    def __init__(self, width=640, height=320):
        self.width = width
        self.height = height
        self.calls = []
        self.rects = []

    def clear(self, color):
        self.calls.append(("clear", color))

    def draw_filled_rects(self, rects, color):
        self.calls.append(("draw", color))
        self.rects = list(rects)

    def present(self):
        self.calls.append(("present",))


class FakeKeypad:
    def __init__(self, pressed=(), polls=None):
        self.pressed = set(pressed)
        self.polls = polls   # None = run forever

    def is_pressed(self, code):
        return code in self.pressed

    def poll_events(self):
        if self.polls is None:
            return True
        if self.polls <= 0:
            return False
        self.polls -= 1
        return True


class FakeBuzzer:
    def __init__(self):
        self.beeps = 0

    def beep(self):
        self.beeps += 1


class FakeClock:
    """Permits a tick on every ``every``th call."""

    def __init__(self, every=1):
        self.every = every
        self.calls = 0

    def tick(self):
        self.calls += 1
        return self.calls % self.every == 0


@pytest.fixture
def screen():
    return FakeScreen()


@pytest.fixture
def keypad():
    return FakeKeypad()


@pytest.fixture
def buzzer():
    return FakeBuzzer()


@pytest.fixture
def cpu(screen, keypad, buzzer):
    return Chip8(screen=screen, keypad=keypad, buzzer=buzzer, rng=random.Random(1234))


def program(cpu, *words):
    """Load 16-bit instruction words at 0x200."""
    data = bytearray()
    for w in words:
        data += bytes([(w >> 8) & 0xFF, w & 0xFF])
    load_bytes(cpu.state, data)
    cpu.state.pc = PROGRAM_START
    return cpu


@pytest.fixture
def load():
    return program
