# pyglet host for the interpreter.
# Output - the display buffer drawn as filled rectangles, plus a beep on FX18.
# Input - key states polled per cycle through a KeyStateHandler.
# The window doubles as the screen and the keypad the engine talks to;
# the main loop pumps pyglet events by hand so the clock decides when
# an instruction runs.

import functools
import logging
import sys

import pyglet

# no hidden startup window; the emulator window is the only GL context
pyglet.options["shadow_window"] = False

from pyglet.media import synthesis
from pyglet.window import key

from . import logs
from .logs import log
from .clock import ClockRegulator
from .config import (
    BEEP_DURATION,
    BEEP_FREQUENCY,
    BEEP_SAMPLE_RATE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .cpu import Chip8
from .errors import Chip8Error
from .loader import load_rom
from .state import Chip8State

logger = logging.getLogger(__name__)

# Key mapping - physical key for each CHIP-8 key code 0x0..0xF
KEY_MAPPING = [
    key._1, key._2, key._3, key._4,
    key.Q, key.W, key.E, key.R,
    key.A, key.S, key.D, key.F,
    key.Z, key.X, key.C, key.V,
]


@functools.lru_cache(maxsize=None)
def pixel_image(width, height, color):
    """One solid image per pixel size and colour, blitted for every lit cell."""
    return pyglet.image.SolidColorImagePattern(
        (color.r, color.g, color.b, 255)).create_image(width, height)


class CycleCounter:
    """Scheduled once a second; traces how many instructions ran since the last call."""

    def __init__(self, cpu):
        self.cpu = cpu
        self.last_count = cpu.cycle_count
        self.cycles_per_second = 0

    def __call__(self, dt):
        self.cycles_per_second = self.cpu.cycle_count - self.last_count
        self.last_count = self.cpu.cycle_count
        log("Cycles/s:", self.cycles_per_second)


class Buzzer:
    """Plays one short sine tone per ``beep()``."""

    def __init__(self, frequency=BEEP_FREQUENCY, duration=BEEP_DURATION,
                 sample_rate=BEEP_SAMPLE_RATE):
        self.frequency = frequency
        self.duration = duration
        self.sample_rate = sample_rate
        self.sound_playing = False

    def beep(self):
        if self.sound_playing:
            return
        wave = synthesis.Sine(duration=self.duration, frequency=self.frequency,
                              sample_rate=self.sample_rate)
        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        # Ensure the sound stops after the requested duration
        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos


class Chip8Window(pyglet.window.Window):

    def __init__(self, width=WINDOW_WIDTH, height=WINDOW_HEIGHT, caption="CHIP-8 Emulator"):
        super().__init__(width, height, caption=caption, resizable=False, vsync=False)
        self.keys = key.KeyStateHandler()
        self.push_handlers(self.keys)
        self.key_down_handlers = {}

        self.on_key_down(key.ESCAPE, self._request_close)
        self.on_key_down(key.F1, self._toggle_logs)

    # ---- Input ----
    def on_key_down(self, symbol, handler):
        """Run ``handler`` whenever ``symbol`` goes down."""
        self.key_down_handlers.setdefault(symbol, []).append(handler)

    def on_key_press(self, symbol, modifiers):
        #@Override
        for handler in self.key_down_handlers.get(symbol, ()):
            handler()

    def is_pressed(self, code):
        return bool(self.keys[KEY_MAPPING[code & 0xF]])

    def poll_events(self):
        """Pump pending window events; False once the window has been closed."""
        if self.has_exit:
            return False
        pyglet.clock.tick()
        self.dispatch_events()
        return not self.has_exit

    def _request_close(self):
        # on_close sets has_exit and closes the window
        self.dispatch_event("on_close")

    def _toggle_logs(self):
        logger.info("logsOn: %s", logs.toggle_logging())

    # ---- Drawing ----
    def clear(self, color=None):
        if color is not None:
            pyglet.gl.glClearColor(color.r / 255, color.g / 255, color.b / 255, 1.0)
        super().clear()

    def draw_filled_rects(self, rects, color):
        # pyglet's origin is bottom-left, the display's is top-left
        for r in rects:
            pixel_image(r.w, r.h, color).blit(r.x, self.height - r.y - r.h)

    def present(self):
        self.flip()


def run(rom):
    state = Chip8State()
    load_rom(state, rom)

    window = Chip8Window()
    cpu = Chip8(screen=window, keypad=window, buzzer=Buzzer(),
                clock=ClockRegulator(), state=state)

    # ---- Performance Counters ----
    cps = CycleCounter(cpu)
    pyglet.clock.schedule_interval(cps, 1.0)

    try:
        cpu.run()
    finally:
        pyglet.clock.unschedule(cps)
        if not window.has_exit:
            window.close()
    return cpu


# ---- Entry point ----
def main(argv=None):
    argv = sys.argv if argv is None else argv
    if len(argv) < 2:
        print("Usage: python -m chip8 <rom-file>", file=sys.stderr)
        return 1
    logs.configure()
    try:
        run(argv[1])
    except Chip8Error as e:
        logger.error("Emulation error: %s", e)
        return 1
    return 0
