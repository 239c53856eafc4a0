"""The CHIP-8 fetch / decode / execute engine.

One call to ``step`` runs exactly one instruction: the delay timer ticks
down, two bytes are fetched at PC, PC moves past them, and the handler
for the instruction's opcode class runs. Skips therefore add another 2
to PC, jumps overwrite it, and FX0A rewinds it by 2 so the same
instruction runs again on the next permitted cycle.

Collaborators are plain objects handed in by the host:

  screen  - ``width``, ``height``, ``clear(color)``,
            ``draw_filled_rects(rects, color)``, ``present()``
  keypad  - ``is_pressed(key)`` for logical keys 0x0-0xF and
            ``poll_events()`` returning False once the host wants to stop
  buzzer  - ``beep()``
  clock   - ``tick()`` returning True when a cycle may run

Any of them may be None when the engine is driven directly, e.g. in
tests; a missing keypad reads as "nothing pressed".
"""

import logging
import random

from .config import DEFAULT_QUIRKS, FLAG_REGISTER, FONT_ADDRESS, FONT_HEIGHT
from .decoder import decode
from .display import BLACK, WHITE
from .errors import StackUnderflow, UnknownInstruction
from .logs import log
from .state import Chip8State

logger = logging.getLogger(__name__)


class Chip8:

    def __init__(self, screen=None, keypad=None, buzzer=None, clock=None,
                 quirks=None, rng=None, state=None):
        self.state = state if state is not None else Chip8State()
        self.screen = screen
        self.keypad = keypad
        self.buzzer = buzzer
        self.clock = clock
        self.quirks = dict(DEFAULT_QUIRKS, **(quirks or {}))
        self.rng = rng or random.Random()

        self.cycle_count = 0
        self.unknown_instructions = 0

        # Prepare opcode function map
        self.setup_funcmap()

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            0x0: self._0xxx,  # 00E0 / 00EE - clear screen / return from subroutine
            0x1: self._1nnn,  # 1nnn - Jump to a specific memory address
            0x2: self._2nnn,  # 2nnn - Call a function (subroutine) at a memory address
            0x3: self._3xkk,  # 3xkk - Skip next instruction if a register equals a specific number
            0x4: self._4xkk,  # 4xkk - Skip next instruction if a register does NOT equal a number
            0x5: self._5xy0,  # 5xy0 - Skip next instruction if two registers are equal
            0x6: self._6xkk,  # 6xkk - Set a register to a specific number
            0x7: self._7xkk,  # 7xkk - Add a number to a register
            0x8: self._8xxx,  # 8xy0..8xyE - Math and logic operations between two registers
            0x9: self._9xy0,  # 9xy0 - Skip next instruction if two registers are NOT equal
            0xA: self._Annn,  # Annn - Set a special memory pointer (I) to a specific address
            0xB: self._Bnnn,  # Bnnn - Jump to an address plus the value of register V0
            0xC: self._Cxkk,  # Cxkk - Set a register to a random number ANDed with a value
            0xD: self._Dxyn,  # Dxyn - Draw a small image (sprite) on the screen at X,Y coordinates
            0xE: self._Exxx,  # Ex9E / ExA1 - Skip next instruction if a key is pressed or not pressed
            0xF: self._Fxxx,  # Fx07..Fx65 - timers, memory storage, and waiting for keys
        }
        self.system_ops = {
            0x0: self._00E0,
            0xE: self._00EE,
        }
        self.alu_ops = {
            0x0: self._8xy0,
            0x1: self._8xy1,
            0x2: self._8xy2,
            0x3: self._8xy3,
            0x4: self._8xy4,
            0x5: self._8xy5,
            0x6: self._8xy6,
            0x7: self._8xy7,
            0xE: self._8xyE,
        }
        self.misc_ops = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65,
        }

    # ---- Flag arithmetic ----
    # Every instruction that reports carry / borrow in VF goes through these two.
    def add(self, a, b):
        total = a + b
        self.state.V[FLAG_REGISTER] = 1 if total > 0xFF else 0
        return total & 0xFF

    def subtract(self, a, b):
        # VF = 1 means NO borrow happened
        self.state.V[FLAG_REGISTER] = 1 if a >= b else 0
        return (a - b) & 0xFF

    # ---- Cycle ----
    def step(self):
        """Run one instruction and return it decoded."""
        s = self.state
        self.cycle_count += 1

        if s.delay_timer > 0:
            s.delay_timer -= 1

        pc = s.pc
        ins = decode(s.fetch())
        log("Instruction 0x%04X at 0x%03X" % (ins.raw, pc))
        s.pc = (pc + 2) & 0xFFFF

        try:
            self.funcmap[ins.opcode_class](ins)
        except UnknownInstruction as e:
            self.unknown_instructions += 1
            logger.warning("%s", e)
        return ins

    def run(self, max_cycles=None):
        """Drive the machine until the keypad reports the host is closing.

        Each pass pumps host events first; an instruction only runs when
        the clock permits it. ``max_cycles`` stops the loop early.
        """
        if self.keypad is None:
            raise RuntimeError("run() needs a keypad to poll host events")

        start = self.cycle_count
        while self.keypad.poll_events():
            if self.clock is not None and not self.clock.tick():
                continue
            self.step()
            if max_cycles is not None and self.cycle_count - start >= max_cycles:
                break
        return self.cycle_count - start

    def _skip(self):
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _unknown(self, ins):
        raise UnknownInstruction(ins.raw, (self.state.pc - 2) & 0xFFFF)

    def _key_pressed(self, key):
        if self.keypad is None:
            return False
        return bool(self.keypad.is_pressed(key & 0xF))

    # ---- Opcode Handlers ----

    # 00E0 / 00EE / 0nnn - Clear Screen / Return from subroutine / SYS call
    def _0xxx(self, ins):
        handler = self.system_ops.get(ins.subop)
        if handler:
            handler(ins)
        else:
            # 0nnn is ignored on modern interpreters
            log("SYS call ignored (0nnn)")

    def _00E0(self, ins):
        self.state.display.clear()
        log("Clear the display (all pixels turned off)")

    def _00EE(self, ins):
        s = self.state
        if not s.stack:
            raise StackUnderflow((s.pc - 2) & 0xFFFF)
        s.pc = s.stack.pop()
        log("Return to", hex(s.pc))

    # 1nnn - Jump to address NNN
    def _1nnn(self, ins):
        self.state.pc = ins.imm12
        log("Jump to address", hex(ins.imm12))

    # 2nnn - Call subroutine at NNN
    def _2nnn(self, ins):
        self.state.stack.append(self.state.pc)
        self.state.pc = ins.imm12
        log("Call subroutine at", hex(ins.imm12))

    # 3xkk - Skip next instruction if Vx == kk
    def _3xkk(self, ins):
        if self.state.V[ins.reg1] == ins.imm8:
            self._skip()
            log(f"Skip next instruction: V{ins.reg1:X} == {ins.imm8}")

    # 4xkk - Skip next instruction if Vx != kk
    def _4xkk(self, ins):
        if self.state.V[ins.reg1] != ins.imm8:
            self._skip()
            log(f"Skip next instruction: V{ins.reg1:X} != {ins.imm8}")

    # 5xy0 - Skip next instruction if Vx == Vy
    def _5xy0(self, ins):
        if self.state.V[ins.reg1] == self.state.V[ins.reg2]:
            self._skip()
            log(f"Skip next instruction: V{ins.reg1:X} == V{ins.reg2:X}")

    # 6xkk - Set Vx = kk
    def _6xkk(self, ins):
        self.state.V[ins.reg1] = ins.imm8
        log(f"Set V{ins.reg1:X} = {ins.imm8}")

    # 7xkk - Add immediate, no carry flag
    def _7xkk(self, ins):
        V = self.state.V
        V[ins.reg1] = (V[ins.reg1] + ins.imm8) & 0xFF
        log(f"Add {ins.imm8} to V{ins.reg1:X}: {V[ins.reg1]}")

    # 8xy0..8xyE
    def _8xxx(self, ins):
        handler = self.alu_ops.get(ins.subop)
        if handler:
            handler(ins.reg1, ins.reg2)
        else:
            log(f"Unused ALU op 8xy{ins.subop:X} ignored")

    def _8xy0(self, x, y):
        V = self.state.V
        V[x] = V[y]
        log(f"Copy V{y:X} ({V[y]}) into V{x:X}")

    def _8xy1(self, x, y):
        V = self.state.V
        V[x] |= V[y]
        log(f"V{x:X} = V{x:X} OR V{y:X} -> {V[x]}")

    def _8xy2(self, x, y):
        V = self.state.V
        V[x] &= V[y]
        log(f"V{x:X} = V{x:X} AND V{y:X} -> {V[x]}")

    def _8xy3(self, x, y):
        V = self.state.V
        V[x] ^= V[y]
        log(f"V{x:X} = V{x:X} XOR V{y:X} -> {V[x]}")

    def _8xy4(self, x, y):
        V = self.state.V
        V[x] = self.add(V[x], V[y])
        log(f"Add V{y:X} to V{x:X}: result {V[x]}, carry={V[FLAG_REGISTER]}")

    def _8xy5(self, x, y):
        V = self.state.V
        V[x] = self.subtract(V[x], V[y])
        log(f"Subtract V{y:X} from V{x:X}: result {V[x]}, NOT borrow={V[FLAG_REGISTER]}")

    def _8xy6(self, x, y):
        V = self.state.V
        shifted_out = V[x] & 1
        V[x] >>= 1
        if self.quirks['shifting']:
            V[FLAG_REGISTER] = shifted_out
        log(f"Shift V{x:X} right by 1: {V[x]}")

    def _8xy7(self, x, y):
        V = self.state.V
        V[x] = self.subtract(V[y], V[x])
        log(f"Set V{x:X} = V{y:X} - V{x:X}: result {V[x]}, NOT borrow={V[FLAG_REGISTER]}")

    def _8xyE(self, x, y):
        V = self.state.V
        shifted_out = (V[x] >> 7) & 1
        V[x] = (V[x] << 1) & 0xFF
        if self.quirks['shifting']:
            V[FLAG_REGISTER] = shifted_out
        log(f"Shift V{x:X} left by 1: {V[x]}")

    # 9xy0 - Skip next instruction if Vx != Vy
    def _9xy0(self, ins):
        if self.state.V[ins.reg1] != self.state.V[ins.reg2]:
            self._skip()
            log(f"Skip next instruction: V{ins.reg1:X} != V{ins.reg2:X}")

    # Annn - Set I = NNN
    def _Annn(self, ins):
        self.state.I = ins.imm12
        log(f"Set I = {ins.imm12:03X}")

    # Bnnn - Jump to address NNN + V0
    def _Bnnn(self, ins):
        self.state.pc = ins.imm12 + self.state.V[0]
        log(f"Jump to address V0 + {ins.imm12:03X} = {self.state.pc:03X}")

    # Cxkk - RND Vx, byte
    def _Cxkk(self, ins):
        self.state.V[ins.reg1] = self.rng.getrandbits(8) & ins.imm8
        log(f"Set V{ins.reg1:X} = random_byte & {ins.imm8} -> {self.state.V[ins.reg1]}")

    # Dxyn - DRW Vx, Vy, nibble
    def _Dxyn(self, ins):
        s = self.state
        display = s.display
        col = s.V[ins.reg1] % display.width
        row = s.V[ins.reg2] % display.height
        # rows that would land below the screen are never read
        height = min(ins.subop, display.height - row)
        sprite = s.read_block(s.I, height)

        s.V[FLAG_REGISTER] = 0
        if display.draw_sprite(col, row, sprite):
            s.V[FLAG_REGISTER] = 1
        log(f"Drew sprite, collision={s.V[FLAG_REGISTER]}")
        self.present()

    def present(self):
        """Hand the display buffer to the screen: clear, fill lit cells, show."""
        if self.screen is None:
            return
        rects = self.state.display.rects(self.screen.width, self.screen.height)
        self.screen.clear(BLACK)
        self.screen.draw_filled_rects(rects, WHITE)
        self.screen.present()

    # Ex9E / ExA1 - SKP / SKNP
    def _Exxx(self, ins):
        # anything other than 9E behaves as A1
        skip_when_pressed = ins.imm8 == 0x9E
        if self._key_pressed(self.state.V[ins.reg1]) == skip_when_pressed:
            self._skip()

    # Fx07..Fx65 - timers, memory, I, and key input
    def _Fxxx(self, ins):
        handler = self.misc_ops.get(ins.imm8)
        if handler is None:
            self._unknown(ins)
        handler(ins.reg1)

    def _Fx07(self, x):
        self.state.V[x] = self.state.delay_timer

    def _Fx0A(self, x):
        # LD Vx, K: stall by rewinding PC until the key shows up
        s = self.state
        if self.quirks['key_wait'] == 'any':
            for key in range(16):
                if self._key_pressed(key):
                    s.V[x] = key
                    return
        elif self._key_pressed(0):
            s.V[x] = 0
            return
        s.pc = (s.pc - 2) & 0xFFFF

    def _Fx15(self, x):
        self.state.delay_timer = self.state.V[x]

    def _Fx18(self, x):
        if self.buzzer is not None:
            self.buzzer.beep()
        log("Sound plays!")

    def _Fx1E(self, x):
        s = self.state
        s.I = (s.I + s.V[x]) & 0xFFFF

    def _Fx29(self, x):
        self.state.I = FONT_ADDRESS + (self.state.V[x] & 0xF) * FONT_HEIGHT

    def _Fx33(self, x):
        val = self.state.V[x]
        self.state.write_block(self.state.I, [val // 100, (val // 10) % 10, val % 10])

    def _Fx55(self, x):
        s = self.state
        s.write_block(s.I, s.V[:x + 1])

    def _Fx65(self, x):
        s = self.state
        s.V[:x + 1] = list(s.read_block(s.I, x + 1))
