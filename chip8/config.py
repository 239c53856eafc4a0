# CHIP-8 machine configuration.
# Memory - 4096 bytes holding the font table and the loaded ROM.
# Display - 64x32 pixels, each either on or off (0 || 1).
# Everything here is fixed for the lifetime of an emulator; there are no
# config files or environment variables.

MEMORY_SIZE = 4096
PROGRAM_START = 0x200   # original interpreters kept the first program byte here
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF     # VF doubles as carry / borrow / collision flag
KEY_COUNT = 16

# Font table lives at 0x050, like early interpreters
FONT_ADDRESS = 0x050
FONT_HEIGHT = 5

# set fonts (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes

# ---- Display ----
DISPLAY_WIDTH, DISPLAY_HEIGHT = 64, 32
SPRITE_WIDTH = 8
DISPLAY_MARGIN = 3      # shaved off each row so the bottom line isn't clipped
SCALE = 20
WINDOW_WIDTH, WINDOW_HEIGHT = DISPLAY_WIDTH * SCALE, DISPLAY_HEIGHT * SCALE

# ---- Clock ----
# at most one instruction per millisecond, roughly the speed the games were written for
MILLISECONDS_PER_CYCLE = 1

# ---- Sound ----
BEEP_FREQUENCY = 440
BEEP_DURATION = 0.2
BEEP_SAMPLE_RATE = 44100

# Compatibility switches. The defaults keep the reference behaviour:
#   shifting - 8XY6/8XYE also put the shifted-out bit in VF
#   key_wait - FX0A waits on "key0" only, or on "any" key
DEFAULT_QUIRKS = {
    'shifting': False,
    'key_wait': 'key0',
}
