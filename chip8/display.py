"""Display buffer and the geometry used to present it.

The buffer is a 32x64 numpy array of 0/1 cells indexed ``[row, col]``.
Only two instructions touch it: 00E0 clears it and DXYN XORs a sprite
into it. The host reads it back as a list of filled rectangles.
"""

from collections import namedtuple

import numpy as np

from .config import DISPLAY_HEIGHT, DISPLAY_MARGIN, DISPLAY_WIDTH, SPRITE_WIDTH

Color = namedtuple("Color", "r g b")
Rect = namedtuple("Rect", "x y w h")

BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


class DisplayBuffer:

    def __init__(self, width=DISPLAY_WIDTH, height=DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)

    def clear(self):
        self.pixels.fill(0)

    def draw_sprite(self, col_start, row_start, rows):
        """XOR sprite ``rows`` (one byte per row, MSB leftmost) into the buffer.

        The origin wraps onto the screen, the sprite itself does not: rows
        past the bottom edge are dropped and so are columns past the right
        edge. Returns True if any lit pixel was switched off.
        """
        col_start %= self.width
        row_start %= self.height
        collision = False

        for offset, sprite_row in enumerate(rows):
            row = row_start + offset
            if row >= self.height:
                break
            for bit in range(SPRITE_WIDTH):
                col = col_start + bit
                if col >= self.width:
                    break
                # Check if the `bit`th pixel from the left is set
                if sprite_row & (0x80 >> bit):
                    if self.pixels[row, col]:
                        collision = True
                    self.pixels[row, col] ^= 1
        return collision

    def lit(self):
        """(row, col) of every lit pixel."""
        return [(int(row), int(col)) for row, col in np.argwhere(self.pixels)]

    def rects(self, surface_width, surface_height, margin=DISPLAY_MARGIN):
        """One filled rectangle per lit pixel, scaled to the surface.

        Rows are shortened by ``margin`` pixels to keep the last line
        from being clipped.
        """
        x_scale = surface_width // self.width
        y_scale = max(surface_height // self.height - margin, 1)
        return [Rect(col * x_scale, row * y_scale, x_scale, y_scale)
                for row, col in self.lit()]

    def copy(self):
        return self.pixels.copy()

    def __eq__(self, other):
        if isinstance(other, DisplayBuffer):
            return np.array_equal(self.pixels, other.pixels)
        return NotImplemented

    __hash__ = None

    def __str__(self):
        return "\n".join("".join("#" if cell else "." for cell in row)
                         for row in self.pixels)
