# Monochrome display buffer
#
# Pixels live in a (height, width) numpy bool array, indexed [y, x].  Sprites are 8 pixels
# wide, one byte per row, most significant bit leftmost, and are XORed onto the buffer.

import numpy as np

from chip8sak import constants


class DisplayBuffer:
    def __init__(self, width=constants.DISPLAY_WIDTH, height=constants.DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=bool)
        self.updated = False  # set on any change; Scheduler.run() clears it after presenting

    def clear(self):
        """
        Unset all pixels
        """
        self.pixels[:, :] = False
        self.updated = True

    def draw(self, x, y, sprite_bytes, wrap=False):
        """
        XOR a sprite onto the display

        The start coordinate is always taken modulo the display size.  Parts of the
        sprite that run off the right or bottom edge are either wrapped around to the
        other side (wrap=True) or dropped (wrap=False).

        :param x: column of the sprite's left edge
        :type x: int
        :param y: row of the sprite's top edge
        :type y: int
        :param sprite_bytes: one byte per sprite row
        :type sprite_bytes: bytes
        :param wrap: wrap instead of clip at the display edges
        :type wrap: bool
        :return: True if any set pixel was cleared (a collision)
        :rtype: bool
        """
        x %= self.width
        y %= self.height
        sprite = np.unpackbits(np.array(list(sprite_bytes), dtype=np.uint8)).reshape(-1, 8).astype(bool)

        rows = y + np.arange(sprite.shape[0])
        cols = x + np.arange(8)
        if wrap:
            rows %= self.height
            cols %= self.width
        else:
            sprite = sprite[rows < self.height][:, cols < self.width]
            rows = rows[rows < self.height]
            cols = cols[cols < self.width]

        area = np.ix_(rows, cols)
        current = self.pixels[area]
        collision = bool(np.any(current & sprite))
        self.pixels[area] = current ^ sprite
        if sprite.any():
            self.updated = True
        return collision

    def snapshot(self):
        """
        Read-only copy of the pixel grid, indexed [y, x]

        :rtype: numpy.ndarray
        """
        snap = self.pixels.copy()
        snap.flags.writeable = False
        return snap

    def to_color_model(self, fg=constants.DEFAULT_FOREGROUND, bg=constants.DEFAULT_BACKGROUND):
        return pixels_to_rgba(self.pixels, fg, bg)

    def to_text(self, on='#', off='.'):
        return pixels_to_text(self.pixels, on, off)


def pixels_to_rgba(pixels, fg=constants.DEFAULT_FOREGROUND, bg=constants.DEFAULT_BACKGROUND):
    """
    Convert a pixel grid to RGBA8888, a set pixel becoming fg and an unset pixel bg

    :param pixels: (height, width) bool array
    :type pixels: numpy.ndarray
    :param fg: foreground color, 0xRRGGBBAA
    :type fg: int
    :param bg: background color, 0xRRGGBBAA
    :type bg: int
    :return: (height, width, 4) array of RGBA bytes
    :rtype: numpy.ndarray
    """
    fg_rgba = np.frombuffer(fg.to_bytes(4, 'big'), dtype=np.uint8)
    bg_rgba = np.frombuffer(bg.to_bytes(4, 'big'), dtype=np.uint8)
    return np.where(pixels[:, :, np.newaxis], fg_rgba, bg_rgba).astype(np.uint8)


def pixels_to_text(pixels, on='#', off='.'):
    return '\n'.join(''.join(on if p else off for p in row) for row in pixels)
