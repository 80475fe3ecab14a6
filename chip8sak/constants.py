# Constants for chip8sak
#

import os
from dataclasses import dataclass
from pathlib import Path


# Version information.  Update BUILD_VERSION with every significant bugfix;
# update MINOR_VERSION with every feature addition
MAJOR_VERSION = 0
MINOR_VERSION = 1
BUILD_VERSION = 0

CHIP8SAK_VERSION = f"{MAJOR_VERSION}.{MINOR_VERSION}.{BUILD_VERSION}"
CHIP8SAK_RELEASE = f"{MAJOR_VERSION}.{MINOR_VERSION}"

# Memory layout
MEMORY_SIZE = 4096       # $000-$FFF
PROGRAM_START = 0x200    # programs are loaded (and start executing) here
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START
FONT_START = 0x050       # font glyphs occupy $050-$09F
FONT_GLYPH_SIZE = 5

NUMBER_OF_REGISTERS = 16
STACK_SIZE = 16
NUMBER_OF_KEYS = 16

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

# Hexadecimal digit glyphs 0 through F, 4 pixels wide (high nibble) and 5 rows tall
FONT_DATA = [
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
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
]

# The COSMAC VIP hex keypad, laid onto the left side of a QWERTY keyboard:
#
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <=   q w e r
#   7 8 9 E        a s d f
#   A 0 B F        z x c v
KEYPAD_LAYOUT = {
    '1': 0x1, '2': 0x2, '3': 0x3, '4': 0xC,
    'q': 0x4, 'w': 0x5, 'e': 0x6, 'r': 0xD,
    'a': 0x7, 's': 0x8, 'd': 0x9, 'f': 0xE,
    'z': 0xA, 'x': 0x0, 'c': 0xB, 'v': 0xF,
}

# Defaults for the run-time options
DEFAULT_FPS = 60
DEFAULT_IPF = 10
DEFAULT_SCALE = 10
DEFAULT_FOREGROUND = 0xFFFFFFFF  # RGBA8888
DEFAULT_BACKGROUND = 0x00000000
DEFAULT_PITCH = 440              # buzzer frequency in Hz
MIN_PITCH = 20
MAX_PITCH = 10000


@dataclass(frozen=True)
class Quirks:
    vf_reset: bool = False          # OR/AND/XOR clear VF afterwards
    memory_increment: bool = False  # FX55/FX65 leave I one past the last byte touched
    wrap: bool = False              # sprites wrap around the display edges instead of clipping
    shift: bool = False             # 8XY6/8XYE shift VX in place instead of VX = VY shifted
    jump: bool = False              # BNNN jumps to NNN + VX (X = high nibble) instead of NNN + V0
    display_wait: bool = False      # at most one sprite draw per frame

    @property
    def names(self):
        return [name for name in QUIRK_NAMES if getattr(self, name)]


QUIRK_NAMES = ('vf_reset', 'memory_increment', 'wrap', 'shift', 'jump', 'display_wait')

DEFAULT_QUIRKS = 'MODERN'

QUIRKS = {
    # The original RCA COSMAC VIP interpreter
    'COSMAC-VIP': Quirks(vf_reset=True,
                         memory_increment=True,
                         wrap=False,
                         shift=False,
                         jump=False,
                         display_wait=True),
    # What most interpreters written since the 1990s do
    'MODERN': Quirks(),
}


def project_to_absolute_path(file_path):
    """Returns project root folder"""
    return os.path.normpath(os.path.join(Path(__file__).parent.parent.absolute(), file_path))
