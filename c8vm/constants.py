#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "C8VM"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_START  # 3584 bytes
SYSFONT_LOC = 0x50
SYSFONT_GLYPH_SIZE = 5

# Call stack depth
STACK_SIZE = 16

# Pixel buffer
VID_WIDTH = 64
VID_HEIGHT = 32
PIXEL_OFF = 0x00
PIXEL_ON = 0xFF

# Timing
DEFAULT_CLOCK_SPEED = 700  # Instructions per second
TIMER_FREQ = 60.0          # 60Hz delay/sound timer countdown
DISPLAY_FREQ = 60.0        # 60Hz host display refresh

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Optional deviations from baseline instruction semantics.  All are disabled unless requested.
QUIRKS = ["screen_wrap", "jump", "index_overflow"]

# Built-in 4x5 hexadecimal glyphs, 0 to F
SYSTEM_FONT = bytes((
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
))
