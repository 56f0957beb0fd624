#!/usr/bin/env python3

"""
Framebuffer Emulator

Programs for this system cannot write directly into video RAM.  Instead,
sprites are XORed onto a 64x32 monochrome grid, and any pixel switched off by
the XOR is reported as a collision.

The grid is stored as a flat, row-major block of bytes, so pixel (x, y) lives
at offset y * width + x.  Off pixels are 0x00 and on pixels are 0xFF.  The
display never sees this memory directly: it receives an immutable copy from
snapshot() after each sprite is drawn, so nothing the renderer does can leak
back into the machine.

Pixels falling beyond the right or bottom edges are clipped unless wrapping is
allowed, in which case they reappear on the opposite edge.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT, PIXEL_OFF, PIXEL_ON
from .ram import RAM


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT, allow_wrapping=False):
        self.allow_wrapping = allow_wrapping
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)

    def clear(self):
        self.vram.clear()

    def xor_pixel(self, x, y):
        # Returns None if the pixel was clipped, otherwise whether a lit pixel was switched off

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ PIXEL_ON)

        return pixel != PIXEL_OFF

    def is_set(self, x, y):
        return self.vram.read(y * self.vid_width + x) != PIXEL_OFF

    def snapshot(self):
        return bytes(self.vram.mem)

    def count_lit(self):
        return self.vid_size - self.vram.mem.tobytes().count(PIXEL_OFF)

    def get_vid_size(self):
        return self.vid_width, self.vid_height
