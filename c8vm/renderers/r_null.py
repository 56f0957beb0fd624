#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins, and defines the
display contract.  After every sprite draw, render() is handed an immutable
snapshot of the pixel buffer: width * height bytes, row-major, 0x00 for off and
0xFF for on.  Renderers are free to defer drawing it until refresh_display() is
next called, as long as the most recent snapshot is eventually shown.

This module can be used on its own as a Renderer plugin if you only want to see
debug output, or run headless.  The last frame received is kept for inspection.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import VID_WIDTH, VID_HEIGHT


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.pixels = None
        self.frames_rendered = 0
        self.refresh_needed = False
        self.set_resolution(VID_WIDTH, VID_HEIGHT)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def render(self, pixels):
        self.pixels = pixels
        self.frames_rendered += 1
        self.refresh_needed = True

    def refresh_display(self):
        self.refresh_needed = False

    def set_title(self, title):
        pass

    def shutdown(self):
        pass
