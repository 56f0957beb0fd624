#!/usr/bin/env python3

"""
Curses Renderer Plugin

Draws the screen in a standard Linux-style TTY Terminal, the Windows Command
Prompt, or PowerShell.  Each lit pixel is an inverted space, stretched
horizontally by the scale factor so the screen keeps roughly the right aspect.

Only pixels that changed since the previous snapshot are redrawn.  The top row
of the pad is used for the title.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
from .r_null import Renderer as RendererBase
from ..constants import PIXEL_OFF


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        self.pixel_char = " " * scale
        self.pad = None
        self.last_pixels = None
        self.last_screen_height = -1
        self.last_screen_width = -1
        self.screen = curses.initscr()
        curses.curs_set(0)
        curses.noecho()
        curses.cbreak()

        super().__init__(scale)

    def set_resolution(self, width, height):
        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.
        self.pad = curses.newpad(height + 2, width * self.scale + 1)
        self.last_pixels = None
        super().set_resolution(width, height)

    def render(self, pixels):
        last_pixels = self.last_pixels
        width = self.width

        for location, pixel in enumerate(pixels):
            if last_pixels is None or last_pixels[location] != pixel:
                y, x = divmod(location, width)
                attr = curses.A_NORMAL if pixel == PIXEL_OFF else curses.A_REVERSE
                self.pad.addstr(y + 1, x * self.scale, self.pixel_char, attr)

        self.last_pixels = pixels
        super().render(pixels)

    def refresh_display(self):
        screen_height, screen_width = self.screen.getmaxyx()

        if screen_height == self.last_screen_height and screen_width == self.last_screen_width:
            # Fast delta update
            if self.refresh_needed:
                self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
        else:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width

        super().refresh_display()

    def set_title(self, title):
        if self.pad:
            padded_width = self.width * self.scale

            if padded_width > len(title):
                self.pad.addstr(0, 0, title + " " * (padded_width - len(title)), curses.A_REVERSE)
                self.refresh_needed = True

        super().set_title(title)

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        try:
            curses.curs_set(1)
        except curses.error:
            pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
