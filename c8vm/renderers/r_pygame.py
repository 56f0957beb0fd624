#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the pixel buffer onto an SDL window surface via PyGame.  Each snapshot
is translated into an RGB buffer the size of the emulated screen, which is then
stretched (using 'Nearest Neighbour' translation) to fit the window.  This
means we don't have to draw the same pixel multiple times.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import Renderer as RendererBase
from ..constants import APP_NAME, PIXEL_ON
from ..errors import RendererError

DEFAULT_PALETTE = (0x222222, 0xDDDDDD)  # Off, on


def parse_palette(pygame_palette):
    colour_map = list(DEFAULT_PALETTE)

    if pygame_palette is None:
        return colour_map

    pygame_palette_split = pygame_palette.split(",")

    if len(pygame_palette_split) > len(colour_map):
        raise RendererError("Too many palette colours defined.")

    for pygame_colour_num, pygame_colour in enumerate(pygame_palette_split):
        if len(pygame_colour) != 6:
            raise RendererError("Palette colours must all be 6 hex digits long.")

        try:
            colour_map[pygame_colour_num] = int(pygame_colour, 16)
        except ValueError:
            raise RendererError("Invalid palette colour defined.") from None

    return colour_map


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 512  # Default window width if not supplied, or set to default

        off_colour, on_colour = parse_palette(pygame_palette)

        # One translation table per channel, mapping a pixel byte straight to its channel value
        self.channel_tables = []

        for shift in 16, 8, 0:
            table = bytearray(256)
            table[:] = bytes([(off_colour >> shift) & 0xFF]) * 256
            table[PIXEL_ON] = (on_colour >> shift) & 0xFF
            self.channel_tables.append(bytes(table))

        pygame.display.init()
        self.set_title(APP_NAME)
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)
        self.rgb_buffer = None

        super().__init__(scale)

    def set_resolution(self, width, height):
        self.rgb_buffer = bytearray(width * height * 3)  # 24-bit
        super().set_resolution(width, height)

    def render(self, pixels):
        # Update RGB buffer in-place, one channel at a time
        for channel, table in enumerate(self.channel_tables):
            self.rgb_buffer[channel::3] = pixels.translate(table)

        super().render(pixels)

    def refresh_display(self):
        if self.refresh_needed:
            # Blit the bytearray straight to the surface, which is much faster than per-pixel PyGame calls
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

        super().refresh_display()

    def set_title(self, title):
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
