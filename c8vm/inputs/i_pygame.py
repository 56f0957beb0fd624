#!/usr/bin/env python3

"""
PyGame Input Plugin

Reads key events from the PyGame window and feeds them to the shared key state
in the null plugin.  Key-down events mark a hex key as held for the skip
instructions.  Key-up events release it, and only a release satisfies the
wait-for-key instruction, so a held key is not reported until it is let go.

Events are drained once per process_messages() call, which the run loop makes
at 60Hz.  Closing the window or releasing ESC asks the run loop to return.  The
Renderer owns the display, so it is left to that plugin to shut PyGame down.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        super().__init__(keymap, renderer)

        self.key_actions = {
            pygame.KEYDOWN: self.press_key,
            pygame.KEYUP:   self.release_key
        }

    def process_messages(self):
        # Drain the whole queue, even if a quit has already been seen
        quit_requested = False

        for event in pygame.event.get():
            if self._is_quit(event):
                quit_requested = True
                continue

            key_action = self.key_actions.get(event.type)
            hex_key = self.keymap_dict.get(event.key) if key_action else None

            if hex_key is not None:
                key_action(hex_key)

        return quit_requested

    @staticmethod
    def _is_quit(event):
        return event.type == pygame.QUIT or (event.type == pygame.KEYUP and event.key == pygame.K_ESCAPE)
