#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required, or driven directly through press_key() and
release_key() by anything else that produces key events.

A key only counts as 'pressed' for the wait-for-key instruction once it has
been released again, which is how the COSMAC VIP interpreter behaved.  The last
such key is stored until setup_keypress() resets it.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..errors import InputsError


def parse_keymap(keymap, force_lowercase=False):
    # Returns a dictionary of host key code -> hex key (0-F)
    keymap_dict = {}
    keymap_split = keymap.split(",")

    if len(keymap_split) != 0x10:
        raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

    for key_num, key_defined in enumerate(keymap_split):
        try:
            key_defined_ord = int(key_defined)
        except ValueError:
            raise InputsError("Defined keys are not all integer values") from None

        if force_lowercase:
            # If we are working with characters rather than keyscan codes, we should convert to lowercase
            key_defined_ord = ord(chr(key_defined_ord).lower())

        if key_defined_ord in keymap_dict:
            raise InputsError("Duplicate keys defined")

        keymap_dict[key_defined_ord] = key_num

    return keymap_dict


class Inputs:
    def __init__(self, keymap, renderer, force_lowercase=False):
        self.keymap_dict = parse_keymap(keymap, force_lowercase)
        self.renderer = renderer
        self.key_down = [False] * 0x10
        self.last_keypress = None

    def process_messages(self):
        return False  # Don't exit the program

    def press_key(self, hex_key):
        self.key_down[hex_key] = True

    def release_key(self, hex_key):
        if self.key_down[hex_key]:
            self.key_down[hex_key] = False
            self.last_keypress = hex_key

    def is_key_down(self, key):
        return self.key_down[key]

    def setup_keypress(self):
        self.last_keypress = None

    def get_keypress(self):
        return self.last_keypress

    def shutdown(self):
        pass
