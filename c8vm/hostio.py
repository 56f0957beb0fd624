#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries and the base system font for later writing into
RAM.  ROMs are size-checked here, before anything is written into the
machine, so a rejected ROM never leaves memory half-populated.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from os import path
from .constants import MAX_ROM_SIZE, SYSTEM_FONT
from .errors import RomTooLarge

logger = logging.getLogger(__name__)


class Loader:
    def __init__(self, max_size=MAX_ROM_SIZE):
        self.max_size = max_size

    def load_binary(self, filename):
        rom_size = path.getsize(filename)  # Raises FileNotFoundError for missing ROMs

        if rom_size > self.max_size:
            raise RomTooLarge(rom_size, self.max_size)

        with open(filename, "rb") as f:
            data = f.read()

        logger.info("ROM loaded successfully, size: %d bytes", len(data))
        return data

    def load_system_font(self):
        return SYSTEM_FONT
