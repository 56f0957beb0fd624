#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from hashlib import sha256
from c8vm.constants import MAX_ROM_SIZE
from c8vm.errors import LoaderError, RomTooLarge
from c8vm.hostio import Loader


class TestLoader(unittest.TestCase):
    def setUp(self):
        self.loader = Loader()
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)

    def _write_rom(self, size):
        filename = os.path.join(self.tmp_dir.name, "rom_{}.ch8".format(size))

        with open(filename, "wb") as f:
            f.write(bytes(n & 0xFF for n in range(size)))

        return filename

    def test_loader_system_font(self):
        font = self.loader.load_system_font()
        self.assertEqual(80, len(font))
        self.assertEqual(b"\xF0\x90\x90\x90\xF0", font[:5])  # Glyph 0
        self.assertEqual(b"\xF0\x80\xF0\x80\x80", font[75:])  # Glyph F

    def test_loader_load_largest_rom(self):
        filename = self._write_rom(MAX_ROM_SIZE)
        data = self.loader.load_binary(filename)
        self.assertEqual(3584, len(data))
        self.assertEqual(
            sha256(bytes(n & 0xFF for n in range(3584))).hexdigest(),
            sha256(data).hexdigest()
        )

    def test_loader_rom_too_large(self):
        filename = self._write_rom(MAX_ROM_SIZE + 1)

        with self.assertRaises(RomTooLarge) as ctx:
            self.loader.load_binary(filename)

        self.assertEqual(3585, ctx.exception.size)
        self.assertEqual(3584, ctx.exception.limit)
        self.assertIsInstance(ctx.exception, LoaderError)

    def test_loader_load_file_missing(self):
        self.assertRaises(FileNotFoundError, self.loader.load_binary, "NoFile.ch8")
