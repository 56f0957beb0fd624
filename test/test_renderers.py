#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from c8vm.errors import RendererError
from c8vm.renderers.r_pygame import DEFAULT_PALETTE, parse_palette


class TestPalette(unittest.TestCase):
    def test_palette_default(self):
        self.assertEqual(list(DEFAULT_PALETTE), parse_palette(None))

    def test_palette_partial(self):
        self.assertEqual([0x000000, DEFAULT_PALETTE[1]], parse_palette("000000"))

    def test_palette_full(self):
        self.assertEqual([0x102030, 0xA0B0C0], parse_palette("102030,a0b0c0"))

    def test_palette_too_many(self):
        self.assertRaises(RendererError, parse_palette, "000000,ffffff,808080")

    def test_palette_wrong_length(self):
        self.assertRaises(RendererError, parse_palette, "fff,000000")

    def test_palette_not_hex(self):
        self.assertRaises(RendererError, parse_palette, "zzzzzz,ffffff")
