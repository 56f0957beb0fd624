#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from unittest import mock
from c8vm import boot, main, select_plugins
from c8vm.constants import MAX_ROM_SIZE, PROGRAM_START, QUIRKS, SYSTEM_FONT
from c8vm.errors import RendererError, RomTooLarge, StartupError
from c8vm.hostio import Loader
from c8vm.inputs.i_null import Inputs
from c8vm.renderers.r_null import Renderer
from c8vm.state import State


class TrackingRenderer(Renderer):
    shutdowns = 0

    def shutdown(self):
        TrackingRenderer.shutdowns += 1
        super().shutdown()


class BadPaletteRenderer(Renderer):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        raise RendererError("Invalid palette colour defined.")


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)

    def _write_rom(self, data):
        filename = os.path.join(self.tmp_dir.name, "test.ch8")

        with open(filename, "wb") as f:
            f.write(data)

        return filename

    def _args(self, filename):
        args = {"filename": filename, "renderer": "null", "clock_speed": 0, "scale": None, "keymap": None,
                "pygame_palette": None, "seed": 1, "debug": False}

        for quirk in QUIRKS:
            args["{}_quirks".format(quirk)] = 0

        return args

    def test_main_boot(self):
        state = State()
        rom = bytes([0xA5]) + bytes(MAX_ROM_SIZE - 1)
        boot(state, Loader(), self._write_rom(rom))
        self.assertEqual(0xA5, state.ram.read(0x200))
        self.assertEqual(SYSTEM_FONT, state.ram.read_block(0x50, 80).tobytes())

    def test_main_boot_rom_too_large(self):
        state = State()
        self.assertRaises(RomTooLarge, boot, state, Loader(), self._write_rom(bytes(MAX_ROM_SIZE + 1)))
        # Nothing, not even the font, should have been written
        self.assertEqual(bytes(4096), state.ram.mem.tobytes())

    def test_main_select_null_plugins(self):
        self.assertEqual((Renderer, Inputs), select_plugins("null"))

    def test_main_fault_exit_status(self):
        # Draw the font glyph for 'F', then hit an unsupported opcode
        rom = bytes((0x60, 0x0F, 0xF0, 0x29, 0xD1, 0x15, 0x00, 0x00))

        with self.assertLogs("c8vm", level="ERROR") as logs:
            self.assertEqual(1, main(self._args(self._write_rom(rom))))

        self.assertIn("Opcode 0x0000 at address 0x206", "\n".join(logs.output))

    def test_main_missing_rom(self):
        with self.assertLogs("c8vm", level="ERROR"):
            self.assertEqual(1, main(self._args(os.path.join(self.tmp_dir.name, "missing.ch8"))))

    def test_main_boot_resets_state(self):
        state = State()
        state.ram.write(0xE00, 0x77)
        state.stack.push(0x300)
        state.framebuffer.xor_pixel(5, 5)
        state.v[0x3] = 0x99
        state.i = 0x123
        state.pc = 0x456
        state.dt = 10
        boot(state, Loader(), self._write_rom(bytes((0x12, 0x00))))
        self.assertEqual(0, state.ram.read(0xE00))
        self.assertEqual(0, state.stack.sp)
        self.assertEqual(0, state.framebuffer.count_lit())
        self.assertEqual(bytes(16), state.v.tobytes())
        self.assertEqual(0, state.i)
        self.assertEqual(PROGRAM_START, state.pc)
        self.assertEqual(0, state.dt)
        self.assertEqual(0x12, state.ram.read(PROGRAM_START))

    def test_main_failed_boot_keeps_state(self):
        state = State()
        state.v[0x3] = 0x99
        state.pc = 0x456
        self.assertRaises(RomTooLarge, boot, state, Loader(), self._write_rom(bytes(MAX_ROM_SIZE + 1)))
        self.assertEqual(0x99, state.v[0x3])
        self.assertEqual(0x456, state.pc)

    def test_main_bad_keymap(self):
        args = self._args(self._write_rom(bytes((0x12, 0x00))))
        args["keymap"] = "1,2,3"
        TrackingRenderer.shutdowns = 0

        with mock.patch("c8vm.select_plugins", return_value=(TrackingRenderer, Inputs)):
            with self.assertLogs("c8vm", level="ERROR") as logs:
                self.assertEqual(1, main(args))

        self.assertIn("16 required", "\n".join(logs.output))
        self.assertEqual(1, TrackingRenderer.shutdowns)

    def test_main_bad_palette(self):
        args = self._args(self._write_rom(bytes((0x12, 0x00))))
        args["pygame_palette"] = "zzzzzz,ffffff"

        with mock.patch("c8vm.select_plugins", return_value=(BadPaletteRenderer, Inputs)):
            with self.assertLogs("c8vm", level="ERROR") as logs:
                self.assertEqual(1, main(args))

        self.assertIn("Invalid palette colour", "\n".join(logs.output))

    def test_main_missing_plugin(self):
        args = self._args(self._write_rom(bytes((0x12, 0x00))))
        missing = StartupError("PyGame does not appear to be installed.")

        with mock.patch("c8vm.select_plugins", side_effect=missing):
            with self.assertLogs("c8vm", level="ERROR") as logs:
                self.assertEqual(1, main(args))

        self.assertIn("PyGame does not appear", "\n".join(logs.output))
