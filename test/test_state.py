#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from c8vm.state import State


class TestState(unittest.TestCase):
    def setUp(self):
        self.state = State()

    def test_state_init(self):
        state = self.state
        self.assertEqual(4096, state.ram.mem_size)
        self.assertEqual(bytes(4096), state.ram.mem.tobytes())
        self.assertEqual(bytes(16), state.v.tobytes())
        self.assertEqual(0x200, state.pc)
        self.assertEqual(0, state.i)
        self.assertEqual(0, state.dt)
        self.assertEqual(0, state.st)
        self.assertEqual(0, state.stack.sp)
        self.assertEqual(16, state.stack.size)
        self.assertEqual((64, 32), state.framebuffer.get_vid_size())
        self.assertFalse(state.framebuffer.allow_wrapping)

    def test_state_wrapping(self):
        self.assertTrue(State(allow_wrapping=True).framebuffer.allow_wrapping)

    def test_state_reset(self):
        state = self.state
        state.ram.write(0x300, 0x12)
        state.stack.push(0x204)
        state.framebuffer.xor_pixel(1, 1)
        state.v[0xF] = 1
        state.i = 0x123
        state.pc = 0x456
        state.dt = 3
        state.st = 4
        state.reset()
        self.assertEqual(bytes(4096), state.ram.mem.tobytes())
        self.assertEqual(0, state.stack.sp)
        self.assertEqual(0, state.framebuffer.count_lit())
        self.assertEqual(0, state.vf)
        self.assertEqual(0, state.i)
        self.assertEqual(0x200, state.pc)
        self.assertEqual(0, state.dt)
        self.assertEqual(0, state.st)
