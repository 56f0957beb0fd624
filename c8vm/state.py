#!/usr/bin/env python3

"""
Machine State

Everything the interpreter mutates lives here: RAM, the V registers, the index
register, the program counter, the call stack, both timers and the pixel
buffer.  There is no instruction behaviour in this module.  A single State is
owned by the CPU, and nothing else keeps a reference to the parts of it that
change.

VF is simply register 0xF.  There is no separate flag field.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE, PROGRAM_START, STACK_SIZE, VID_WIDTH, VID_HEIGHT
from .framebuffer import Framebuffer
from .ram import RAM
from .stack import Stack


class State:
    def __init__(self, allow_wrapping=False):
        self.ram = RAM(MEM_SIZE)
        self.stack = Stack(STACK_SIZE)
        self.framebuffer = Framebuffer(VID_WIDTH, VID_HEIGHT, allow_wrapping=allow_wrapping)
        self.v = memoryview(bytearray(16))  # Bytearrays are mutable, so this should be fast when a register is updated
        self.i = 0
        self.pc = PROGRAM_START
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

    def reset(self):
        self.ram.clear()
        self.stack.clear()
        self.framebuffer.clear()
        self.v[:] = bytes(16)
        self.i = 0
        self.pc = PROGRAM_START
        self.dt = 0
        self.st = 0

    @property
    def vf(self):
        return self.v[0xF]
