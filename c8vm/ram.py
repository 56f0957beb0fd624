#!/usr/bin/env python3

"""
RAM Emulator

A fixed block of bytes supporting single and block reads and writes.  Every
access is checked against the top of memory.  Nothing is masked or wrapped, so
a program addressing beyond the end gets an OutOfBounds fault rather than a
quietly corrupted byte somewhere else.

Block operations check the whole range before touching anything, meaning a
failed access leaves memory exactly as it was.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .errors import OutOfBounds


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_range(location, size)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)
        self.check_range(location, block_size)
        self.mem[location:location + block_size] = block

    def check_overflow(self, location):
        if location < 0 or location > self.mem_top:
            raise OutOfBounds(location)

    def check_range(self, location, size):
        # Check both ends so that a partially valid block is rejected as a whole.  Empty blocks touch nothing.
        if size > 0:
            self.check_overflow(location)
            self.check_overflow(location + size - 1)

    def zero_block(self, offset, size):
        self.check_range(offset, size)
        self.mem[offset:offset + size] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)
