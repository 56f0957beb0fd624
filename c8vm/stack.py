#!/usr/bin/env python3

"""
Stack Emulator

The call stack only ever holds return addresses, and nothing can address it
directly, so it lives outside RAM as a bounded list.  The stack pointer is the
number of addresses held, so an empty stack has SP = 0 and a full one has
SP equal to the stack size.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .errors import StackOverflow, StackUnderflow


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    @property
    def sp(self):
        return len(self.items)

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackOverflow("Stack overflow ({} levels)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflow("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For debugging
        return self.items
