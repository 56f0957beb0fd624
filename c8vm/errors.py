#!/usr/bin/env python3

"""
VM Exceptions

Every fault raised by the interpreter or its host plugins derives from VMError,
so the driver can decide in one place whether to halt.  Faults carry the values
needed to report them (opcode, address, sizes) as attributes.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class VMError(Exception):
    pass


class LoaderError(VMError):
    pass


class RomTooLarge(LoaderError):
    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__("ROM is {} bytes, which exceeds the {} byte limit".format(size, limit))


class RAMError(VMError):
    pass


class OutOfBounds(RAMError):
    def __init__(self, location):
        self.location = location
        super().__init__("Memory access at 0x{:04x} is out of bounds".format(location))


class StackError(VMError):
    pass


class StackOverflow(StackError):
    pass


class StackUnderflow(StackError):
    pass


class CPUError(VMError):
    pass


class UnsupportedOpcode(CPUError):
    def __init__(self, opcode, pc):
        self.opcode = opcode
        self.pc = pc
        super().__init__("Opcode 0x{:04x} at address 0x{:03x} is not supported".format(opcode, pc))


class InputsError(VMError):
    pass


class RendererError(VMError):
    pass


class StartupError(VMError):
    pass
