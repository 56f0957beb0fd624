#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

If a fault occurs, all of the above will be reported, with the addition of the
stack pointer and stack contents.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        state = cpu.state
        debug_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"
        ).format(
            *[state.v[reg_num] for reg_num in range(15, -1, -1)] +
            [state.i, state.dt, state.st, cpu.debug_pc, cpu.opcode, instruction]
        )

        if verbose:
            stack_items = state.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            debug_str += "\nSP: {} Stack:{}".format(state.stack.sp, stack_str or " (Empty)")

        return debug_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.debug(cpu, instruction))
