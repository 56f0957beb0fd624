#!/usr/bin/env python3

"""
Instruction Decoder

Splits a raw 16-bit opcode into its operand fields.  Every field sits in the
same position in every instruction, so decoding is pure bit extraction and is
defined for all 65536 values, whether or not they are valid instructions.

    op_class = first nibble (instruction family)
    x / y    = second / third nibble (register numbers)
    n        = fourth nibble
    nn       = low byte
    nnn      = low 12 bits (address)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple

Instruction = namedtuple("Instruction", ["opcode", "op_class", "x", "y", "n", "nn", "nnn"])


def decode(opcode):
    return Instruction(
        opcode=opcode,
        op_class=(opcode & 0xF000) >> 12,
        x=(opcode & 0xF00) >> 8,
        y=(opcode & 0xF0) >> 4,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & 0xFFF
    )
