#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each
cycle fetches a big-endian opcode at the program counter, advances the counter,
decodes the opcode and dispatches it through a lookup table.  The table is
keyed on the first nibble, and the families which share a first nibble are
looked up a second time on the masked opcode.

The CPU owns the machine State and mutates nothing else, except for handing a
copy of the pixel buffer to the renderer after a sprite is drawn.

Any fault (unsupported opcode, stack misuse, out-of-range memory access) is
raised as a VMError subclass and stops the instruction stream.  Deciding
whether to halt or carry on is left to whoever called run() or step().
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from math import ceil
from random import Random
from time import perf_counter
from .constants import APP_NAME, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, SYSFONT_GLYPH_SIZE, SYSFONT_LOC, TIMER_FREQ
from .decoder import decode
from .errors import UnsupportedOpcode

logger = logging.getLogger(__name__)

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
I_BITMASK = 0xFFFF  # Index register is 16 bits wide
PC_BITMASK = 0xFFF  # Program counter only ever addresses 4K


class CPU:
    def __init__(self, state, renderer, inputs, debugger, clock_speed=None, jump_quirks=False,
                 index_overflow_quirks=False, rng=None):

        self.state = state
        self.renderer = renderer
        self.inputs = inputs
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.rng = Random() if rng is None else rng

        # User can specify 0 for uncapped
        auto_clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.core_interval = None if auto_clock_speed <= 0 else 1.0 / auto_clock_speed

        """
        Quirks
        ------

        - Jump quirks           : Bnnn jumps relative to Vx (high nibble of nnn) instead of V0.
        - Index overflow quirks : Fx1E sets Vf when I passes the 4K boundary (Amiga interpreter behaviour).
        """

        self.jump_quirks = jump_quirks
        self.index_overflow_quirks = index_overflow_quirks

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x9: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            0xF: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
            0x5000: self._5xy0,
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            0x9000: self._9xy0,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

        # Timer switch-off time targets
        self.dt_target = 0
        self.st_target = 0

        # Current opcode, address it was fetched from, and realtime clock monitor
        self.opcode = 0
        self.debug_pc = state.pc
        self.this_time = 0

        # Input-related vars
        self.awaiting_keypress = False

        # Performance-related vars
        self.next_display_update_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0
        self.report_perf()

    def run(self, stop_event=None):
        # Runs until the inputs request a quit or the stop event is set.  Faults propagate to the caller.
        logger.debug("CPU starting at 0x%03x", self.state.pc)

        while stop_event is None or not stop_event.is_set():
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display refreshes in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    logger.debug("Quit requested by inputs")
                    return
                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_display()
                self.perf_counter_fps += 1

            self.tick(this_time)
            self.step()

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1

        logger.debug("CPU stopped at 0x%03x", self.state.pc)

    def step(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.state.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute
        self.decode_exec()

    def tick(self, this_time):
        # Decrement timers against wall-clock targets, so they count down at 60Hz however fast the CPU runs.  If the
        # CPU gets lagged, the timers will jump.
        self.this_time = this_time
        state = self.state

        if state.dt > 0:
            state.dt = max(0, ceil((self.dt_target - this_time) * TIMER_FREQ))

        if state.st > 0:
            state.st = max(0, ceil((self.st_target - this_time) * TIMER_FREQ))

    def fetch(self):
        return int.from_bytes(self.state.ram.read_block(self.state.pc, 2), CPU_ENDIAN, signed=False)

    def _call_masked_instruction(self, masked_opcode, ins):
        instruction = self.instructions.get(masked_opcode)

        if instruction is None:
            self._opcode_unsupported()

        instruction(ins)

    def decode_exec(self):
        ins = decode(self.opcode)
        self._call_masked_instruction(ins.op_class, ins)

    def refresh_display(self):
        self.renderer.refresh_display()

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

    def inc_pc(self):
        self.state.pc = (self.state.pc + 2) & PC_BITMASK

    def dec_pc(self):
        # Only used to re-run instructions (e.g. keypress wait).
        self.state.pc = (self.state.pc - 2) & PC_BITMASK

    def _opcode_unsupported(self):
        raise UnsupportedOpcode(self.opcode, self.debug_pc) from None

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _0nnn(self, ins):
        if ins.opcode < 0x10:
            # Opcodes 0x0 - 0xF are used internally for indexing, so they must not be looked up again
            self._opcode_unsupported()

        self._call_masked_instruction(ins.opcode, ins)

    def _5nnn_8nnn_9nnn(self, ins):
        self._call_masked_instruction(ins.opcode & 0xF00F, ins)

    def _Ennn_Fnnn(self, ins):
        self._call_masked_instruction(ins.opcode & 0xF0FF, ins)

    def _00E0(self, ins):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.state.framebuffer.clear()

    def _00EE(self, ins):  # RET
        if self.live_debug:
            self.debug("RET")

        self.state.pc = self.state.stack.pop()

    def _1nnn(self, ins):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(ins.nnn))

        self.state.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(ins.nnn))

        self.state.stack.push(self.state.pc)
        self.state.pc = ins.nnn

    def _post_skip(self):
        self.inc_pc()

    def _3xkk(self, ins):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(ins.x, ins.nn))

        if self.state.v[ins.x] == ins.nn:
            self._post_skip()

    def _4xkk(self, ins):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(ins.x, ins.nn))

        if self.state.v[ins.x] != ins.nn:
            self._post_skip()

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(ins.x, ins.y))

        if self.state.v[ins.x] == self.state.v[ins.y]:
            self._post_skip()

    def _6xkk(self, ins):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(ins.x, ins.nn))

        self.state.v[ins.x] = ins.nn

    def _7xkk(self, ins):  # ADD Vx, byte
        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(ins.x, ins.nn))

        v = self.state.v
        v[ins.x] = (v[ins.x] + ins.nn) & 0xFF  # No carry flag

    def _8xy0(self, ins):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.state.v[ins.x] = self.state.v[ins.y]

    def _8xy1(self, ins):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.state.v[ins.x] |= self.state.v[ins.y]

    def _8xy2(self, ins):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.state.v[ins.x] &= self.state.v[ins.y]

    def _8xy3(self, ins):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.state.v[ins.x] ^= self.state.v[ins.y]

    def _8xy4(self, ins):  # ADD Vx, Vy
        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(ins.x, ins.y))

        v = self.state.v
        val = v[ins.x] + v[ins.y]
        v[ins.x] = val & 0xFF
        v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, x, val):  # Post-SUB/SUBN
        v = self.state.v
        v[x] = val & 0xFF
        # Vf is set when NOT borrowing, and this must happen AFTER Vx is set, as Vf may be one of the operands
        v[0xF] = int(val >= 0)

    def _8xy5(self, ins):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(ins.x, ins.y))

        self._post_8xy5_8xy7(ins.x, self.state.v[ins.x] - self.state.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx, Vy
        if self.live_debug:
            self.debug("SHR V{:01x}, V{:01x}".format(ins.x, ins.y))

        v = self.state.v
        val = v[ins.y]
        v[ins.x] = val >> 1
        v[0xF] = val & 1  # The whole byte gets set just for the flag

    def _8xy7(self, ins):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(ins.x, ins.y))

        self._post_8xy5_8xy7(ins.x, self.state.v[ins.y] - self.state.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx, Vy
        if self.live_debug:
            self.debug("SHL V{:01x}, V{:01x}".format(ins.x, ins.y))

        v = self.state.v
        val = v[ins.y]
        v[ins.x] = (val << 1) & 0xFF
        v[0xF] = val >> 7

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(ins.x, ins.y))

        if self.state.v[ins.x] != self.state.v[ins.y]:
            self._post_skip()

    def _Annn(self, ins):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(ins.nnn))

        self.state.i = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        # With jump quirks, the high nibble of the address doubles as the offset register
        vr = ins.x if self.jump_quirks else 0

        if self.live_debug:
            self.debug("JP V{:01x}, 0x{:03x}".format(vr, ins.nnn))

        self.state.pc = (self.state.v[vr] + ins.nnn) & PC_BITMASK

    def _Cxkk(self, ins):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(ins.x, ins.nn))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.state.v[ins.x] = self.rng.randint(0, 0xFF) & ins.nn

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(ins.x, ins.y, ins.n))

        state = self.state
        framebuffer = state.framebuffer
        vid_width, vid_height = framebuffer.get_vid_size()

        # Only the sprite's start position wraps.  Anything past the right or bottom edge is clipped by the
        # framebuffer, unless it allows wrapping.
        vx_pos = state.v[ins.x] % vid_width
        vy_pos = state.v[ins.y] % vid_height
        sprite = state.ram.read_block(state.i, ins.n)  # Fails before drawing if the sprite runs off the end of RAM
        collided = False

        for y, spr_data in enumerate(sprite):
            scr_y = y + vy_pos

            for x in range(8):
                if spr_data & (0x80 >> x):
                    # Don't stop drawing on a collision.  Set the flag, and never unset it for this sprite.
                    if framebuffer.xor_pixel(x + vx_pos, scr_y):
                        collided = True

        state.v[0xF] = int(collided)
        self.renderer.render(framebuffer.snapshot())

    def _Ex9E(self, ins):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(ins.x))

        if self.inputs.is_key_down(self.state.v[ins.x] & 0xF):
            self._post_skip()

    def _ExA1(self, ins):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(ins.x))

        if not self.inputs.is_key_down(self.state.v[ins.x] & 0xF):
            self._post_skip()

    def _Fx07(self, ins):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(ins.x))

        self.state.v[ins.x] = self.state.dt

    def _Fx0A(self, ins):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(ins.x))

        # This opcode waits for a keypress, but since the timers still need to expire correctly, and the display and
        # inputs still need servicing, we'll return control to the run loop and simply decrement the incremented
        # program counter.

        if self.awaiting_keypress:
            key = self.inputs.get_keypress()
        else:
            self.inputs.setup_keypress()  # Clear any currently/previously pressed/held keys.
            self.awaiting_keypress = True
            key = None

        if key is None:
            # We need to come back here on the next instruction, because no key is pressed.
            self.dec_pc()
        else:
            self.state.v[ins.x] = key
            self.awaiting_keypress = False

    def _Fx15(self, ins):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(ins.x))

        dt = self.state.v[ins.x]
        self.state.dt = dt
        self.dt_target = self.this_time + (dt / TIMER_FREQ)

    def _Fx18(self, ins):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(ins.x))

        st = self.state.v[ins.x]
        self.state.st = st
        self.st_target = self.this_time + (st / TIMER_FREQ)

    def _Fx1E(self, ins):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(ins.x))

        state = self.state
        val = state.i + state.v[ins.x]
        state.i = val & I_BITMASK

        # Allow for Amiga CHIP-8 interpreter behaviour
        if self.index_overflow_quirks:
            state.v[0xF] = int(val > 0xFFF)

    def _Fx29(self, ins):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(ins.x))

        self.state.i = SYSFONT_LOC + SYSFONT_GLYPH_SIZE * (self.state.v[ins.x] & 0xF)

    def _Fx33(self, ins):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(ins.x))

        val = self.state.v[ins.x]
        # Most-significant digit first
        self.state.ram.write_block(self.state.i, bytes((val // 100, (val // 10) % 10, val % 10)))

    def _Fx55(self, ins):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(ins.x))

        # Ensure with +1s that the final register is copied.  I is left unchanged.
        self.state.ram.write_block(self.state.i, self.state.v[:ins.x + 1])

    def _Fx65(self, ins):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(ins.x))

        self.state.v[:ins.x + 1] = self.state.ram.read_block(self.state.i, ins.x + 1)
