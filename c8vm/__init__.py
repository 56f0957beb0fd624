#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the VM, replacing args with a dictionary of
options.  This can be done via the Terminal or GUI.

Only 'filename' is required.  Missing options, or a 'None', select the defaults.

Returns a process exit status: 0 if the user quit, 1 if the VM could not start
or faulted.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from random import Random
from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP, PROGRAM_START, QUIRKS, SYSFONT_LOC
from .cpu import CPU
from .debugger import Debugger
from .errors import CPUError, RAMError, StackError, StartupError, VMError
from .hostio import Loader
from .state import State

logger = logging.getLogger(__name__)


def select_plugins(opt_renderer):
    # If no renderer is chosen, try PyGame first, then Curses.  Returns (Renderer, Inputs) classes.
    auto_select_renderer = opt_renderer is None

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if not auto_select_renderer:
                raise StartupError("PyGame does not appear to be installed.")
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer
            return Renderer, Inputs

        opt_renderer = "curses"

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.")

            raise StartupError("Curses (or Windows-Curses) does not appear to be installed.")

        from .inputs.i_curses import Inputs
        from .renderers.r_curses import Renderer
        return Renderer, Inputs

    # pylint: disable=import-outside-toplevel
    from .inputs.i_null import Inputs
    from .renderers.r_null import Renderer
    return Renderer, Inputs


def boot(state, loader, filename):
    # Reset the machine, then write the system font and the ROM into RAM.  The ROM is fully checked before any
    # part of the state is touched, so a failed boot leaves the previous machine as it was.
    rom = loader.load_binary(filename)
    state.reset()
    state.ram.write_block(SYSFONT_LOC, loader.load_system_font())
    state.ram.write_block(PROGRAM_START, rom)


def main(args):
    logging.basicConfig(
        level=logging.DEBUG if args.get("debug") else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )
    logger.info("".join((APP_INTRO, APP_COPYRIGHT)))

    quirk_settings = {"{}_quirks".format(quirk): bool(args.get("{}_quirks".format(quirk))) for quirk in QUIRKS}
    state = State(allow_wrapping=quirk_settings.pop("screen_wrap_quirks"))
    loader = Loader()

    try:
        boot(state, loader, args["filename"])
    except (OSError, VMError) as err:
        logger.error("Unable to load ROM: %s", err)
        return 1

    try:
        Renderer, Inputs = select_plugins(args.get("renderer"))
        renderer = Renderer(scale=args.get("scale"), pygame_palette=args.get("pygame_palette"))
    except VMError as err:
        logger.error("Unable to start renderer: %s", err)
        return 1

    try:
        inputs = Inputs(args.get("keymap") or DEFAULT_KEYMAP, renderer)
    except VMError as err:
        renderer.shutdown()
        logger.error("Unable to start inputs: %s", err)
        return 1

    debugger = Debugger()
    debugger.set_live(bool(args.get("debug")))
    seed = args.get("seed")
    rng = Random() if seed is None else Random(seed)

    cpu = CPU(
        state, renderer, inputs, debugger, clock_speed=args.get("clock_speed"), rng=rng, **quirk_settings
    )

    try:
        cpu.run()
    except (CPUError, RAMError, StackError) as err:
        # The instruction stream has stopped.  Report where, and leave the decision to exit to the caller.
        fault = err
    else:
        fault = None
    finally:
        # __del__ cannot be relied upon when using PyPy
        inputs.shutdown()
        renderer.shutdown()

    if fault is not None:
        logger.error("Emulation halted: %s\n%s", fault, debugger.debug(cpu, "???", verbose=True))
        return 1

    return 0
