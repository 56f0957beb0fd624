#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import sys
from argparse import ArgumentParser
from c8vm import main
from c8vm.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, QUIRKS


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="override the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="set the rendering and input systems (pygame by default if available, otherwise curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512), and scale in Curses mode (default 2)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes (PyGame) or character numbers (Curses).  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine the off and on colours for the PyGame renderer in comma-separated hex, e.g. 000000,FFFFFF"
    )
    parser.add_argument(
        "--seed", type=int,
        help="seed the random number generator, for repeatable runs"
    )

    for quirk in QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(quirk), type=int, choices=[0, 1], default=0,
            help="disable or enable {} quirks (default 0)".format(quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable debug logging and a live instruction trace.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the VM from a GUI by calling this with a dictionary
    sys.exit(main(args))
