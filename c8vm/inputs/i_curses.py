#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

Uses a thread to trap Terminal inputs and redirects them to the VM.  Standard
TTY Terminals only understand characters, not key 'presses' and 'releases', so
a key is assumed to be held for a short time after its character is seen.
Keyboard repeats keep it held for as long as the user holds it.

Each character seen also counts as a completed keypress for the wait-for-key
instruction.

We will also quit if ESC (char 27) or CTRL+C (char 3) is detected.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Thread
from time import time
from .i_null import Inputs as InputsBase

# Terminals don't have separate key press/release, so we have to pause after a character is seen.
KEYBOARD_FAKE_KEYDOWN_TIME = 0.2


# For thread safety, use proper queues to exchange information, avoiding shared variables.
def input_thread(thread_quitter_queue, input_queue, keymap_dict, curses_screen):
    while thread_quitter_queue.empty():
        # This blocks the thread, but as a daemon thread it is terminated when the main thread shuts down.
        char = ord(chr(curses_screen.getch()).lower())

        if char == 27 or char == 3:  # Detect ESC or CTRL+C
            input_queue.put(None, block=True)
            break

        hex_key = keymap_dict.get(char)

        if hex_key is not None:
            try:
                input_queue.put(hex_key, block=False)
            except queue.Full:
                pass


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        self.key_timers = [0.0] * 0x10
        super().__init__(keymap, renderer, force_lowercase=True)

        self.thread_quitter_queue = queue.Queue(1)  # Used to inform the thread it should quit
        self.input_queue = queue.Queue(16)
        self.thread = Thread(
            target=input_thread,
            args=(
                self.thread_quitter_queue,
                self.input_queue,
                self.keymap_dict,
                renderer.get_curses_screen()
            ),
            daemon=True
        )
        self.thread.start()

    def process_messages(self):
        target_time = None

        while True:
            try:
                # Blocking here would lock up the main thread if nothing was pressed
                hex_key = self.input_queue.get(block=False)
            except queue.Empty:
                break

            if hex_key is None:
                return True

            if target_time is None:
                target_time = time() + KEYBOARD_FAKE_KEYDOWN_TIME

            self.key_timers[hex_key] = target_time
            self.last_keypress = hex_key

        return False

    def is_key_down(self, key):
        return self.key_timers[key] > time()

    def shutdown(self):
        try:
            self.thread_quitter_queue.put(None, block=False)
        except queue.Full:
            # Something else has already requested the thread quits
            pass
