"""Synthetic copy and paste keystrokes sent to the focused application."""

from __future__ import annotations

import logging
import time
from typing import Optional

from pynput import keyboard

from config.constants import IS_MACOS


KEY_TAP_DELAY = 0.01


class InputManager:
    """Simulate the platform copy and paste shortcuts with pynput."""

    def __init__(self, controller: Optional[keyboard.Controller] = None) -> None:
        self._keyboard_controller = controller or keyboard.Controller()
        self._modifier = keyboard.Key.cmd if IS_MACOS else keyboard.Key.ctrl

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def simulate_copy(self) -> None:
        logging.debug("InputManager: simulating copy")
        self._tap_with_modifier("c")

    def simulate_paste(self) -> None:
        logging.debug("InputManager: simulating paste")
        self._tap_with_modifier("v")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _tap_with_modifier(self, char: str) -> None:
        with self._keyboard_controller.pressed(self._modifier):
            time.sleep(KEY_TAP_DELAY)
            self._keyboard_controller.press(char)
            self._keyboard_controller.release(char)
            time.sleep(KEY_TAP_DELAY)
