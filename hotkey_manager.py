import logging
from functools import partial

from pynput import keyboard

from services.key_combo_detector import KeyComboDetector, key_to_id


def parse_shortcut(text):
    """Translate ``<ctrl>+<alt>+k`` style text into detector key ids."""
    return [key_to_id(key) for key in keyboard.HotKey.parse(text)]


class HotkeyManager:
    """Manage global application hotkeys using pynput."""

    def __init__(self, dispatcher, shortcuts):
        self.dispatcher = dispatcher
        self.listener = None

        combos = []
        for action, text in shortcuts.items():
            try:
                combos.append((parse_shortcut(text), partial(dispatcher.request, action)))
            except ValueError as exc:
                logging.error("Invalid shortcut %r for %s: %s", text, action, exc)
                continue
            logging.info("Shortcut for %s: %s", action, text)
        self.detector = KeyComboDetector(combos)

    def _canonical(self, key):
        listener = self.listener
        return listener.canonical(key) if listener else key

    def _on_press(self, key):
        self.detector.press(key_to_id(self._canonical(key)))
        logging.debug("Key pressed: %s. Pressed: %s", key, self.detector.pressed)

    def _on_release(self, key):
        self.detector.release(key_to_id(self._canonical(key)))
        logging.debug("Key released: %s. Pressed: %s", key, self.detector.pressed)

    def start(self):
        """Start listening for global hotkeys."""
        if not self.listener:
            self.listener = keyboard.Listener(on_press=self._on_press, on_release=self._on_release)
            self.listener.start()
            logging.info("Hotkey listener started.")

    def stop(self):
        """Stop listening for global hotkeys."""
        if self.listener:
            try:
                self.listener.stop()
            finally:
                self.listener = None
                self.detector.reset()
