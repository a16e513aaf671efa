import configparser
import os

from PySide6.QtCore import QSettings

from config.constants import (
    APP_NAME,
    DEFAULT_CHANGE_TIMEOUT,
    DEFAULT_DISPLAY_FONT_SIZE,
    DEFAULT_INLINE_FONT_SIZE,
    DEFAULT_PASTE_SETTLE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RENDER_INLINE_SHORTCUT,
    DEFAULT_RENDER_SHORTCUT,
    DEFAULT_REVERT_SHORTCUT,
    ORG_NAME,
)
from texclip_core.transaction import ClipboardTiming

# Absolute path of the settings.ini next to this module
_config_path = os.path.join(os.path.dirname(__file__), 'settings.ini')

config = configparser.ConfigParser()
config.read(_config_path)

# Clipboard timing, in seconds
POLL_INTERVAL = config.getfloat('Clipboard', 'PollInterval', fallback=DEFAULT_POLL_INTERVAL)
CHANGE_TIMEOUT = config.getfloat('Clipboard', 'ChangeTimeout', fallback=DEFAULT_CHANGE_TIMEOUT)
PASTE_SETTLE = config.getfloat('Clipboard', 'PasteSettle', fallback=DEFAULT_PASTE_SETTLE)

# Renderer font sizes, in points
DISPLAY_FONT_SIZE = config.getfloat('Renderer', 'DisplayFontSize', fallback=DEFAULT_DISPLAY_FONT_SIZE)
INLINE_FONT_SIZE = config.getfloat('Renderer', 'InlineFontSize', fallback=DEFAULT_INLINE_FONT_SIZE)

LOG_LEVEL = config.get('Logging', 'Level', fallback='INFO')


def load_timing() -> ClipboardTiming:
    return ClipboardTiming(
        poll_interval=POLL_INTERVAL,
        change_timeout=CHANGE_TIMEOUT,
        paste_settle=PASTE_SETTLE,
    )


class ShortcutSettings:
    """Persist the global shortcuts in the platform settings store."""

    DEFAULTS = {
        "shortcuts/render": DEFAULT_RENDER_SHORTCUT,
        "shortcuts/render_inline": DEFAULT_RENDER_INLINE_SHORTCUT,
        "shortcuts/revert": DEFAULT_REVERT_SHORTCUT,
    }

    def __init__(self, settings=None):
        self.settings = settings or QSettings(ORG_NAME, APP_NAME)

    def get(self, key: str) -> str:
        value = self.settings.value(key, self.DEFAULTS[key])
        return str(value) if value else self.DEFAULTS[key]

    def set(self, key: str, value: str) -> None:
        if key not in self.DEFAULTS:
            raise KeyError(key)
        self.settings.setValue(key, value)
        self.settings.sync()

    def all(self) -> dict:
        return {key: self.get(key) for key in self.DEFAULTS}
