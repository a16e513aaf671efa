"""Move hotkey requests onto the Qt main thread and run them one at a time."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Qt, Signal, Slot

from texclip_core.errors import ClipboardError, EncodeError, RenderError
from utils.logging_helpers import log_user_notice

ACTION_RENDER = "render"
ACTION_RENDER_INLINE = "render_inline"
ACTION_REVERT = "revert"
ACTIONS = (ACTION_RENDER, ACTION_RENDER_INLINE, ACTION_REVERT)


class ShortcutDispatcher(QObject):
    """Bridge between the pynput listener thread and the clipboard workflows."""

    action_requested = Signal(str)
    notice = Signal(str)

    def __init__(self, manager, parent=None) -> None:
        super().__init__(parent)
        self.manager = manager
        self._busy = False
        self.action_requested.connect(self._dispatch, Qt.QueuedConnection)

    def request(self, action: str) -> None:
        """Thread safe entry point used by the hotkey listener."""
        self.action_requested.emit(action)

    @Slot(str)
    def _dispatch(self, action: str) -> None:
        if self._busy:
            logging.info("Ignoring %s request; a transaction is still running", action)
            return

        self._busy = True
        try:
            if action == ACTION_RENDER:
                self.manager.convert_selection(display_mode=True)
            elif action == ACTION_RENDER_INLINE:
                self.manager.convert_selection(display_mode=False)
            elif action == ACTION_REVERT:
                self.manager.revert_selection()
            else:
                logging.warning("Unknown shortcut action: %s", action)
        except (RenderError, EncodeError) as exc:
            self.notice.emit(log_user_notice("Could not render the selection: %s", exc))
        except ClipboardError as exc:
            logging.error("Clipboard transaction failed: %s", exc, exc_info=True)
            self.notice.emit(log_user_notice("Clipboard could not be restored: %s", exc))
        finally:
            self._busy = False
