# main.py
# Entry point of the TeXClipper tray application.

import sys
import logging
import signal
import threading

from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon
from PySide6.QtCore import QLockFile, QTimer

from config import settings as app_settings
from config.constants import APP_NAME
from hotkey_manager import HotkeyManager
from services.clipboard_manager import ClipboardManager
from services.input_manager import InputManager
from services.qt_clipboard import QtClipboard
from services.renderer import MathRenderer
from services.shortcut_dispatcher import ShortcutDispatcher
from texclip_core.transaction import ClipboardTransactionCoordinator
from utils.logging_setup import (
    create_stream_handler,
    ensure_file_handler,
    parse_level,
    resolve_log_paths,
)
from utils.path_helpers import resolve_documents_directory, resolve_lock_path


def _log_thread_exception(args):
    """Log unhandled thread exceptions so the listener never dies silently."""
    logging.critical(
        "Unhandled exception in thread %s: %s",
        args.thread.name,
        args.exc_value,
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )


threading.excepthook = _log_thread_exception


def _log_unhandled_exception(exc_type, exc_value, exc_traceback):
    logging.critical(
        "Unhandled exception: %s", exc_value, exc_info=(exc_type, exc_value, exc_traceback)
    )


sys.excepthook = _log_unhandled_exception


def setup_exit_handler(app_instance):
    """Sets up handlers for graceful shutdown on signals."""

    def signal_handler(signum, frame):
        logging.critical("Shutdown signal (%s) received.", signal.Signals(signum).name)
        app_instance.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Let the interpreter run now and then so Python signal handlers fire.
    timer = QTimer(app_instance)
    timer.timeout.connect(lambda: None)
    timer.start(500)
    return timer


def configure_logging():
    documents_dir = resolve_documents_directory()
    _, log_file_path = resolve_log_paths(documents_dir)
    logging.basicConfig(
        level=parse_level(app_settings.LOG_LEVEL),
        handlers=[create_stream_handler(sys.stdout)],
        force=True,
    )
    ensure_file_handler(log_file_path)
    return log_file_path


def build_tray(app, dispatcher):
    tray = QSystemTrayIcon(app.style().standardIcon(QStyle.SP_FileDialogDetailedView), app)
    tray.setToolTip(APP_NAME)
    menu = QMenu()
    menu.addAction("Quit", app.quit)
    tray.setContextMenu(menu)
    dispatcher.notice.connect(
        lambda message: tray.showMessage(APP_NAME, message, QSystemTrayIcon.Warning)
    )
    tray.show()
    # The menu must outlive this function.
    tray._menu = menu
    return tray


if __name__ == "__main__":
    log_file_path = configure_logging()
    logging.info("Starting %s (log file: %s)", APP_NAME, log_file_path)

    # Allow only a single running instance using a lock file
    lock_file = QLockFile(resolve_lock_path("texclipper.lock"))
    if not lock_file.tryLock(100):
        logging.error("%s is already running.", APP_NAME)
        sys.exit(1)

    app = QApplication(sys.argv)
    exit_timer = setup_exit_handler(app)
    app.setQuitOnLastWindowClosed(False)

    coordinator = ClipboardTransactionCoordinator(
        QtClipboard(), InputManager(), timing=app_settings.load_timing()
    )
    manager = ClipboardManager(
        coordinator,
        MathRenderer(app_settings.DISPLAY_FONT_SIZE, app_settings.INLINE_FONT_SIZE),
    )
    dispatcher = ShortcutDispatcher(manager)
    tray = build_tray(app, dispatcher)

    shortcuts = {
        key.split("/", 1)[1]: value
        for key, value in app_settings.ShortcutSettings().all().items()
    }
    hotkeys = HotkeyManager(dispatcher, shortcuts)
    hotkeys.start()
    app.aboutToQuit.connect(hotkeys.stop)

    exit_code = app.exec()
    lock_file.unlock()
    sys.exit(exit_code)
