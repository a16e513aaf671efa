"""Path resolution helpers shared across the application."""

from __future__ import annotations

import os
from pathlib import Path

from PySide6.QtCore import QStandardPaths


def resolve_documents_directory() -> Path:
    """Return a persistent user Documents directory.

    Falls back to ``~/Documents`` when Qt reports no writable location or a
    relative one.
    """

    location = QStandardPaths.writableLocation(QStandardPaths.DocumentsLocation)
    if not location:
        location = os.path.join(Path.home(), "Documents")

    documents_path = Path(location)
    if not documents_path.is_absolute():
        documents_path = (Path.home() / documents_path).resolve()
    return documents_path


def resolve_lock_path(filename: str) -> str:
    """Return the single instance lock file path in the app data directory."""

    data_dir = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    if not data_dir:
        data_dir = os.path.join(Path.home(), ".texclipper")
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, filename)
