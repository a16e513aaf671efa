"""Qt backed clipboard used by the transaction coordinator."""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QByteArray, QCoreApplication, QMimeData, QObject
from PySide6.QtGui import QGuiApplication

from texclip_core.model import ClipboardSnapshot


class QtClipboard(QObject):
    """Expose the system clipboard as typed byte blobs.

    Qt reports one item per clipboard, so snapshots hold a single item with
    every available format.  ``dataChanged`` bumps a revision counter that
    the coordinator polls while waiting for a copy to land.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._clipboard = QGuiApplication.clipboard()
        self._revision = 0
        self._clipboard.dataChanged.connect(self._on_data_changed)

    def _on_data_changed(self) -> None:
        self._revision += 1

    def _mime(self) -> Optional[QMimeData]:
        return self._clipboard.mimeData()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def revision_counter(self) -> int:
        # dataChanged is delivered through the event loop we are blocking.
        QCoreApplication.processEvents()
        return self._revision

    def available_flavors(self) -> List[str]:
        mime = self._mime()
        return list(mime.formats()) if mime is not None else []

    def read_flavor(self, flavor: str) -> Optional[bytes]:
        mime = self._mime()
        if mime is None or not mime.hasFormat(flavor):
            return None
        return bytes(mime.data(flavor).data())

    def write_flavor(self, flavor: str, data: bytes) -> None:
        current = self._mime()
        mime = QMimeData()
        if current is not None:
            for existing in current.formats():
                mime.setData(existing, QByteArray(bytes(current.data(existing).data())))
        mime.setData(flavor, QByteArray(data))
        self._clipboard.setMimeData(mime)

    def clear(self) -> None:
        self._clipboard.clear()

    def snapshot_all(self) -> ClipboardSnapshot:
        item = {}
        for flavor in self.available_flavors():
            data = self.read_flavor(flavor)
            if data is not None:
                item[flavor] = data
        logging.debug("QtClipboard: snapshot of %d format(s)", len(item))
        return [item] if item else []

    def restore(self, snapshot: ClipboardSnapshot) -> None:
        if not snapshot:
            self._clipboard.clear()
            return
        mime = QMimeData()
        for item in snapshot:
            for flavor, data in item.items():
                mime.setData(flavor, QByteArray(data))
        self._clipboard.setMimeData(mime)
