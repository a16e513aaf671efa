"""Render and revert workflows run inside a clipboard transaction."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from config.constants import FLAVOR_CUSTOM_SVG, FLAVOR_PDF, FLAVOR_SVG, FLAVOR_TEXT
from texclip_core.decoder import ClipboardDecoder
from texclip_core.encoder import ArtifactEncoder
from texclip_core.interfaces import Renderer
from texclip_core.model import Artifact
from texclip_core.transaction import ClipboardTransactionCoordinator


def artifact_flavors(artifact: Artifact) -> Dict[str, bytes]:
    """Return the clipboard flavors for *artifact*, PDF first."""

    flavors = {}
    if artifact.pdf is not None:
        flavors[FLAVOR_PDF] = artifact.pdf
    if artifact.svg is not None:
        flavors[FLAVOR_SVG] = artifact.svg
        flavors[FLAVOR_CUSTOM_SVG] = artifact.svg
    return flavors


class ClipboardManager:
    """Replace the current selection with its rendering, or back again.

    Both workflows copy the selection, compute a replacement, paste it and
    let the coordinator put the user's clipboard back afterwards.
    """

    def __init__(
        self,
        coordinator: ClipboardTransactionCoordinator,
        renderer: Renderer,
        *,
        encoder: Optional[ArtifactEncoder] = None,
        decoder: Optional[ClipboardDecoder] = None,
    ) -> None:
        self.coordinator = coordinator
        self.renderer = renderer
        self.encoder = encoder or ArtifactEncoder()
        self.decoder = decoder or ClipboardDecoder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def convert_selection(self, display_mode: bool = True) -> bool:
        """Render the selected source and paste the artifact over it.

        Returns ``False`` when the selection held no text.  ``RenderError``
        and ``EncodeError`` propagate once the clipboard has been restored.
        """

        label = "render" if display_mode else "render-inline"
        with self.coordinator.transaction(label) as txn:
            txn.copy_selection()
            data = txn.read_flavor(FLAVOR_TEXT)
            source = data.decode("utf-8", errors="replace").strip() if data else ""
            if not source:
                txn.log(logging.INFO, "Selection holds no text; nothing to render")
                return False

            image = self.renderer.render(source, display_mode)
            artifact = self.encoder.encode(source, image)
            txn.replace_contents(artifact_flavors(artifact))
            txn.paste()
            txn.log(
                logging.INFO,
                "Rendered source pasted with %d channel(s)",
                len(artifact.channels),
            )
            return True

    def revert_selection(self) -> bool:
        """Paste the recovered sources over the selection.

        Returns ``False`` without touching the selection when nothing was
        recovered.
        """

        with self.coordinator.transaction("revert") as txn:
            txn.copy_selection()
            replacement = self.decoder.decode(txn.read_flavors())
            if replacement is None:
                return False
            txn.replace_contents(replacement)
            txn.paste()
            txn.log(logging.INFO, "Recovered source pasted")
            return True
