"""Recover an embedded math source from a single attachment or flavor."""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Sequence, Tuple

import fitz

from config.constants import FLAVOR_CUSTOM_SVG, FLAVOR_PDF, FLAVOR_SVG, FLAVOR_TEXT

from . import pdf_channels, svg_metadata
from .model import Attachment
from .sniffing import ContainerKind, has_extension, is_pdf, is_raster_identity

PdfReader = Callable[[fitz.Document], Optional[str]]

# Tried in order; the first channel that decodes wins.
PDF_READERS: Tuple[Tuple[str, PdfReader], ...] = (
    ("document properties", pdf_channels.read_document_properties),
    ("hidden text", pdf_channels.read_hidden_text),
    ("legacy prefix", pdf_channels.read_legacy_prefix),
    ("annotation", pdf_channels.read_annotation),
    ("embedded svg", pdf_channels.read_embedded_svg),
)


class ChannelExtractor:
    """Apply the channel readers in priority order.

    A miss is reported as ``None``.  Unparseable payloads are logged at debug
    level and reported the same way.
    """

    def __init__(self, pdf_readers: Sequence[Tuple[str, PdfReader]] = PDF_READERS):
        self.pdf_readers = tuple(pdf_readers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def extract(self, attachment: Attachment) -> Optional[str]:
        identity = attachment.identity
        payload = attachment.payload
        kind = attachment.container_kind

        if has_extension(identity, ".svg") or kind is ContainerKind.SVG:
            source = self.extract_svg(payload)
            if source is not None or kind is not ContainerKind.PDF:
                return source

        if is_pdf(payload) or has_extension(identity, ".pdf"):
            return self.extract_pdf(payload)

        if kind is ContainerKind.RAW and not is_raster_identity(identity):
            source = self.extract_svg(payload)
            if source is None:
                source = self.extract_pdf(payload)
            return source
        return None

    def extract_svg(self, payload: bytes) -> Optional[str]:
        return svg_metadata.read_source(payload)

    def extract_pdf(self, payload: bytes) -> Optional[str]:
        try:
            with pdf_channels.open_pdf(payload) as doc:
                for name, reader in self.pdf_readers:
                    source = reader(doc)
                    if source is not None:
                        logging.debug("Source recovered from PDF %s channel", name)
                        return source
        except Exception as exc:
            logging.debug("PDF extraction failed: %s", exc)
        return None

    def extract_from_flavors(self, flavors: Mapping[str, bytes]) -> Optional[str]:
        """Try the single-flavor strategies used when no rich document helps."""

        for flavor in (FLAVOR_CUSTOM_SVG, FLAVOR_SVG):
            payload = flavors.get(flavor)
            if payload:
                source = self.extract_svg(payload)
                if source is not None:
                    logging.debug("Source recovered from %s flavor", flavor)
                    return source

        text = flavors.get(FLAVOR_TEXT)
        if text and b"<svg" in text:
            source = self.extract_svg(text)
            if source is not None:
                logging.debug("Source recovered from SVG markup in plain text")
                return source

        pdf = flavors.get(FLAVOR_PDF)
        if pdf:
            source = self.extract_pdf(pdf)
            if source is not None:
                logging.debug("Source recovered from %s flavor", FLAVOR_PDF)
                return source
        return None
