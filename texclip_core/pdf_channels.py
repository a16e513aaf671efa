"""PDF side of the codec, built on PyMuPDF.

Writers take an open :class:`fitz.Document` and raise on failure so the
encoder can count which channels made it in.  Readers return ``None`` when
their channel is absent.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional
from xml.sax.saxutils import escape

import fitz

from config.constants import (
    HIDDEN_END_MARKER,
    HIDDEN_START_MARKER,
    PREFIX_MARKER,
    XMP_BAG_TAGS,
)

from . import svg_metadata
from .errors import ContainerParseError

HIDDEN_TEXT_RE = re.compile(
    re.escape(HIDDEN_START_MARKER) + r"(.*?)" + re.escape(HIDDEN_END_MARKER),
    re.DOTALL,
)

# Hidden text may run past the page edge; keep it in the extraction.
_TEXT_FLAGS = fitz.TEXTFLAGS_TEXT & ~fitz.TEXT_MEDIABOX_CLIP

HIDDEN_FONT_NAME = "texclip-unicode"

_XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
_DC_NS = "http://purl.org/dc/elements/1.1/"

_XMP_TEMPLATE = (
    '<?xpacket begin="\ufeff" id="W5M0MpCehiHzreSzNTczkc9d"?>\n'
    '<x:xmpmeta xmlns:x="adobe:ns:meta/">'
    f'<rdf:RDF xmlns:rdf="{_RDF_NS}">'
    f'<rdf:Description rdf:about="" xmlns:dc="{_DC_NS}">'
    "<dc:subject><rdf:Bag>{items}</rdf:Bag></dc:subject>"
    "</rdf:Description></rdf:RDF></x:xmpmeta>\n"
    '<?xpacket end="w"?>'
)


# ----------------------------------------------------------------------
# Containers
# ----------------------------------------------------------------------
def open_pdf(payload: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=payload, filetype="pdf")
    except Exception as exc:
        raise ContainerParseError(f"not a readable PDF: {exc}") from exc


def svg_to_pdf(svg: bytes) -> fitz.Document:
    """Convert an SVG image into a single page PDF document."""

    try:
        with fitz.open(stream=svg, filetype="svg") as image:
            pdf_bytes = image.convert_to_pdf()
    except Exception as exc:
        raise ContainerParseError(f"SVG to PDF conversion failed: {exc}") from exc
    return open_pdf(pdf_bytes)


def _first_page(doc: fitz.Document) -> fitz.Page:
    if doc.page_count == 0:
        doc.new_page()
    return doc[0]


def page_text(page: fitz.Page) -> str:
    return page.get_text("text", flags=_TEXT_FLAGS)


def document_text(doc: fitz.Document) -> str:
    return "".join(page_text(page) for page in doc)


# ----------------------------------------------------------------------
# Writers
# ----------------------------------------------------------------------
def write_annotation(doc: fitz.Document, source: str) -> None:
    page = _first_page(doc)
    annot = page.add_text_annot(page.rect.tl, PREFIX_MARKER + source)
    annot.set_flags(fitz.PDF_ANNOT_IS_HIDDEN)
    annot.update()


def write_hidden_text(doc: fitz.Document, source: str) -> None:
    page = _first_page(doc)
    marked = HIDDEN_START_MARKER + source + HIDDEN_END_MARKER
    fontname = "helv"
    if not marked.isascii():
        # Base-14 Helvetica only encodes Latin-1; embed a font with wide coverage.
        page.insert_font(fontname=HIDDEN_FONT_NAME, fontbuffer=fitz.Font("cjk").buffer)
        fontname = HIDDEN_FONT_NAME
    # render_mode 3 draws neither fill nor stroke.
    page.insert_text(
        page.rect.tl + (0, 1), marked, fontsize=1, fontname=fontname, render_mode=3
    )


def xmp_packet(source: str) -> Optional[str]:
    """Return the XMP packet for *source*, or ``None`` if XML cannot hold it."""

    if _XML_ILLEGAL_RE.search(source):
        return None
    entries = list(XMP_BAG_TAGS) + [PREFIX_MARKER + source]
    items = "".join(
        "<rdf:li>%s</rdf:li>" % escape(entry).replace("\r", "&#13;")
        for entry in entries
    )
    return _XMP_TEMPLATE.format(items=items)


def write_document_properties(doc: fitz.Document, source: str) -> bool:
    """Write the Subject and Keywords slots and, if possible, the XMP bag.

    Returns ``True`` when the XMP bag was written as well.
    """

    marker = PREFIX_MARKER + source
    doc.set_metadata({"subject": marker, "keywords": marker})

    packet = xmp_packet(source)
    if packet is None:
        logging.warning("Source contains XML-illegal characters; XMP subject bag skipped")
        return False
    doc.set_xml_metadata(packet)
    return True


# ----------------------------------------------------------------------
# Readers
# ----------------------------------------------------------------------
def _strip_prefix(value: Optional[str]) -> Optional[str]:
    if value and value.startswith(PREFIX_MARKER):
        return value[len(PREFIX_MARKER):]
    return None


def xmp_subject_entries(doc: fitz.Document) -> List[str]:
    packet = doc.get_xml_metadata()
    if not packet:
        return []
    try:
        root = ET.fromstring(packet.strip())
    except ET.ParseError as exc:
        logging.debug("Unparseable XMP packet: %s", exc)
        return []
    entries = []
    for subject in root.iter(f"{{{_DC_NS}}}subject"):
        for item in subject.iter(f"{{{_RDF_NS}}}li"):
            entries.append(item.text or "")
    return entries


def read_document_properties(doc: fitz.Document) -> Optional[str]:
    metadata = doc.metadata or {}
    source = _strip_prefix(metadata.get("subject"))
    if source is not None:
        return source

    for entry in xmp_subject_entries(doc):
        source = _strip_prefix(entry)
        if source is not None:
            return source

    keywords = metadata.get("keywords") or ""
    index = keywords.find(PREFIX_MARKER)
    if index >= 0:
        return keywords[index + len(PREFIX_MARKER):]
    return None


def read_hidden_text(doc: fitz.Document) -> Optional[str]:
    match = HIDDEN_TEXT_RE.search(document_text(doc))
    return match.group(1) if match else None


def read_legacy_prefix(doc: fitz.Document) -> Optional[str]:
    text = document_text(doc)
    index = text.find(PREFIX_MARKER)
    if index < 0:
        return None
    return text[index + len(PREFIX_MARKER):].strip()


def _annotations(doc: fitz.Document) -> Iterator[fitz.Annot]:
    for page in doc:
        yield from page.annots()


def read_annotation(doc: fitz.Document) -> Optional[str]:
    for annot in _annotations(doc):
        source = _strip_prefix(annot.info.get("content"))
        if source is not None:
            return source
    return None


def read_embedded_svg(doc: fitz.Document) -> Optional[str]:
    for page in doc:
        contents = page.read_contents()
        if contents:
            source = svg_metadata.read_source(contents)
            if source is not None:
                return source
    return None


def mine_recovered_sequence(payload: bytes) -> Optional[List[str]]:
    """Collect every hidden text marker of a whole-document PDF, in order."""

    try:
        with open_pdf(payload) as doc:
            text = document_text(doc)
    except Exception as exc:
        logging.debug("Recovered sequence unavailable: %s", exc)
        return None
    matches = HIDDEN_TEXT_RE.findall(text)
    return matches or None
