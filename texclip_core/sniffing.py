"""Container detection by magic number and filename extension."""

from __future__ import annotations

import enum
import re
from typing import Optional

from config.constants import RASTER_EXTENSIONS

PNG_MAGIC = b"\x89PNG"
PDF_MAGIC = b"%PDF"
JPEG_MAGIC = b"\xff\xd8\xff"
GIF_MAGIC = b"GIF8"

# Checked in this order; the first match wins.
MAGIC_EXTENSIONS = (
    (PNG_MAGIC, "png"),
    (PDF_MAGIC, "pdf"),
    (JPEG_MAGIC, "jpg"),
    (GIF_MAGIC, "gif"),
)
DEFAULT_EXTENSION = "dat"

MEDIA_TYPES = {
    "png": "image/png",
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
}

_SVG_ROOT_RE = re.compile(rb"<svg[\s>]", re.IGNORECASE)
_SVG_SNIFF_WINDOW = 4096


class ContainerKind(enum.Enum):
    SVG = "svg"
    PDF = "pdf"
    RAW = "raw"


def is_pdf(payload: bytes) -> bool:
    return payload[:len(PDF_MAGIC)] == PDF_MAGIC


def is_svg(payload: bytes) -> bool:
    head = payload[:_SVG_SNIFF_WINDOW].lstrip()
    if head.startswith(b"\xef\xbb\xbf"):
        head = head[3:]
    if not (head.startswith(b"<?xml") or head.startswith(b"<svg") or head.startswith(b"<!")):
        return False
    return _SVG_ROOT_RE.search(head) is not None


def has_extension(identity: Optional[str], extension: str) -> bool:
    return bool(identity) and identity.lower().endswith(extension)


def is_raster_identity(identity: Optional[str]) -> bool:
    return bool(identity) and identity.lower().endswith(RASTER_EXTENSIONS)


def sniff_container(payload: bytes, identity: Optional[str] = None) -> ContainerKind:
    """Classify *payload*, preferring its header over the *identity* hint."""

    if is_pdf(payload):
        return ContainerKind.PDF
    if is_svg(payload):
        return ContainerKind.SVG
    if has_extension(identity, ".pdf"):
        return ContainerKind.PDF
    if has_extension(identity, ".svg"):
        return ContainerKind.SVG
    return ContainerKind.RAW


def extension_from_magic(payload: bytes) -> str:
    for magic, extension in MAGIC_EXTENSIONS:
        if payload.startswith(magic):
            return extension
    return DEFAULT_EXTENSION


def media_type_for_extension(extension: str) -> str:
    return MEDIA_TYPES.get(extension.lower(), "application/octet-stream")
