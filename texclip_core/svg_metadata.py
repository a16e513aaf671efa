"""Reading and writing the ``<metadata>`` sidecar of SVG images.

The sidecar holds the JSON object ``{"latex": source}``.  The characters
``<``, ``>`` and ``&`` are written as JSON ``\\uXXXX`` escapes so that the
block is well-formed XML and valid JSON at the same time.  Editors that
re-serialize the SVG may still turn quotes into XML entities, so the reader
unescapes entities before parsing the JSON.
"""

from __future__ import annotations

import html
import json
import logging
import re
from typing import Optional, Union

from config.constants import METADATA_KEY

from .errors import ContainerParseError

_ROOT_TAG_RE = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
_METADATA_RE = re.compile(
    r"<metadata\b[^>]*>(.*?)</metadata\s*>", re.IGNORECASE | re.DOTALL
)
_CDATA_RE = re.compile(r"^<!\[CDATA\[(.*)\]\]>$", re.DOTALL)

_XML_SAFE = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def _as_text(data: Union[str, bytes]) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def encode_metadata_json(source: str) -> str:
    """Return the XML-safe JSON payload for *source*."""

    try:
        payload = json.dumps({METADATA_KEY: source}, ensure_ascii=False)
        payload.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates cannot be written as UTF-8; keep them as escapes.
        payload = json.dumps({METADATA_KEY: source}, ensure_ascii=True)
    for char, escape in _XML_SAFE.items():
        payload = payload.replace(char, escape)
    return payload


def embed_source(svg: Union[str, bytes], source: str) -> bytes:
    """Insert the metadata sidecar as the first child of the root element."""

    text = _as_text(svg)
    match = _ROOT_TAG_RE.search(text)
    if match is None:
        raise ContainerParseError("no <svg> root element found")

    block = f"<metadata>{encode_metadata_json(source)}</metadata>"
    open_tag = match.group(0)
    if open_tag.endswith("/>"):
        replacement = open_tag[:-2].rstrip() + ">" + block + "</svg>"
    else:
        replacement = open_tag + block
    return (text[:match.start()] + replacement + text[match.end():]).encode("utf-8")


def _parse_block(content: str) -> Optional[str]:
    content = content.strip()
    cdata = _CDATA_RE.match(content)
    if cdata:
        content = cdata.group(1).strip()
    if "&" in content:
        content = html.unescape(content)
    try:
        decoded = json.loads(content)
    except ValueError:
        return None
    if isinstance(decoded, dict):
        value = decoded.get(METADATA_KEY)
        if isinstance(value, str):
            return value
    return None


def read_source(svg: Union[str, bytes]) -> Optional[str]:
    """Return the embedded source from the first matching metadata block."""

    text = _as_text(svg)
    for match in _METADATA_RE.finditer(text):
        source = _parse_block(match.group(1))
        if source is not None:
            return source
    logging.debug("No metadata block with a %r key found in SVG", METADATA_KEY)
    return None
