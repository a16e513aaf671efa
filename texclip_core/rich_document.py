"""HTML clipboard documents with inline ``data:`` image attachments.

Only ``<img>`` tags whose ``src`` is a base64 ``data:`` URI become
attachment runs.  Everything between them is kept as verbatim markup, so an
untouched document serializes back byte for byte.
"""

from __future__ import annotations

import base64
import binascii
import html
import re
from typing import Dict, List, Optional

from .model import Attachment, AttachmentRun, Document, TextRun

_IMG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))"""
)
_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*);base64,(?P<data>.*)$",
    re.IGNORECASE | re.DOTALL,
)
_BREAK_RE = re.compile(r"<br\s*/?>|</p\s*>|</div\s*>|</li\s*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_HIDDEN_BLOCK_RE = re.compile(r"<(style|script|head)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)

IDENTITY_ATTRIBUTES = ("data-filename", "alt", "title")


def _attributes(tag: str) -> Dict[str, str]:
    attributes = {}
    for match in _ATTR_RE.finditer(tag):
        name = match.group(1).lower()
        value = next(group for group in match.groups()[1:] if group is not None)
        attributes.setdefault(name, html.unescape(value))
    return attributes


def markup_to_text(markup: str) -> str:
    """Return the visible text of an HTML fragment."""

    text = _COMMENT_RE.sub("", markup)
    text = _HIDDEN_BLOCK_RE.sub("", text)
    text = _BREAK_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    return html.unescape(text)


def _attachment_from_tag(tag: str) -> Optional[Attachment]:
    attributes = _attributes(tag)
    match = _DATA_URI_RE.match(attributes.get("src", "").strip())
    if match is None:
        return None
    data = re.sub(r"\s+", "", match.group("data"))
    try:
        payload = base64.b64decode(data)
    except (binascii.Error, ValueError):
        return None

    identity = None
    for name in IDENTITY_ATTRIBUTES:
        if attributes.get(name):
            identity = attributes[name]
            break
    return Attachment(
        identity=identity,
        payload=payload,
        media_type=match.group("mime") or None,
    )


def parse_html(markup: str) -> Document:
    runs: List = []
    position = 0
    for match in _IMG_RE.finditer(markup):
        attachment = _attachment_from_tag(match.group(0))
        if attachment is None:
            continue
        if match.start() > position:
            fragment = markup[position:match.start()]
            runs.append(TextRun(markup_to_text(fragment), markup=fragment))
        runs.append(AttachmentRun(attachment, markup=match.group(0)))
        position = match.end()
    if position < len(markup):
        fragment = markup[position:]
        runs.append(TextRun(markup_to_text(fragment), markup=fragment))
    return tuple(runs)


def _set_attribute(tag: str, name: str, value: str) -> str:
    quoted = '"%s"' % html.escape(value, quote=True)
    for match in _ATTR_RE.finditer(tag):
        if match.group(1).lower() == name:
            return tag[:match.start()] + f"{match.group(1)}={quoted}" + tag[match.end():]
    end = len(tag) - 2 if tag.endswith("/>") else len(tag) - 1
    return tag[:end].rstrip() + f" {name}={quoted}" + tag[end:]


def attachment_tag(attachment: Attachment, template: Optional[str] = None) -> str:
    """Serialize *attachment* as an ``<img>`` tag.

    With a *template* tag, only ``src`` and the attributes that named the
    attachment are rewritten; width, style and the rest stay as they were.
    """

    media_type = attachment.media_type or "application/octet-stream"
    encoded = base64.b64encode(attachment.payload).decode("ascii")
    src = f"data:{media_type};base64,{encoded}"
    if template is None:
        parts = [f'<img src="{src}"']
        if attachment.identity:
            name = html.escape(attachment.identity, quote=True)
            parts.append(f' data-filename="{name}" alt="{name}"')
        parts.append(">")
        return "".join(parts)

    tag = _set_attribute(template, "src", src)
    if attachment.identity:
        attributes = _attributes(template)
        previous = next(
            (attributes[name] for name in IDENTITY_ATTRIBUTES if attributes.get(name)), None
        )
        tag = _set_attribute(tag, "data-filename", attachment.identity)
        for name in IDENTITY_ATTRIBUTES[1:]:
            if previous is not None and attributes.get(name) == previous:
                tag = _set_attribute(tag, name, attachment.identity)
    return tag


def render_html(document: Document) -> str:
    chunks = []
    for run in document:
        if isinstance(run, TextRun):
            if run.markup is not None:
                chunks.append(run.markup)
            else:
                chunks.append(html.escape(run.text, quote=False))
        elif run.markup is not None:
            chunks.append(run.markup)
        else:
            chunks.append(attachment_tag(run.attachment, run.template))
    return "".join(chunks)


# ----------------------------------------------------------------------
# Rich text without attachments
# ----------------------------------------------------------------------
def _rtf_escape(text: str) -> str:
    out = []
    for char in text.replace("\r\n", "\n"):
        code = ord(char)
        if char in "\\{}":
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\par\n")
        elif char == "\t":
            out.append("\\tab ")
        elif code < 0x80:
            out.append(char)
        elif code <= 0xFFFF:
            out.append("\\u%d?" % (code if code < 0x8000 else code - 0x10000))
        else:
            code -= 0x10000
            for unit in (0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)):
                out.append("\\u%d?" % (unit - 0x10000))
    return "".join(out)


def render_rtf(document: Document) -> bytes:
    """Write the text of *document* as RTF, dropping attachments."""

    body = "".join(
        _rtf_escape(run.text) for run in document if isinstance(run, TextRun)
    )
    rtf = "{\\rtf1\\ansi\\deff0{\\fonttbl{\\f0 Helvetica;}}\\f0 " + body + "}"
    return rtf.encode("ascii")


def document_text(document: Document) -> str:
    return "".join(run.text for run in document if isinstance(run, TextRun))
