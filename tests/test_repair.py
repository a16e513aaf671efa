import re

import pytest

from texclip_core.model import Attachment
from texclip_core.repair import AttachmentRepair


@pytest.mark.parametrize(
    "payload, extension, media_type",
    [
        (b"\x89PNG\r\n\x1a\n....", "png", "image/png"),
        (b"%PDF-1.7\n...", "pdf", "application/pdf"),
        (b"\xff\xd8\xff\xe0....", "jpg", "image/jpeg"),
        (b"GIF89a....", "gif", "image/gif"),
        (b"\x00\x01\x02", "dat", "application/octet-stream"),
    ],
)
def test_placeholder_identity_gets_magic_extension(payload, extension, media_type):
    repaired = AttachmentRepair().repair(Attachment("unknown", payload))
    assert re.fullmatch(r"image-[0-9a-f-]{36}\.%s" % extension, repaired.identity)
    assert repaired.media_type == media_type
    assert repaired.payload == payload


def test_missing_identity_is_named():
    repaired = AttachmentRepair().repair(Attachment(None, b"GIF87a"))
    assert repaired.identity.endswith(".gif")


def test_generated_names_are_unique():
    repair = AttachmentRepair()
    first = repair.repair(Attachment("", b"GIF87a"))
    second = repair.repair(Attachment("", b"GIF87a"))
    assert first.identity != second.identity


def test_named_attachment_keeps_identity_but_is_rebuilt():
    original = Attachment("photo.PNG", b"\x89PNG....")
    repaired = AttachmentRepair().repair(original)
    assert repaired is not original
    assert repaired.identity == "photo.PNG"
    assert repaired.media_type == "image/png"
