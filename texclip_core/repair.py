"""Give preserved attachments a usable filename before re-emission."""

from __future__ import annotations

import logging
import uuid

from config.constants import PLACEHOLDER_IDENTITY

from .model import Attachment
from .sniffing import extension_from_magic, media_type_for_extension


def needs_identity(identity) -> bool:
    return not identity or identity == PLACEHOLDER_IDENTITY


class AttachmentRepair:
    """Rebuild attachments from their raw bytes.

    Editors often hand over attachments named ``unknown`` or with no name at
    all, which some targets refuse to paste.  Such attachments get a fresh
    ``image-<uuid>.<ext>`` name with the extension taken from the magic
    number.
    """

    def repair(self, attachment: Attachment) -> Attachment:
        identity = attachment.identity
        if needs_identity(identity):
            extension = extension_from_magic(attachment.payload)
            identity = f"image-{uuid.uuid4()}.{extension}"
            logging.debug(
                "Renamed attachment %r to %s", attachment.identity, identity
            )
            media_type = media_type_for_extension(extension)
        else:
            media_type = attachment.media_type
            if not media_type and "." in identity:
                media_type = media_type_for_extension(identity.rsplit(".", 1)[1])
        return Attachment(
            identity=identity,
            payload=bytes(attachment.payload),
            media_type=media_type,
        )
