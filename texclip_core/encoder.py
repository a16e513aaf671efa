"""Embed a math source into a rendered image through redundant channels."""

from __future__ import annotations

import logging
from typing import Union

from config.constants import HIDDEN_END_MARKER

from . import pdf_channels, svg_metadata
from .errors import ContainerParseError, EncodeError
from .model import Artifact, Channel


class ArtifactEncoder:
    """Build an :class:`Artifact` whose every channel carries the source.

    The SVG flavor carries the metadata sidecar.  The PDF flavor carries the
    annotation, hidden text and document property channels.  Any channel
    may fail on its own, and a channel is only kept once a scratch copy of
    it decodes back to the very same source.  Only an artifact with no
    channel at all is an error.
    """

    def encode(self, source: str, image: Union[str, bytes]) -> Artifact:
        vector = image.encode("utf-8") if isinstance(image, str) else bytes(image)
        channels = set()

        svg = None
        try:
            svg = svg_metadata.embed_source(vector, source)
        except ContainerParseError as exc:
            logging.warning("Metadata channel not embedded: %s", exc)
        else:
            if svg_metadata.read_source(svg) == source:
                channels.add(Channel.METADATA)
            else:
                logging.warning("Metadata channel cannot carry this source unchanged; skipped")
                svg = None

        pdf = self._encode_pdf(vector, source, channels)

        if not channels:
            raise EncodeError("no channel could be embedded for the rendered source")
        missing = set(Channel) - channels
        if missing:
            logging.warning(
                "Artifact embedded with partial coverage, missing: %s",
                ", ".join(sorted(channel.value for channel in missing)),
            )
        return Artifact(
            source=source,
            vector_image=vector,
            svg=svg,
            pdf=pdf,
            channels=frozenset(channels),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _encode_pdf(self, vector: bytes, source: str, channels: set):
        try:
            doc = pdf_channels.svg_to_pdf(vector)
        except ContainerParseError as exc:
            logging.warning("PDF channels not embedded: %s", exc)
            return None

        with doc:
            writers = [
                (Channel.ANNOTATION, pdf_channels.write_annotation, pdf_channels.read_annotation),
                (
                    Channel.DOCUMENT_PROPERTY,
                    pdf_channels.write_document_properties,
                    pdf_channels.read_document_properties,
                ),
            ]
            if HIDDEN_END_MARKER in source:
                logging.warning(
                    "Source contains %r; hidden text channel skipped", HIDDEN_END_MARKER
                )
            else:
                writers.append(
                    (Channel.HIDDEN_TEXT, pdf_channels.write_hidden_text, pdf_channels.read_hidden_text)
                )

            written = False
            for channel, writer, reader in writers:
                try:
                    if not self._reads_back(doc, writer, reader, source):
                        logging.warning(
                            "%s channel cannot carry this source unchanged; skipped",
                            channel.value,
                        )
                        continue
                    writer(doc, source)
                except Exception as exc:  # MuPDF raises its own error types
                    logging.warning("%s channel not embedded: %s", channel.value, exc)
                    continue
                channels.add(channel)
                written = True

            if not written:
                return None
            return doc.tobytes()

    @staticmethod
    def _reads_back(doc, writer, reader, source: str) -> bool:
        """Write one channel into a scratch copy of *doc* and decode it again."""

        with pdf_channels.open_pdf(doc.tobytes()) as trial:
            writer(trial, source)
            with pdf_channels.open_pdf(trial.tobytes()) as written:
                return reader(written) == source
