"""Turn the clipboard contents of a selection back into source text."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from config.constants import FLAVOR_HTML, FLAVOR_PDF, FLAVOR_RTF, FLAVOR_TEXT

from . import pdf_channels, rich_document
from .extractor import ChannelExtractor
from .walker import DocumentWalker


def _encode_text(text: str) -> bytes:
    # Undecodable HTML bytes come back as they were read.
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", errors="surrogatepass")


class ClipboardDecoder:
    """Compute the flavors that should replace a copied selection.

    A rich HTML selection is reconstructed run by run, using the hidden text
    of the accompanying PDF flavor as the recovered sequence.  When there is
    no rich flavor, or reconstruction changed nothing, the single-flavor
    strategies of :class:`ChannelExtractor` are tried.
    """

    def __init__(
        self,
        walker: Optional[DocumentWalker] = None,
        extractor: Optional[ChannelExtractor] = None,
    ) -> None:
        self.extractor = extractor or ChannelExtractor()
        self.walker = walker or DocumentWalker(self.extractor)

    def decode(self, flavors: Mapping[str, bytes]) -> Optional[Dict[str, bytes]]:
        """Return the replacement flavors, or ``None`` if nothing was recovered."""

        markup = flavors.get(FLAVOR_HTML)
        if markup:
            replacement = self._decode_rich(markup, flavors.get(FLAVOR_PDF))
            if replacement is not None:
                return replacement

        source = self.extractor.extract_from_flavors(flavors)
        if source is not None:
            return {FLAVOR_TEXT: _encode_text(source)}

        logging.info("No embedded source found in the selection")
        return None

    def _decode_rich(self, markup: bytes, pdf: Optional[bytes]):
        recovered = pdf_channels.mine_recovered_sequence(pdf) if pdf else None
        if recovered:
            logging.debug("Recovered sequence holds %d source(s)", len(recovered))

        document = rich_document.parse_html(markup.decode("utf-8", errors="surrogateescape"))
        result = self.walker.reconstruct(document, recovered)
        if not result.changed:
            return None

        return {
            FLAVOR_HTML: _encode_text(rich_document.render_html(result.document)),
            FLAVOR_RTF: rich_document.render_rtf(result.document),
            FLAVOR_TEXT: _encode_text(rich_document.document_text(result.document)),
        }
