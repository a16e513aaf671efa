"""Rebuild a rich document with recovered sources in place of artifacts."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from config.constants import PLACEHOLDER_IDENTITY

from .extractor import ChannelExtractor
from .model import (
    AttachmentRun,
    Decision,
    DecisionAction,
    Document,
    Reconstruction,
    TextRun,
)
from .repair import AttachmentRepair
from .sniffing import is_raster_identity


def is_foreign_image(identity: Optional[str]) -> bool:
    return is_raster_identity(identity)


def is_likely_artifact(identity: Optional[str]) -> bool:
    """Return ``True`` for identities an editor gives to stripped artifacts."""

    if not identity or identity == PLACEHOLDER_IDENTITY:
        return True
    return "." not in identity


class DocumentWalker:
    """Replace recoverable attachments with their source text.

    Each attachment is first handed to the :class:`ChannelExtractor`.  When
    that fails and a recovered sequence from the whole-document PDF is
    available, attachments that look like stripped artifacts consume its
    entries left to right.  Everything else is preserved in place.
    """

    def __init__(
        self,
        extractor: Optional[ChannelExtractor] = None,
        repair: Optional[AttachmentRepair] = None,
    ) -> None:
        self.extractor = extractor or ChannelExtractor()
        self.repair = repair or AttachmentRepair()

    def reconstruct(
        self, document: Document, recovered: Optional[Sequence[str]] = None
    ) -> Reconstruction:
        runs: List = []
        decisions: List[Decision] = []
        cursor = 0
        changed = False

        for index, run in enumerate(document):
            if isinstance(run, TextRun):
                runs.append(run)
                continue

            attachment = run.attachment
            identity = attachment.identity
            source = self.extractor.extract(attachment)
            if source is not None:
                runs.append(TextRun(source))
                decisions.append(Decision(index, identity, DecisionAction.EXTRACTED, source))
                changed = True
                continue

            if recovered and cursor < len(recovered):
                if is_foreign_image(identity):
                    action = DecisionAction.FOREIGN
                elif is_likely_artifact(identity):
                    source = recovered[cursor]
                    cursor += 1
                    runs.append(TextRun(source))
                    decisions.append(
                        Decision(index, identity, DecisionAction.RECONCILED, source)
                    )
                    changed = True
                    continue
                else:
                    action = DecisionAction.FOREIGN
            else:
                action = (
                    DecisionAction.FOREIGN
                    if is_foreign_image(identity)
                    else DecisionAction.UNRESOLVED
                )

            runs.append(
                AttachmentRun(self.repair.repair(attachment), template=run.markup or run.template)
            )
            decisions.append(Decision(index, identity, action))

        for decision in decisions:
            logging.debug(
                "Attachment %d (%r): %s", decision.index, decision.identity, decision.action.value
            )

        if recovered and cursor < len(recovered):
            logging.debug(
                "%d recovered source(s) left unused", len(recovered) - cursor
            )

        if not changed:
            return Reconstruction(document, False, tuple(decisions))
        return Reconstruction(tuple(runs), True, tuple(decisions))
