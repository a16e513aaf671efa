"""Reversible embedding of math sources into rendered clipboard artifacts."""

from .decoder import ClipboardDecoder
from .encoder import ArtifactEncoder
from .errors import (
    ClipboardError,
    ContainerParseError,
    EncodeError,
    RenderError,
    TeXClipperError,
)
from .extractor import ChannelExtractor
from .model import (
    Artifact,
    Attachment,
    AttachmentRun,
    Channel,
    Decision,
    DecisionAction,
    Reconstruction,
    TextRun,
)
from .repair import AttachmentRepair
from .transaction import (
    ClipboardTiming,
    ClipboardTransaction,
    ClipboardTransactionCoordinator,
    TransactionState,
    wait_for_change,
)
from .walker import DocumentWalker

__all__ = [
    "Artifact",
    "ArtifactEncoder",
    "Attachment",
    "AttachmentRepair",
    "AttachmentRun",
    "Channel",
    "ChannelExtractor",
    "ClipboardDecoder",
    "ClipboardError",
    "ClipboardTiming",
    "ClipboardTransaction",
    "ClipboardTransactionCoordinator",
    "ContainerParseError",
    "Decision",
    "DecisionAction",
    "DocumentWalker",
    "EncodeError",
    "Reconstruction",
    "RenderError",
    "TeXClipperError",
    "TextRun",
    "TransactionState",
    "wait_for_change",
]
