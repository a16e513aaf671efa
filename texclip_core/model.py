"""Value types passed between the encoder, the walker and the clipboard."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Tuple, Union

from .sniffing import ContainerKind, sniff_container


class Channel(enum.Enum):
    METADATA = "metadata"
    ANNOTATION = "annotation"
    HIDDEN_TEXT = "hidden_text"
    DOCUMENT_PROPERTY = "document_property"


@dataclass(frozen=True)
class Artifact:
    """A rendered formula with its source embedded in one or more channels."""

    source: str
    vector_image: bytes
    svg: Optional[bytes] = None
    pdf: Optional[bytes] = None
    channels: FrozenSet[Channel] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Attachment:
    identity: Optional[str]
    payload: bytes
    media_type: Optional[str] = None

    @property
    def container_kind(self) -> ContainerKind:
        return sniff_container(self.payload, self.identity)


@dataclass(frozen=True)
class TextRun:
    text: str
    markup: Optional[str] = None


@dataclass(frozen=True)
class AttachmentRun:
    attachment: Attachment
    markup: Optional[str] = None
    # Source tag whose other attributes are kept when the run is rewritten.
    template: Optional[str] = None


Run = Union[TextRun, AttachmentRun]
Document = Tuple[Run, ...]

# One clipboard item maps each flavor to its raw bytes.
ClipboardItem = Dict[str, bytes]
ClipboardSnapshot = List[ClipboardItem]


class DecisionAction(enum.Enum):
    EXTRACTED = "extracted"
    RECONCILED = "reconciled"
    FOREIGN = "foreign"
    UNRESOLVED = "unresolved"


class Decision(NamedTuple):
    index: int
    identity: Optional[str]
    action: DecisionAction
    source: Optional[str] = None


class Reconstruction(NamedTuple):
    document: Document
    changed: bool
    decisions: Tuple[Decision, ...] = ()
