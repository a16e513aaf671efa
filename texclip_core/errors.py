"""Exception hierarchy shared by the codec and the clipboard workflows."""


class TeXClipperError(Exception):
    """Base class for all TeXClipper failures."""


class RenderError(TeXClipperError):
    """The math source could not be typeset."""


class EncodeError(TeXClipperError):
    """No channel could be embedded into the rendered artifact."""


class ContainerParseError(TeXClipperError):
    """The payload is not a parseable SVG or PDF container."""


class ClipboardError(TeXClipperError):
    """Snapshotting, restoring or entering a clipboard transaction failed."""
