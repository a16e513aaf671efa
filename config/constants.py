"""Application wide constants."""

import sys

APP_NAME = "TeXClipper"
ORG_NAME = "TeXClipper"
BRAND_NAME = "TeXClipper"

IS_MACOS = sys.platform == "darwin"

# Channel markers
PREFIX_MARKER = "TeXClipper:"
HIDDEN_START_MARKER = "TeXClipperStart:"
HIDDEN_END_MARKER = ":TeXClipperEnd"
METADATA_KEY = "latex"
XMP_BAG_TAGS = ("TeXClipper", "LaTeX")

# Clipboard flavors
FLAVOR_CUSTOM_SVG = "com.TeXClipper.svg"
FLAVOR_SVG = "image/svg+xml"
FLAVOR_HTML = "text/html"
FLAVOR_TEXT = "text/plain"
FLAVOR_PDF = "application/pdf"
FLAVOR_RTF = "text/rtf"

# Attachment identities
PLACEHOLDER_IDENTITY = "unknown"
RASTER_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif")

# Timing defaults (seconds)
DEFAULT_POLL_INTERVAL = 0.05
DEFAULT_CHANGE_TIMEOUT = 1.0
DEFAULT_PASTE_SETTLE = 0.2

# Renderer defaults (points)
DEFAULT_DISPLAY_FONT_SIZE = 24
DEFAULT_INLINE_FONT_SIZE = 16

# Default shortcuts in pynput HotKey.parse syntax
_MOD = "<cmd>" if IS_MACOS else "<ctrl>"
DEFAULT_RENDER_SHORTCUT = f"{_MOD}+<alt>+k"
DEFAULT_RENDER_INLINE_SHORTCUT = f"{_MOD}+<alt>+i"
DEFAULT_REVERT_SHORTCUT = f"{_MOD}+<alt>+<shift>+k"
