"""Typeset math sources to SVG with matplotlib's mathtext engine."""

from __future__ import annotations

import io
import logging

from matplotlib import rc_context
from matplotlib.figure import Figure

from config.constants import DEFAULT_DISPLAY_FONT_SIZE, DEFAULT_INLINE_FONT_SIZE
from texclip_core.errors import RenderError


class MathRenderer:
    """Render a LaTeX math source into standalone SVG markup."""

    def __init__(
        self,
        display_font_size: float = DEFAULT_DISPLAY_FONT_SIZE,
        inline_font_size: float = DEFAULT_INLINE_FONT_SIZE,
    ) -> None:
        self.display_font_size = display_font_size
        self.inline_font_size = inline_font_size

    def render(self, source: str, display_mode: bool = True) -> str:
        source = source.strip()
        if not source:
            raise RenderError("nothing to render")

        font_size = self.display_font_size if display_mode else self.inline_font_size
        figure = Figure()
        figure.text(0, 0, f"${source}$", fontsize=font_size)

        buffer = io.StringIO()
        # Glyphs as paths keep the SVG independent of installed fonts.
        with rc_context({"svg.fonttype": "path"}):
            try:
                figure.savefig(
                    buffer,
                    format="svg",
                    bbox_inches="tight",
                    pad_inches=0.02,
                    transparent=True,
                )
            except ValueError as exc:
                raise RenderError(f"could not typeset {source!r}: {exc}") from exc

        logging.debug("Rendered %d characters of source to SVG", len(source))
        return buffer.getvalue()
