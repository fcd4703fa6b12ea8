from __future__ import annotations

import logging

from . import theme
from .surface import DrawingSurface


logger = logging.getLogger(__name__)


def footer_label(page_number: int, total: int) -> str:
    return f'Page {page_number} of {total}'


def stamp_page_footers(surface: DrawingSurface) -> int:
    """Stamp "Page N of Total" on every buffered page after the cover.

    Runs once all sections are streamed, when the final page count is
    known. Leaves the surface on its last page. Returns the number of
    stamped pages.
    """
    page_count = surface.page_count
    if page_count < 2:
        return 0

    total = page_count - 1
    base_y = surface.height - surface.margins.bottom
    for index in range(1, page_count):
        surface.switch_to_page(index)
        with surface.isolated():
            surface.hline(
                surface.left,
                surface.right,
                base_y + theme.FOOTER_RULE_OFFSET,
                color=theme.INK,
                alpha=theme.RULE_OPACITY,
            )
            surface.set_text_style(font=theme.FONT_BODY, size=theme.FOOTER_SIZE, color=theme.MUTED)
            surface.text(
                footer_label(index, total),
                surface.left,
                base_y + theme.FOOTER_TEXT_OFFSET,
                width=surface.content_width,
                align='right',
            )

    surface.switch_to_page(page_count - 1)
    logger.debug('Stamped footers on %s pages.', total)
    return total
