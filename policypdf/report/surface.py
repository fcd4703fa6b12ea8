from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Iterator, Literal

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from . import theme


logger = logging.getLogger(__name__)

Align = Literal['left', 'center', 'right']


@dataclass(frozen=True)
class TextStyle:
    font: str = theme.FONT_BODY
    size: float = theme.BODY_SIZE
    color: str = theme.INK
    alpha: float = 1.0


DEFAULT_TEXT_STYLE = TextStyle()


class DrawingSurface:
    """Top-down drawing surface over a reportlab canvas.

    Coordinates follow the page the way a reader sees it: ``y`` grows
    downwards from the top edge and text is placed by the top of its first
    line. Pages stay buffered until :meth:`flush`, so a finished page can
    be revisited with :meth:`switch_to_page` (page footers need the final
    page count).

    The reportlab graphics state is reset on every new page and is only
    partly covered by ``saveState``/``restoreState``; the surface keeps its
    own text style and applies it explicitly before drawing text.
    """

    def __init__(
        self,
        *,
        title: str = '',
        author: str = '',
        subject: str = '',
        producer: str = 'PolicySprint',
        invariant: bool = False,
        margins: theme.Margins = theme.PAGE_MARGINS,
    ):
        self._buffer = io.BytesIO()
        self._canvas = Canvas(
            self._buffer,
            pagesize=(theme.PAGE_WIDTH, theme.PAGE_HEIGHT),
            invariant=1 if invariant else 0,
        )
        self._canvas.setTitle(title)
        self._canvas.setAuthor(author)
        self._canvas.setSubject(subject)
        self._canvas.setCreator(producer)
        self._canvas.setProducer(producer)

        self.width = float(theme.PAGE_WIDTH)
        self.height = float(theme.PAGE_HEIGHT)
        self.margins = margins
        self.x = float(margins.left)
        self.y = float(margins.top)

        self._style = DEFAULT_TEXT_STYLE
        self._page_states: list[dict[str, Any]] = []
        self._page_index = -1
        self._flushed = False

    # ------------------------------------------------------------------ #
    # Geometry
    # ------------------------------------------------------------------ #

    @property
    def left(self) -> float:
        return float(self.margins.left)

    @property
    def right(self) -> float:
        return self.width - self.margins.right

    @property
    def content_width(self) -> float:
        return self.right - self.left

    @property
    def content_top(self) -> float:
        panel = theme.CONTENT_PANEL
        return panel.y_top + panel.content_top_inset

    @property
    def content_bottom(self) -> float:
        panel = theme.CONTENT_PANEL
        return self.height - self.margins.bottom - panel.bottom_pad - panel.content_bottom_inset

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def move_down(self, lines: float = 1.0) -> None:
        self.y += lines * self._style.size * theme.LINE_HEIGHT_FACTOR

    # ------------------------------------------------------------------ #
    # Page lifecycle
    # ------------------------------------------------------------------ #

    @property
    def page_count(self) -> int:
        return len(self._page_states)

    @property
    def current_page_index(self) -> int:
        return self._page_index

    def add_page(self) -> int:
        self._ensure_open()
        # Buffering follows reportlab's NumberedCanvas recipe: per-page
        # Canvas.__dict__ snapshots replayed through showPage() in flush().
        # It relies on the private Canvas._startPage; recheck on reportlab upgrades.
        if self._page_index >= 0:
            # park the open page and let the canvas start a fresh one
            self._page_states[self._page_index] = dict(self._canvas.__dict__)
            self._canvas._startPage()
        self._page_states.append(dict(self._canvas.__dict__))
        self._page_index = len(self._page_states) - 1
        self.move_to(self.margins.left, self.margins.top)
        self.reset_text_style()
        return self._page_index

    def switch_to_page(self, index: int) -> None:
        self._ensure_open()
        if index < 0 or index >= len(self._page_states):
            raise IndexError(f'page index out of range: {index} (pages: {len(self._page_states)})')
        if index == self._page_index:
            return
        self._page_states[self._page_index] = dict(self._canvas.__dict__)
        self._canvas.__dict__.update(self._page_states[index])
        self._page_index = index
        self.reset_text_style()

    def flush(self) -> bytes:
        self._ensure_open()
        if self._page_index >= 0:
            self._page_states[self._page_index] = dict(self._canvas.__dict__)
        for state in self._page_states:
            self._canvas.__dict__.update(state)
            self._canvas.showPage()
        self._canvas.save()
        self._flushed = True
        logger.debug('Flushed %s buffered PDF pages.', len(self._page_states))
        return self._buffer.getvalue()

    def _ensure_open(self) -> None:
        if self._flushed:
            raise RuntimeError('drawing surface already flushed')

    # ------------------------------------------------------------------ #
    # Text style and measurement
    # ------------------------------------------------------------------ #

    @property
    def text_style(self) -> TextStyle:
        return self._style

    def set_text_style(
        self,
        *,
        font: str | None = None,
        size: float | None = None,
        color: str | None = None,
        alpha: float | None = None,
    ) -> None:
        self._style = replace(
            self._style,
            font=font or self._style.font,
            size=size if size is not None else self._style.size,
            color=color or self._style.color,
            alpha=alpha if alpha is not None else self._style.alpha,
        )
        self._apply_text_style()

    def reset_text_style(self) -> None:
        self._style = DEFAULT_TEXT_STYLE
        self._apply_text_style()

    def _apply_text_style(self) -> None:
        self._canvas.setFont(self._style.font, self._style.size)
        self._canvas.setFillColor(colors.HexColor(self._style.color), alpha=self._style.alpha)

    @contextmanager
    def isolated(self, *, restore_cursor: bool = True) -> Iterator[None]:
        """Scope a drawing digression; the default text style is restored on exit."""
        saved_x, saved_y = self.x, self.y
        self._canvas.saveState()
        try:
            yield
        finally:
            self._canvas.restoreState()
            if restore_cursor:
                self.move_to(saved_x, saved_y)
            self.reset_text_style()

    def line_height(self, line_gap: float = 0.0) -> float:
        return self._style.size * theme.LINE_HEIGHT_FACTOR + line_gap

    def wrap(self, value: str, width: float) -> list[str]:
        lines: list[str] = []
        for raw_line in str(value or '').split('\n'):
            wrapped = simpleSplit(raw_line, self._style.font, self._style.size, width)
            lines.extend(wrapped or [''])
        return lines or ['']

    def measure(self, value: str, *, width: float | None = None, line_gap: float = 0.0) -> float:
        line_width = self.content_width if width is None else width
        return len(self.wrap(value, line_width)) * self.line_height(line_gap)

    def string_width(self, value: str) -> float:
        return pdfmetrics.stringWidth(str(value or ''), self._style.font, self._style.size)

    # ------------------------------------------------------------------ #
    # Drawing primitives
    # ------------------------------------------------------------------ #

    def text(
        self,
        value: str,
        x: float | None = None,
        y: float | None = None,
        *,
        width: float | None = None,
        line_gap: float = 0.0,
        align: Align = 'left',
        char_space: float = 0.0,
    ) -> float:
        left = self.x if x is None else float(x)
        top = self.y if y is None else float(y)
        box_width = self.content_width if width is None else float(width)

        lines = self.wrap(value, box_width)
        step = self.line_height(line_gap)
        ascent = pdfmetrics.getAscent(self._style.font, self._style.size)
        self._apply_text_style()

        for index, line in enumerate(lines):
            baseline = self.height - (top + index * step) - ascent
            if align == 'right':
                self._canvas.drawRightString(left + box_width, baseline, line, charSpace=char_space)
            elif align == 'center':
                self._canvas.drawCentredString(left + box_width / 2, baseline, line, charSpace=char_space)
            else:
                self._canvas.drawString(left, baseline, line, charSpace=char_space)

        height = len(lines) * step
        self.move_to(left, top + height)
        return height

    def fill_rect(self, x: float, y: float, width: float, height: float, *, color: str, alpha: float = 1.0) -> None:
        self._canvas.saveState()
        self._canvas.setFillColor(colors.HexColor(color), alpha=alpha)
        self._canvas.rect(x, self.height - y - height, width, height, stroke=0, fill=1)
        self._canvas.restoreState()

    def round_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        radius: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        alpha: float = 1.0,
        line_width: float = 1.0,
    ) -> None:
        self._canvas.saveState()
        if fill:
            self._canvas.setFillColor(colors.HexColor(fill), alpha=alpha)
        if stroke:
            self._canvas.setStrokeColor(colors.HexColor(stroke))
            self._canvas.setLineWidth(line_width)
        self._canvas.roundRect(
            x,
            self.height - y - height,
            width,
            height,
            radius,
            stroke=1 if stroke else 0,
            fill=1 if fill else 0,
        )
        self._canvas.restoreState()

    def hline(
        self,
        x1: float,
        x2: float,
        y: float,
        *,
        color: str,
        alpha: float = 1.0,
        line_width: float = 1.0,
    ) -> None:
        self._canvas.saveState()
        self._canvas.setStrokeColor(colors.HexColor(color), alpha=alpha)
        self._canvas.setLineWidth(line_width)
        self._canvas.line(x1, self.height - y, x2, self.height - y)
        self._canvas.restoreState()

    def draw_image(self, data: bytes, x: float, y: float, *, fit: tuple[float, float]) -> None:
        box_width, box_height = fit
        self._canvas.drawImage(
            ImageReader(io.BytesIO(data)),
            x,
            self.height - y - box_height,
            width=box_width,
            height=box_height,
            preserveAspectRatio=True,
            anchor='nw',
            mask='auto',
        )

    @contextmanager
    def rotated(self, angle: float, *, origin: tuple[float, float]) -> Iterator[None]:
        """Rotate counter-clockwise (as seen on the page) around a top-down origin."""
        origin_x, origin_y = origin
        pdf_y = self.height - origin_y
        self._canvas.saveState()
        self._canvas.translate(origin_x, pdf_y)
        self._canvas.rotate(angle)
        self._canvas.translate(-origin_x, -pdf_y)
        try:
            yield
        finally:
            self._canvas.restoreState()
