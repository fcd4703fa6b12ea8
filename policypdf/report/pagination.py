from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from ..types import RenderMode, SectionOutcome, TruncationReason
from . import theme
from .footer import stamp_page_footers
from .surface import DrawingSurface
from .text import iter_body_lines


logger = logging.getLogger(__name__)


@dataclass
class PaginationState:
    """Running page counter shared by every section of one render.

    Only :meth:`PaginatedDocument.add_page` changes ``total_pages``; the
    cover counts as a page.
    """

    total_pages: int = 0


# the cover plus at least one content page
MIN_TOTAL_PAGES = 2


@dataclass(frozen=True)
class PageLimits:
    max_total_pages: int = 18
    max_section_pages: int = 10

    def __post_init__(self) -> None:
        if self.max_total_pages < MIN_TOTAL_PAGES:
            raise ValueError(f'max_total_pages must be >= {MIN_TOTAL_PAGES}, got {self.max_total_pages}')
        if self.max_section_pages < 1:
            raise ValueError(f'max_section_pages must be >= 1, got {self.max_section_pages}')


@dataclass
class Section:
    heading: str
    write_body: Callable[['SectionWriter'], None]
    # uncapped sections still break pages but never truncate
    capped: bool = True

    @classmethod
    def text_section(cls, heading: str, text: str, *, capped: bool = True) -> 'Section':
        return cls(heading=heading, write_body=lambda writer: writer.write_body_text(text), capped=capped)


def truncation_notice(heading: str, reason: TruncationReason) -> str:
    if reason is TruncationReason.section_page_limit:
        return f'{theme.TRUNCATION_NOTICE} ({heading} exceeded the section page limit.)'
    return f'{theme.TRUNCATION_NOTICE} ({heading} exceeded the page limit.)'


class SectionTruncated(Exception):
    """Unwinds a section body once its page budget is spent."""

    def __init__(self, reason: TruncationReason):
        self.reason = reason
        super().__init__(reason.value)


class PaginatedDocument:
    """Cover page plus a stream of paginated sections on one surface."""

    def __init__(
        self,
        surface: DrawingSurface,
        *,
        mode: RenderMode = RenderMode.download,
        limits: PageLimits | None = None,
        watermark: theme.Watermark = theme.POLICY_WATERMARK,
        state: PaginationState | None = None,
    ):
        self.surface = surface
        self.mode = RenderMode.parse(mode)
        self.limits = limits or PageLimits()
        self.watermark = watermark
        self.state = state or PaginationState()
        self.sections: list[SectionOutcome] = []

    @property
    def budget_exhausted(self) -> bool:
        return self.state.total_pages >= self.limits.max_total_pages

    def add_page(self, *, content: bool = True) -> None:
        self.surface.add_page()
        self.state.total_pages += 1
        if content:
            self.draw_backdrop()
            self.surface.move_to(self.surface.left, self.surface.content_top)
            self.surface.reset_text_style()
            if self.mode.watermarked:
                self.draw_watermark()

    def render_cover(self, draw: Callable[[DrawingSurface], None]) -> None:
        self.add_page(content=False)
        with self.surface.isolated():
            draw(self.surface)
        if self.mode.watermarked:
            self.draw_watermark()

    def draw_backdrop(self) -> None:
        surface = self.surface
        panel = theme.CONTENT_PANEL
        panel_height = surface.height - panel.y_top - surface.margins.bottom - panel.bottom_pad
        surface.round_rect(
            surface.left - panel.x_pad,
            panel.y_top,
            surface.content_width + panel.x_pad * 2,
            panel_height,
            panel.radius,
            fill=theme.INK,
            alpha=panel.opacity,
        )

    def draw_watermark(self) -> None:
        surface = self.surface
        mark = self.watermark
        center = (surface.width / 2, surface.height / 2)
        with surface.isolated():
            with surface.rotated(mark.angle, origin=center):
                surface.set_text_style(font=theme.FONT_BOLD, size=mark.font_size, color=theme.INK, alpha=mark.opacity)
                surface.text(mark.text, 0, center[1] - 30, width=surface.width, align='center')

    def draw_section_header(self, heading: str, *, continued: bool = False) -> None:
        surface = self.surface
        left = surface.left
        surface.move_to(left, surface.content_top)

        if not continued:
            y = surface.y
            surface.fill_rect(left, y + 2, 6, 18, color=theme.ACCENT)
            surface.set_text_style(font=theme.FONT_BOLD, size=theme.SECTION_HEADING_SIZE, color=theme.INK)
            surface.text(heading, left + 16, y, width=surface.content_width - 16)
            surface.move_to(left, y + 30)
        else:
            y = surface.y - 2
            surface.set_text_style(font=theme.FONT_BOLD, size=theme.CONTINUED_LABEL_SIZE, color=theme.MUTED)
            surface.text(heading.upper(), left, y, char_space=theme.CONTINUED_LABEL_CHAR_SPACE)
            surface.hline(left, surface.right, y + 14, color=theme.INK, alpha=theme.RULE_OPACITY)
            surface.move_to(left, y + 22)

        surface.reset_text_style()

    def render_section(self, section: Section) -> SectionOutcome | None:
        if section.capped and self.budget_exhausted:
            logger.info('Skipping section %r: page budget of %s already used.', section.heading, self.limits.max_total_pages)
            return None

        self.add_page()
        self.draw_section_header(section.heading)
        writer = SectionWriter(self, section)
        try:
            section.write_body(writer)
        except SectionTruncated as exc:
            writer.outcome.truncated = exc.reason
        self.surface.reset_text_style()

        self.sections.append(writer.outcome)
        return writer.outcome

    def render_sections(self, sections: Iterable[Section]) -> list[SectionOutcome]:
        outcomes = []
        for section in sections:
            outcome = self.render_section(section)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes

    def finish(self) -> bytes:
        stamp_page_footers(self.surface)
        content = self.surface.flush()
        logger.info(
            'Rendered %s pages (%s sections, truncated: %s).',
            self.state.total_pages,
            len(self.sections),
            [outcome.heading for outcome in self.sections if outcome.truncated is not None] or 'none',
        )
        return content


@dataclass
class SectionWriter:
    """Streams one section's body, breaking pages and enforcing the caps."""

    document: PaginatedDocument
    section: Section
    outcome: SectionOutcome = field(init=False)

    def __post_init__(self) -> None:
        self.outcome = SectionOutcome(heading=self.section.heading)

    @property
    def surface(self) -> DrawingSurface:
        return self.document.surface

    def ensure_space(self, height: float) -> None:
        if self.surface.y + height > self.surface.content_bottom:
            self._continue_on_new_page()

    def _continue_on_new_page(self) -> None:
        document = self.document
        document.add_page()
        self.outcome.pages_used += 1

        if self.section.capped:
            if document.budget_exhausted:
                self._truncate(TruncationReason.total_page_limit)
            if self.outcome.pages_used > document.limits.max_section_pages:
                self._truncate(TruncationReason.section_page_limit)

        document.draw_section_header(self.section.heading, continued=True)

    def _truncate(self, reason: TruncationReason) -> None:
        surface = self.surface
        surface.move_down(theme.PARAGRAPH_GAP_LINES)
        surface.set_text_style(font=theme.FONT_ITALIC, size=theme.NOTICE_SIZE, color=theme.MUTED)
        surface.text(truncation_notice(self.section.heading, reason), surface.left, surface.y, line_gap=2)
        surface.reset_text_style()
        logger.info(
            'Section %r truncated after %s pages (%s).',
            self.section.heading,
            self.outcome.pages_used,
            reason.value,
        )
        raise SectionTruncated(reason)

    def gap(self, lines: float = theme.PARAGRAPH_GAP_LINES) -> None:
        self.surface.move_down(lines)

    def write_text(
        self,
        value: str,
        *,
        font: str = theme.FONT_BODY,
        size: float = theme.BODY_SIZE,
        color: str = theme.INK,
        indent: float = 0.0,
        line_gap: float = theme.BODY_LINE_GAP,
        reserve: float = 0.0,
    ) -> None:
        surface = self.surface
        width = surface.content_width - indent
        surface.set_text_style(font=font, size=size, color=color)
        # one visual line at a time so a long line still breaks pages and hits the caps
        for index, line in enumerate(surface.wrap(value, width)):
            self.ensure_space(surface.line_height(line_gap) + (reserve if index == 0 else 0.0))
            # a page break resets the style
            surface.set_text_style(font=font, size=size, color=color)
            surface.text(line, surface.left + indent, surface.y, width=width, line_gap=line_gap)
        surface.reset_text_style()

    def write_body_text(self, text: str) -> None:
        surface = self.surface
        for line in iter_body_lines(text):
            if line.paragraph_break:
                self.gap()
                continue
            if line.blank:
                self.ensure_space(surface.measure(' ', line_gap=theme.BODY_LINE_GAP))
                self.gap()
                continue
            self.write_text(line.text, font=theme.FONT_BOLD if line.heading else theme.FONT_BODY)
