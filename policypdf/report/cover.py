from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from . import theme
from .surface import DrawingSurface


logger = logging.getLogger(__name__)

STRIP_HEIGHT = 64
ACCENT_RULE_HEIGHT = 4
BRAND_Y = 20
LOGO_FIT = (170, 28)
TAGLINE_OFFSET = 190

HERO_NAME_MIN_SIZE = 24

POLICY_COVER_NOTE = 'Template only — not legal advice. Review with a qualified lawyer before adoption.'
QUIZ_COVER_NOTE = 'Internal training material — adapt to your organisation and keep it current.'


def _safe_file(path: Path | None) -> Path | None:
    if path is None:
        return None
    if path.exists() and path.is_file():
        return path
    return None


def load_brand_logo(candidates: Iterable[Path]) -> bytes | None:
    """Read the first brand logo that exists; ``None`` when none can be read."""
    for candidate in candidates:
        path = _safe_file(candidate)
        if path is None:
            continue
        try:
            return path.read_bytes()
        except OSError as exc:
            logger.warning('Failed to read brand logo from %s: %s', path, exc)
    logger.info('No brand logo found; using the text wordmark.')
    return None


def format_generated_date(value: date | None = None) -> str:
    return (value or date.today()).strftime('%d %B %Y')


def _meta_line(*parts: str | None) -> str:
    return ' • '.join(part.strip() for part in parts if part and part.strip())


def _draw_wordmark(surface: DrawingSurface, brand_name: str, y: float) -> None:
    surface.set_text_style(font=theme.FONT_BOLD, size=14, color=theme.WHITE)
    surface.text(brand_name, surface.left, y, width=TAGLINE_OFFSET - 10)


def draw_brand_mark(surface: DrawingSurface, logo: bytes | None, *, brand_name: str) -> None:
    if logo is not None:
        try:
            surface.draw_image(logo, surface.left, BRAND_Y, fit=LOGO_FIT)
            return
        except Exception as exc:
            logger.warning('Failed to draw brand logo on cover: %s', exc)
    _draw_wordmark(surface, brand_name, BRAND_Y + 2)


def _draw_header_strip(surface: DrawingSurface, logo: bytes | None, *, brand_name: str, tagline: str) -> None:
    surface.fill_rect(0, 0, surface.width, surface.height, color=theme.WHITE)
    surface.fill_rect(0, 0, surface.width, STRIP_HEIGHT, color=theme.INK)
    surface.fill_rect(0, STRIP_HEIGHT, surface.width, ACCENT_RULE_HEIGHT, color=theme.ACCENT)

    draw_brand_mark(surface, logo, brand_name=brand_name)

    surface.set_text_style(font=theme.FONT_BODY, size=9, color=theme.STRIP_TAGLINE)
    surface.text(
        tagline,
        surface.left + TAGLINE_OFFSET,
        BRAND_Y + 7,
        width=surface.content_width - TAGLINE_OFFSET,
    )


def _draw_hero_name(surface: DrawingSurface, name: str, y: float, size: float) -> None:
    # shrink long names before letting them wrap
    surface.set_text_style(font=theme.FONT_BOLD, size=size, color=theme.INK)
    while size > HERO_NAME_MIN_SIZE and surface.string_width(name) > surface.content_width:
        size -= 2
        surface.set_text_style(size=size)
    surface.text(name, surface.left, y, line_gap=2)


def _draw_cover_note(surface: DrawingSurface, note: str) -> None:
    y = surface.height - surface.margins.bottom - theme.FOOTER_SIZE - 8
    surface.set_text_style(font=theme.FONT_BODY, size=theme.FOOTER_SIZE, color=theme.MUTED)
    surface.text(note, surface.left, y, line_gap=2)


def draw_policy_cover(
    surface: DrawingSurface,
    *,
    title: str,
    business_name: str,
    country: str = '',
    industry: str = '',
    logo: bytes | None = None,
    brand_name: str = 'PolicySprint',
    generated_on: date | None = None,
) -> None:
    left = surface.left
    width = surface.content_width

    _draw_header_strip(surface, logo, brand_name=brand_name, tagline='AI policy compliance')

    hero_y = 128
    surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
    surface.text('Prepared for', left, hero_y - 18)
    _draw_hero_name(surface, business_name or '—', hero_y, 40)

    surface.set_text_style(font=theme.FONT_BODY, size=14, color=theme.SLATE)
    surface.text(title, left, hero_y + 82)

    meta = _meta_line(industry, country)
    if meta:
        surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
        surface.text(meta, left, hero_y + 106)

    surface.hline(left, surface.right, hero_y + 138, color=theme.INK, alpha=theme.RULE_OPACITY)

    card_y = hero_y + 168
    card_height = 150
    surface.round_rect(left + 2, card_y + 3, width, card_height, 16, fill=theme.CARD_SHADOW)
    surface.round_rect(left, card_y, width, card_height, 16, fill=theme.WHITE, stroke=theme.BORDER)
    surface.fill_rect(left, card_y, 6, card_height, color=theme.ACCENT)

    surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
    surface.text('DOCUMENT', left + 20, card_y + 20, width=width - 40)
    surface.set_text_style(font=theme.FONT_BOLD, size=14, color=theme.INK)
    surface.text(f'{title} (Internal)', left + 20, card_y + 42, width=width - 40)
    if meta:
        surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.SLATE)
        surface.text(meta, left + 20, card_y + 66, width=width - 40)
    surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
    surface.text(f'Generated: {format_generated_date(generated_on)}', left + 20, card_y + 96, width=width - 40)

    _draw_cover_note(surface, POLICY_COVER_NOTE)
    surface.reset_text_style()


def draw_quiz_cover(
    surface: DrawingSurface,
    *,
    title: str,
    business_name: str,
    policy_title: str | None = None,
    logo: bytes | None = None,
    brand_name: str = 'PolicySprint',
    generated_on: date | None = None,
) -> None:
    left = surface.left

    _draw_header_strip(surface, logo, brand_name=brand_name, tagline='Staff training quiz')

    hero_y = 140
    surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
    surface.text('Prepared for', left, hero_y - 18)
    _draw_hero_name(surface, business_name or '—', hero_y, 38)

    surface.set_text_style(font=theme.FONT_BODY, size=14, color=theme.SLATE)
    surface.text(title, left, hero_y + 82)

    if policy_title:
        surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
        surface.text(policy_title, left, hero_y + 106)

    surface.set_text_style(font=theme.FONT_BODY, size=10, color=theme.MUTED)
    surface.text(f'Generated: {format_generated_date(generated_on)}', left, hero_y + 140)

    _draw_cover_note(surface, QUIZ_COVER_NOTE)
    surface.reset_text_style()
