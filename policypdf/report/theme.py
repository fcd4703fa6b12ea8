from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4


PAGE_WIDTH, PAGE_HEIGHT = A4

# Colors
INK = '#0B1220'
ACCENT = '#10B981'
MUTED = '#64748B'
SLATE = '#334155'
BORDER = '#E2E8F0'
CARD_SHADOW = '#F1F5F9'
STRIP_TAGLINE = '#CBD5E1'
WHITE = '#FFFFFF'

# Fonts
FONT_BODY = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
FONT_ITALIC = 'Helvetica-Oblique'

# Typography scale
BODY_SIZE = 10
BODY_LINE_GAP = 2
SECTION_HEADING_SIZE = 16
CONTINUED_LABEL_SIZE = 9
CONTINUED_LABEL_CHAR_SPACE = 0.4
NOTICE_SIZE = 9
FOOTER_SIZE = 9
QUESTION_SIZE = 11
ANSWER_KEY_SIZE = 11

# Line height as a multiple of the font size, before any line gap
LINE_HEIGHT_FACTOR = 1.2
PARAGRAPH_GAP_LINES = 0.6


@dataclass(frozen=True)
class Margins:
    top: float
    bottom: float
    left: float
    right: float


PAGE_MARGINS = Margins(top=64, bottom=110, left=64, right=64)


@dataclass(frozen=True)
class ContentPanel:
    x_pad: float = 10
    y_top: float = 62
    radius: float = 16
    bottom_pad: float = 12
    opacity: float = 0.055
    content_top_inset: float = 20
    # keeps the last body line inside the panel
    content_bottom_inset: float = 6


CONTENT_PANEL = ContentPanel()


@dataclass(frozen=True)
class Watermark:
    text: str
    opacity: float = 0.08
    font_size: float = 46
    angle: float = 18


POLICY_WATERMARK = Watermark(text='PREVIEW — Upgrade to download')
QUIZ_WATERMARK = Watermark(text='PREVIEW — Quiz PDF')

# Footer rule and label sit in the bottom margin, below the content panel
FOOTER_RULE_OFFSET = 30
FOOTER_TEXT_OFFSET = 40
RULE_OPACITY = 0.12

TRUNCATION_NOTICE = 'Content truncated to keep the document readable.'
