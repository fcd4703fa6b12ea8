from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator


_BLANK_RUN_PATTERN = re.compile(r'\n{3,}')
_NUMBERED_HEADING_PATTERN = re.compile(r'^\d+[.)]\s+\S+')


def normalize_text(value: Any) -> str:
    if not isinstance(value, str):
        return ''
    text = value.replace('\r\n', '\n').replace('\r', '\n')
    text = text.replace('\f', '')
    text = text.replace('\u2028', '\n').replace('\u2029', '\n')
    text = _BLANK_RUN_PATTERN.sub('\n\n', text)
    return text.strip()


def split_paragraphs(text: str) -> list[str]:
    normalized = normalize_text(text)
    if not normalized:
        return []
    blocks = [part.strip() for part in normalized.split('\n\n')]
    return [block for block in blocks if block]


def is_numbered_heading_line(line: str) -> bool:
    stripped = str(line or '').strip()
    if not stripped:
        return False
    return bool(_NUMBERED_HEADING_PATTERN.match(stripped))


@dataclass(frozen=True)
class BodyLine:
    text: str
    heading: bool = False
    # paragraph separator: advance the cursor without drawing
    paragraph_break: bool = False

    @property
    def blank(self) -> bool:
        return not self.paragraph_break and not self.text.strip()


def iter_body_lines(text: str) -> Iterator[BodyLine]:
    paragraphs = split_paragraphs(text)
    for index, paragraph in enumerate(paragraphs):
        for line in paragraph.split('\n'):
            yield BodyLine(text=line, heading=is_numbered_heading_line(line))
        if index != len(paragraphs) - 1:
            yield BodyLine(text='', paragraph_break=True)
