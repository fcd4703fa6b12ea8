from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


PDF_MODE_HEADER = 'x-pdf-mode'

OptionLabel = Literal['A', 'B', 'C', 'D']


class PolicyPdfError(ValueError):
    """Caller-facing rendering error raised before any page is drawn."""


class MissingBodyTextError(PolicyPdfError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f'Missing {field_name}.')


class RenderMode(str, Enum):
    preview = 'preview'
    download = 'download'

    @classmethod
    def parse(cls, value: Any) -> 'RenderMode':
        if isinstance(value, RenderMode):
            return value
        token = str(value or '').strip().lower()
        if token == cls.preview.value:
            return cls.preview
        return cls.download

    @property
    def watermarked(self) -> bool:
        return self is RenderMode.preview


def mode_from_headers(headers: Mapping[str, str] | None) -> RenderMode:
    for key, value in (headers or {}).items():
        if str(key).strip().lower() == PDF_MODE_HEADER:
            return RenderMode.parse(value)
    return RenderMode.download


def _string_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    return None


class PolicyPdfPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    title: str | None = None
    business_name: str | None = Field(default=None, alias='businessName')
    country: str | None = None
    industry: str | None = None
    contents_text: str | None = Field(default=None, alias='contentsText')
    policy_text: str | None = Field(default=None, alias='policyText')
    disclaimer_text: str | None = Field(default=None, alias='disclaimerText')

    @field_validator('*', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _string_or_none(value)


class QuizPdfPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    title: str | None = None
    business_name: str | None = Field(default=None, alias='businessName')
    policy_title: str | None = Field(default=None, alias='policyTitle')
    quiz_text: str | None = Field(default=None, alias='quizText')
    include_answer_key: bool = Field(default=True, alias='includeAnswerKey')

    @field_validator('title', 'business_name', 'policy_title', 'quiz_text', mode='before')
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _string_or_none(value)

    @field_validator('include_answer_key', mode='before')
    @classmethod
    def _coerce_answer_key(cls, value: Any) -> bool:
        # Only an explicit false turns the answer key off.
        return value is not False


class QuizOption(BaseModel):
    label: OptionLabel
    text: str


class ParsedQuestion(BaseModel):
    number: int
    prompt: str
    options: list[QuizOption] = Field(default_factory=list)
    correct: OptionLabel | None = None


class TruncationReason(str, Enum):
    total_page_limit = 'total_page_limit'
    section_page_limit = 'section_page_limit'


@dataclass
class SectionOutcome:
    heading: str
    pages_used: int = 1
    truncated: TruncationReason | None = None


@dataclass
class RenderedDocument:
    content: bytes
    page_count: int
    mode: RenderMode
    filename: str
    sections: list[SectionOutcome] = field(default_factory=list)

    @property
    def truncated(self) -> bool:
        return any(section.truncated is not None for section in self.sections)


def suggest_filename(business_name: str | None, kind: str = 'policy') -> str:
    kind_token = re.sub(r'[^a-z0-9]+', '-', str(kind or '').lower()).strip('-') or 'document'
    slug = re.sub(r'[^a-z0-9]+', '-', str(business_name or '').lower()).strip('-')
    if not slug:
        return f'{kind_token}.pdf'
    return f'{slug[:60].rstrip("-")}-{kind_token}.pdf'
