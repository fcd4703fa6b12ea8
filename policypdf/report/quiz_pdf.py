from __future__ import annotations

import asyncio
import logging
from datetime import date
from functools import partial
from typing import Any, Mapping

from ..config import Settings, get_settings
from ..types import (
    MissingBodyTextError,
    ParsedQuestion,
    QuizPdfPayload,
    RenderedDocument,
    RenderMode,
    suggest_filename,
)
from . import theme
from .cover import draw_quiz_cover, load_brand_logo
from .pagination import PageLimits, PaginatedDocument, Section, SectionWriter
from .quiz_parser import parse_quiz_text
from .surface import DrawingSurface
from .text import normalize_text


logger = logging.getLogger(__name__)

DEFAULT_QUIZ_TITLE = 'Staff Quiz'
DEFAULT_BUSINESS_NAME = 'Your business'
OPTIONS_MISSING_NOTE = '(Options not detected in AI output. See raw quiz text.)'
ANSWER_LINE = 'Your answer: ________'
OPTION_INDENT = 12


def _coerce_payload(payload: QuizPdfPayload | Mapping[str, Any]) -> QuizPdfPayload:
    if isinstance(payload, QuizPdfPayload):
        return payload
    return QuizPdfPayload.model_validate(dict(payload or {}))


def _text_or_default(value: str | None, default: str) -> str:
    text = str(value or '').strip()
    return text or default


def answer_key_line(question: ParsedQuestion) -> str:
    if question.correct:
        return f'{question.number}. {question.correct}'
    return f'{question.number}. (not provided)'


def _write_questions(writer: SectionWriter, questions: list[ParsedQuestion]) -> None:
    for question in questions:
        writer.write_text(
            f'{question.number}. {question.prompt}',
            font=theme.FONT_BOLD,
            size=theme.QUESTION_SIZE,
            reserve=10,
        )

        if question.options:
            writer.gap(0.35)
            for option in question.options:
                writer.write_text(f'{option.label}. {option.text}', indent=OPTION_INDENT, reserve=4)
        else:
            writer.gap(0.2)
            writer.write_text(OPTIONS_MISSING_NOTE, font=theme.FONT_ITALIC, size=theme.NOTICE_SIZE)

        writer.gap(0.4)
        writer.write_text(ANSWER_LINE, size=theme.NOTICE_SIZE, color=theme.MUTED, line_gap=0)
        writer.gap(0.8)


def _write_answer_key(writer: SectionWriter, questions: list[ParsedQuestion]) -> None:
    for question in questions:
        writer.write_text(answer_key_line(question), size=theme.ANSWER_KEY_SIZE, reserve=4)


def render_quiz_pdf(
    payload: QuizPdfPayload | Mapping[str, Any],
    mode: RenderMode | str = RenderMode.download,
    *,
    include_answer_key: bool | None = None,
    limits: PageLimits | None = None,
    settings: Settings | None = None,
    generated_on: date | None = None,
) -> RenderedDocument:
    """Render a staff quiz: cover, the parsed questions and an optional answer key.

    Quiz sections break pages like policy sections but are never truncated.
    """
    data = _coerce_payload(payload)
    render_mode = RenderMode.parse(mode)

    quiz_text = normalize_text(data.quiz_text)
    if not quiz_text:
        raise MissingBodyTextError('quizText')

    settings = settings or get_settings()
    limits = limits or settings.page_limits()
    with_answer_key = data.include_answer_key if include_answer_key is None else include_answer_key

    title = _text_or_default(data.title, DEFAULT_QUIZ_TITLE)
    business_name = _text_or_default(data.business_name, DEFAULT_BUSINESS_NAME)
    policy_title = str(data.policy_title or '').strip() or None

    questions = parse_quiz_text(quiz_text)

    surface = DrawingSurface(
        title=title,
        author=business_name,
        subject=f'{title} for {business_name}',
        producer=settings.app_name,
        invariant=settings.pdf_invariant,
    )
    document = PaginatedDocument(
        surface,
        mode=render_mode,
        limits=limits,
        watermark=theme.QUIZ_WATERMARK,
    )

    logo = load_brand_logo(settings.brand_logo_paths())
    document.render_cover(
        partial(
            draw_quiz_cover,
            title=title,
            business_name=business_name,
            policy_title=policy_title,
            logo=logo,
            brand_name=settings.brand_name,
            generated_on=generated_on,
        )
    )

    sections = [
        Section('Quiz Questions', partial(_write_questions, questions=questions), capped=False),
    ]
    if with_answer_key:
        sections.append(Section('Answer Key', partial(_write_answer_key, questions=questions), capped=False))
    document.render_sections(sections)
    content = document.finish()

    logger.info(
        'Quiz PDF rendered for %r: %s questions, %s pages, mode=%s.',
        business_name,
        len(questions),
        document.state.total_pages,
        render_mode.value,
    )
    return RenderedDocument(
        content=content,
        page_count=document.state.total_pages,
        mode=render_mode,
        filename=suggest_filename(data.business_name, 'quiz'),
        sections=list(document.sections),
    )


async def render_quiz_pdf_async(
    payload: QuizPdfPayload | Mapping[str, Any],
    mode: RenderMode | str = RenderMode.download,
    **kwargs: Any,
) -> RenderedDocument:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(render_quiz_pdf, payload, mode, **kwargs))
