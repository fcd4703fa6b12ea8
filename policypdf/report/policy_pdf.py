from __future__ import annotations

import asyncio
import logging
from datetime import date
from functools import partial
from typing import Any, Mapping

from ..config import Settings, get_settings
from ..types import (
    MissingBodyTextError,
    PolicyPdfPayload,
    RenderedDocument,
    RenderMode,
    suggest_filename,
)
from . import theme
from .cover import draw_policy_cover, load_brand_logo
from .pagination import PageLimits, PaginatedDocument, Section
from .surface import DrawingSurface
from .text import normalize_text


logger = logging.getLogger(__name__)

DEFAULT_POLICY_TITLE = 'AI Use Policy'
DEFAULT_BUSINESS_NAME = 'PolicySprint AI'


def _coerce_payload(payload: PolicyPdfPayload | Mapping[str, Any]) -> PolicyPdfPayload:
    if isinstance(payload, PolicyPdfPayload):
        return payload
    return PolicyPdfPayload.model_validate(dict(payload or {}))


def _text_or_default(value: str | None, default: str) -> str:
    text = str(value or '').strip()
    return text or default


def render_policy_pdf(
    payload: PolicyPdfPayload | Mapping[str, Any],
    mode: RenderMode | str = RenderMode.download,
    *,
    limits: PageLimits | None = None,
    settings: Settings | None = None,
    generated_on: date | None = None,
) -> RenderedDocument:
    """Render a policy document: cover, then Contents, Policy and Disclaimer.

    Empty Contents and Disclaimer sections are skipped. Raises
    :class:`MissingBodyTextError` before anything is drawn when the policy
    body is blank.
    """
    data = _coerce_payload(payload)
    render_mode = RenderMode.parse(mode)

    policy_text = normalize_text(data.policy_text)
    if not policy_text:
        raise MissingBodyTextError('policyText')

    settings = settings or get_settings()
    limits = limits or settings.page_limits()

    title = _text_or_default(data.title, DEFAULT_POLICY_TITLE)
    business_name = _text_or_default(data.business_name, DEFAULT_BUSINESS_NAME)
    country = str(data.country or '').strip()
    industry = str(data.industry or '').strip()

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
        watermark=theme.POLICY_WATERMARK,
    )

    logo = load_brand_logo(settings.brand_logo_paths())
    document.render_cover(
        partial(
            draw_policy_cover,
            title=title,
            business_name=business_name,
            country=country,
            industry=industry,
            logo=logo,
            brand_name=settings.brand_name,
            generated_on=generated_on,
        )
    )

    sections = [
        Section.text_section(heading, text)
        for heading, text in (
            ('Contents', normalize_text(data.contents_text)),
            ('Policy', policy_text),
            ('Disclaimer', normalize_text(data.disclaimer_text)),
        )
        if text
    ]
    document.render_sections(sections)
    content = document.finish()

    logger.info(
        'Policy PDF rendered for %r: %s pages, mode=%s.',
        business_name,
        document.state.total_pages,
        render_mode.value,
    )
    return RenderedDocument(
        content=content,
        page_count=document.state.total_pages,
        mode=render_mode,
        filename=suggest_filename(data.business_name, 'policy'),
        sections=list(document.sections),
    )


async def render_policy_pdf_async(
    payload: PolicyPdfPayload | Mapping[str, Any],
    mode: RenderMode | str = RenderMode.download,
    **kwargs: Any,
) -> RenderedDocument:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(render_policy_pdf, payload, mode, **kwargs))
