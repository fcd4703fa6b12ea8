import pytest

from conftest import numbered_lines, page_streams, page_texts, pdf_reader
from policypdf.report.pagination import (
    PageLimits,
    PaginatedDocument,
    PaginationState,
    Section,
    truncation_notice,
)
from policypdf.report.surface import DrawingSurface
from policypdf.report.theme import TRUNCATION_NOTICE
from policypdf.types import RenderMode, TruncationReason


def _document(limits: PageLimits, mode: RenderMode = RenderMode.download) -> PaginatedDocument:
    document = PaginatedDocument(DrawingSurface(invariant=True), mode=mode, limits=limits)
    document.render_cover(lambda surface: surface.text('Cover page'))
    return document


class _CountingState(PaginationState):
    def __init__(self):
        super().__init__()
        self.history = []

    def __setattr__(self, name, value):
        if name == 'total_pages' and hasattr(self, 'history'):
            self.history.append(value)
        super().__setattr__(name, value)


def test_page_limits_reject_budgets_without_a_content_page():
    with pytest.raises(ValueError):
        PageLimits(max_total_pages=0)
    with pytest.raises(ValueError):
        PageLimits(max_total_pages=1)
    with pytest.raises(ValueError):
        PageLimits(max_section_pages=0)


def test_counter_is_monotonic_and_matches_page_count():
    state = _CountingState()
    surface = DrawingSurface(invariant=True)
    document = PaginatedDocument(surface, limits=PageLimits(18, 10), state=state)
    document.render_cover(lambda s: s.text('Cover'))
    document.render_sections(
        [
            Section.text_section('Contents', numbered_lines(20, 'Entry')),
            Section.text_section('Policy', numbered_lines(150)),
        ]
    )

    assert state.history == list(range(1, len(state.history) + 1))
    assert state.total_pages == surface.page_count

    content = document.finish()
    assert len(pdf_reader(content).pages) == state.total_pages


def test_global_cap_stops_at_the_limit_with_notice_on_last_page():
    document = _document(PageLimits(max_total_pages=5, max_section_pages=10))
    [outcome] = document.render_sections([Section.text_section('Policy', numbered_lines(400))])
    content = document.finish()

    texts = page_texts(content)
    assert len(texts) == 5
    assert document.state.total_pages == 5
    assert outcome.truncated is TruncationReason.total_page_limit
    assert '(Policy exceeded the page limit.)' in texts[-1]
    assert all(TRUNCATION_NOTICE not in text for text in texts[:-1])


def test_section_cap_stops_section_before_global_cap():
    document = _document(PageLimits(max_total_pages=40, max_section_pages=3))
    outcomes = document.render_sections(
        [
            Section.text_section('Policy', numbered_lines(400)),
            Section.text_section('Disclaimer', 'Short disclaimer.'),
        ]
    )
    content = document.finish()

    texts = page_texts(content)
    assert outcomes[0].truncated is TruncationReason.section_page_limit
    # three content pages plus the page carrying the notice
    assert outcomes[0].pages_used == 4
    assert '(Policy exceeded the section page limit.)' in texts[4]
    assert outcomes[1].truncated is None
    assert len(texts) == 6
    assert 'Short disclaimer.' in texts[5]


def test_global_cap_wins_when_both_caps_fire_together():
    document = _document(PageLimits(max_total_pages=4, max_section_pages=2))
    [outcome] = document.render_sections([Section.text_section('Policy', numbered_lines(400))])
    document.finish()

    assert document.state.total_pages == 4
    assert outcome.pages_used == 3
    assert outcome.truncated is TruncationReason.total_page_limit


def test_capped_sections_are_skipped_once_budget_is_spent():
    document = _document(PageLimits(max_total_pages=3, max_section_pages=10))
    outcomes = document.render_sections(
        [
            Section.text_section('Contents', numbered_lines(400, 'Entry')),
            Section.text_section('Policy', 'Never rendered.'),
        ]
    )
    content = document.finish()

    assert [outcome.heading for outcome in outcomes] == ['Contents']
    assert 'Never rendered.' not in ''.join(page_texts(content))
    assert len(page_texts(content)) == 3


def test_uncapped_section_breaks_pages_without_truncating():
    document = _document(PageLimits(max_total_pages=2, max_section_pages=1))
    [outcome] = document.render_sections(
        [Section.text_section('Quiz Questions', numbered_lines(200, 'Question'), capped=False)]
    )
    content = document.finish()

    assert outcome.truncated is None
    assert outcome.pages_used > 2
    assert len(page_texts(content)) == outcome.pages_used + 1
    assert 'Question 200' in page_texts(content)[-1]


def test_continued_header_repeats_section_name():
    document = _document(PageLimits(18, 10))
    document.render_sections([Section.text_section('Policy', numbered_lines(120))])
    texts = page_texts(document.finish())

    assert len(texts) >= 4
    assert 'POLICY' in texts[2]
    assert 'POLICY' in texts[3]


def test_watermark_on_every_page_in_preview_only():
    preview = _document(PageLimits(18, 10), mode=RenderMode.preview)
    preview.render_sections([Section.text_section('Policy', numbered_lines(120))])
    assert all(b'PREVIEW' in stream for stream in page_streams(preview.finish()))

    download = _document(PageLimits(18, 10))
    download.render_sections([Section.text_section('Policy', numbered_lines(120))])
    assert all(b'PREVIEW' not in stream for stream in page_streams(download.finish()))


def test_truncation_notice_wording():
    assert truncation_notice('Policy', TruncationReason.total_page_limit) == (
        'Content truncated to keep the document readable. (Policy exceeded the page limit.)'
    )
    assert truncation_notice('Contents', TruncationReason.section_page_limit).endswith(
        '(Contents exceeded the section page limit.)'
    )


def test_single_long_line_flows_across_pages():
    words = [f'w{i}' for i in range(3000)]
    document = _document(PageLimits(max_total_pages=40, max_section_pages=40))
    [outcome] = document.render_sections([Section.text_section('Policy', ' '.join(words))])
    texts = page_texts(document.finish())

    assert outcome.truncated is None
    assert outcome.pages_used >= 3
    assert len(texts) == outcome.pages_used + 1
    printed = set(' '.join(texts[1:]).split())
    assert all(word in printed for word in words)
    assert 'w2999' in texts[-1]


def test_single_long_line_still_hits_the_section_cap():
    document = _document(PageLimits(max_total_pages=40, max_section_pages=2))
    [outcome] = document.render_sections([Section.text_section('Policy', ' '.join(f'w{i}' for i in range(6000)))])
    texts = page_texts(document.finish())

    assert outcome.truncated is TruncationReason.section_page_limit
    assert outcome.pages_used == 3
    assert len(texts) == 4
    assert '(Policy exceeded the section page limit.)' in texts[-1]
    assert 'w5999' not in ''.join(texts)
