from datetime import date

import pytest

from conftest import page_texts
from policypdf.report.cover import format_generated_date, load_brand_logo
from policypdf.report.footer import stamp_page_footers
from policypdf.report.surface import DEFAULT_TEXT_STYLE, DrawingSurface


def test_text_advances_cursor_by_wrapped_height():
    surface = DrawingSurface(invariant=True)
    surface.add_page()
    surface.move_to(surface.left, 100)

    height = surface.text('word ' * 200, line_gap=2)

    lines = len(surface.wrap('word ' * 200, surface.content_width))
    assert lines > 1
    assert height == pytest.approx(lines * (10 * 1.2 + 2))
    assert surface.y == pytest.approx(100 + height)
    assert surface.measure('word ' * 200, line_gap=2) == pytest.approx(height)


def test_isolated_restores_cursor_and_default_style():
    surface = DrawingSurface(invariant=True)
    surface.add_page()
    surface.move_to(70, 90)

    with surface.isolated():
        surface.set_text_style(font='Helvetica-Bold', size=30, color='#FF0000', alpha=0.2)
        surface.text('Digression', 0, 400)

    assert (surface.x, surface.y) == (70, 90)
    assert surface.text_style == DEFAULT_TEXT_STYLE


def test_switch_to_page_bounds_and_flush_once():
    surface = DrawingSurface(invariant=True)
    surface.add_page()
    surface.add_page()

    with pytest.raises(IndexError):
        surface.switch_to_page(2)

    surface.switch_to_page(0)
    surface.text('Back on the first page')
    surface.switch_to_page(1)

    content = surface.flush()
    assert 'Back on the first page' in page_texts(content)[0]
    with pytest.raises(RuntimeError):
        surface.add_page()


def test_stamp_page_footers_skips_cover():
    surface = DrawingSurface(invariant=True)
    for _ in range(3):
        surface.add_page()

    assert stamp_page_footers(surface) == 2
    assert surface.current_page_index == 2

    texts = page_texts(surface.flush())
    assert 'Page' not in texts[0]
    assert 'Page 1 of 2' in texts[1]
    assert 'Page 2 of 2' in texts[2]


def test_stamp_page_footers_on_cover_only_document():
    surface = DrawingSurface(invariant=True)
    surface.add_page()
    assert stamp_page_footers(surface) == 0


def test_load_brand_logo_uses_first_existing_candidate(tmp_path):
    (tmp_path / 'second.png').write_bytes(b'second')
    (tmp_path / 'third.png').write_bytes(b'third')

    candidates = [tmp_path / 'first.png', tmp_path / 'second.png', tmp_path / 'third.png']
    assert load_brand_logo(candidates) == b'second'
    assert load_brand_logo([tmp_path / 'missing.png', tmp_path]) is None


def test_format_generated_date():
    assert format_generated_date(date(2026, 10, 7)) == '07 October 2026'
