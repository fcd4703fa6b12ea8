from policypdf.report.text import (
    BodyLine,
    is_numbered_heading_line,
    iter_body_lines,
    normalize_text,
    split_paragraphs,
)


def test_normalize_text_line_endings_and_blank_runs():
    raw = '  Title\r\nFirst\rSecond\f\n\n\n\nThird Fourth Fifth  '
    assert normalize_text(raw) == 'Title\nFirst\nSecond\n\nThird Fourth Fifth'


def test_normalize_text_is_idempotent():
    samples = [
        'a\r\n\r\n\r\n\r\nb',
        '\n\n\nx\n\n\n\n\ny\n',
        'plain',
        '\f  ',
        '',
    ]
    for sample in samples:
        once = normalize_text(sample)
        assert normalize_text(once) == once


def test_normalize_text_non_string_is_empty():
    assert normalize_text(None) == ''
    assert normalize_text(42) == ''
    assert normalize_text(['a']) == ''


def test_split_paragraphs_drops_empty_blocks():
    assert split_paragraphs('one\ntwo\n\n\n\nthree\n\n') == ['one\ntwo', 'three']
    assert split_paragraphs('   ') == []


def test_numbered_heading_detection():
    assert is_numbered_heading_line('1. Purpose')
    assert is_numbered_heading_line('  12) Scope and use')
    assert not is_numbered_heading_line('1.Purpose')
    assert not is_numbered_heading_line('Section 1. Purpose')
    assert not is_numbered_heading_line('')


def test_iter_body_lines_marks_headings_and_paragraph_breaks():
    lines = list(iter_body_lines('1. Purpose\nWhy we have this policy.\n\n2. Scope'))
    assert lines == [
        BodyLine(text='1. Purpose', heading=True),
        BodyLine(text='Why we have this policy.'),
        BodyLine(text='', paragraph_break=True),
        BodyLine(text='2. Scope', heading=True),
    ]
    assert not lines[2].blank


def test_iter_body_lines_keeps_whitespace_only_lines_as_blank():
    lines = list(iter_body_lines('first\n   \nsecond'))
    assert [line.blank for line in lines] == [False, True, False]
