from __future__ import annotations

import logging
import re

from ..types import ParsedQuestion, QuizOption
from .text import normalize_text


logger = logging.getLogger(__name__)

MAX_OPTIONS = 4

_QUESTION_SPLIT_PATTERN = re.compile(r'\n(?=\d+[.)]\s+)')
_QUESTION_LINE_PATTERN = re.compile(r'^(\d+)[.)]\s*(.+)$', re.MULTILINE)
_QUESTION_PREFIX_PATTERN = re.compile(r'^\d+[.)]\s*')
_CORRECT_ANSWER_PATTERN = re.compile(r'^Correct answer:\s*([ABCD])\b', re.IGNORECASE)
# "A) foo", "A. foo", "A - foo", "A: foo"
_OPTION_PATTERN = re.compile(r'^([ABCD])[).\-:]\s*(.+)$', re.IGNORECASE)
# "A foo" without punctuation
_OPTION_LOOSE_PATTERN = re.compile(r'^([ABCD])\s+(.+)$', re.IGNORECASE)


def _placeholder_questions() -> list[ParsedQuestion]:
    return [ParsedQuestion(number=1, prompt='Quiz', options=[], correct=None)]


def _match_option(line: str) -> QuizOption | None:
    match = _OPTION_PATTERN.match(line) or _OPTION_LOOSE_PATTERN.match(line)
    if match is None:
        return None
    return QuizOption(label=match.group(1).upper(), text=match.group(2).strip())


def _parse_question_block(block: str) -> ParsedQuestion | None:
    question_match = _QUESTION_LINE_PATTERN.search(block)
    if question_match is None:
        return None

    number = int(question_match.group(1))
    lines = [line.strip() for line in block.split('\n')]
    prompt = _QUESTION_PREFIX_PATTERN.sub('', lines[0], count=1).strip()

    options: list[QuizOption] = []
    correct: str | None = None
    for line in lines[1:]:
        correct_match = _CORRECT_ANSWER_PATTERN.match(line)
        if correct_match:
            correct = correct_match.group(1).upper()
            continue
        option = _match_option(line)
        if option is not None:
            options.append(option)

    return ParsedQuestion(
        number=number,
        prompt=prompt,
        options=options[:MAX_OPTIONS],
        correct=correct,
    )


def parse_quiz_text(raw: str | None) -> list[ParsedQuestion]:
    text = normalize_text(raw)
    questions: list[ParsedQuestion] = []
    if text:
        for part in _QUESTION_SPLIT_PATTERN.split(text):
            block = part.strip()
            if not block:
                continue
            question = _parse_question_block(block)
            if question is not None:
                questions.append(question)

    if not questions:
        logger.info('No numbered questions recognised in quiz text; using placeholder.')
        return _placeholder_questions()
    return questions
