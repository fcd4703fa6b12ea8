from policypdf.report.quiz_parser import parse_quiz_text


WELL_FORMED_QUIZ = """1. What is AI?
A) A tool
B) A person
Correct answer: A)
2. Can AI be wrong?
A) Yes
B) No
Correct answer: A)
"""


def test_parse_well_formed_quiz():
    questions = parse_quiz_text(WELL_FORMED_QUIZ)

    assert len(questions) == 2
    assert [q.number for q in questions] == [1, 2]
    assert questions[0].prompt == 'What is AI?'
    assert [(o.label, o.text) for o in questions[0].options] == [('A', 'A tool'), ('B', 'A person')]
    assert [(o.label, o.text) for o in questions[1].options] == [('A', 'Yes'), ('B', 'No')]
    assert all(q.correct == 'A' for q in questions)


def test_parse_accepts_option_variants_and_lowercase_letters():
    raw = '1) Pick one\na. first\nB- second\nc: third\nD fourth\ncorrect answer: c'
    [question] = parse_quiz_text(raw)

    assert [o.label for o in question.options] == ['A', 'B', 'C', 'D']
    assert [o.text for o in question.options] == ['first', 'second', 'third', 'fourth']
    assert question.correct == 'C'


def test_parse_caps_options_at_four():
    raw = '1. Too many\nA) one\nB) two\nC) three\nD) four\nA) again'
    [question] = parse_quiz_text(raw)
    assert len(question.options) == 4
    assert question.options[-1].text == 'four'


def test_parse_drops_unrecognised_lines():
    raw = '1. Question\nSome explanation\nA) yes\n\nNotes: none\n2. Next\nB) maybe'
    questions = parse_quiz_text(raw)

    assert len(questions) == 2
    assert [o.text for o in questions[0].options] == ['yes']
    assert questions[0].correct is None
    assert questions[1].options[0].label == 'B'


def test_parse_without_structure_returns_placeholder():
    questions = parse_quiz_text('Just some prose about AI policy.\nNothing numbered here.')

    assert len(questions) == 1
    assert questions[0].number == 1
    assert questions[0].prompt == 'Quiz'
    assert questions[0].options == []
    assert questions[0].correct is None


def test_parse_empty_input_returns_placeholder():
    assert len(parse_quiz_text(None)) == 1
    assert len(parse_quiz_text('   \r\n ')) == 1
