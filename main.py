from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from policypdf.config import get_settings
from policypdf.report.pagination import PageLimits
from policypdf.report.policy_pdf import render_policy_pdf
from policypdf.report.quiz_parser import parse_quiz_text
from policypdf.report.quiz_pdf import render_quiz_pdf
from policypdf.report.theme import TRUNCATION_NOTICE
from policypdf.storage import output_path, read_json, read_text, write_bytes_atomic, write_json_atomic
from policypdf.types import PolicyPdfPayload, QuizPdfPayload, RenderedDocument, RenderMode


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _error(message: str) -> int:
    _print_json({'status': 'error', 'message': message})
    return 2


def _configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _limits_from_args(args: argparse.Namespace) -> PageLimits:
    defaults = get_settings().page_limits()
    return PageLimits(
        max_total_pages=defaults.max_total_pages if args.max_total_pages is None else args.max_total_pages,
        max_section_pages=defaults.max_section_pages if args.max_section_pages is None else args.max_section_pages,
    )


def _render_response(document: RenderedDocument, path: Path) -> dict:
    return {
        'status': 'ok',
        'output_path': str(path),
        'mode': document.mode.value,
        'page_count': document.page_count,
        'bytes': len(document.content),
        'truncated': document.truncated,
        'sections': [
            {
                'heading': outcome.heading,
                'pages_used': outcome.pages_used,
                'truncated': outcome.truncated.value if outcome.truncated else None,
            }
            for outcome in document.sections
        ],
    }


def _load_payload(raw_path: str) -> dict:
    path = Path(raw_path).expanduser().resolve()
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f'Payload not found: {path}')
    return read_json(path)


def _write_document(document: RenderedDocument, output: str | None) -> Path:
    path = Path(output).expanduser() if output else output_path(document.filename)
    write_bytes_atomic(path, document.content)
    return path


def cmd_policy(args: argparse.Namespace) -> int:
    try:
        payload = PolicyPdfPayload.model_validate(_load_payload(args.input))
        document = render_policy_pdf(payload, RenderMode.parse(args.mode), limits=_limits_from_args(args))
    except (OSError, ValueError) as exc:
        return _error(str(exc))

    path = _write_document(document, args.output)
    _print_json(_render_response(document, path))
    return 0


def cmd_quiz(args: argparse.Namespace) -> int:
    try:
        payload = QuizPdfPayload.model_validate(_load_payload(args.input))
        document = render_quiz_pdf(
            payload,
            RenderMode.parse(args.mode),
            include_answer_key=False if args.no_answer_key else None,
            limits=_limits_from_args(args),
        )
    except (OSError, ValueError) as exc:
        return _error(str(exc))

    path = _write_document(document, args.output)
    _print_json(_render_response(document, path))
    return 0


def cmd_parse_quiz(args: argparse.Namespace) -> int:
    path = Path(args.input).expanduser().resolve()
    if not path.exists() or not path.is_file():
        return _error(f'Quiz text not found: {path}')

    questions = parse_quiz_text(read_text(path))
    payload = {
        'status': 'ok',
        'question_count': len(questions),
        'questions': [question.model_dump(mode='json') for question in questions],
    }
    if args.output:
        write_json_atomic(Path(args.output).expanduser(), payload)
    _print_json(payload)
    return 0


def _page_content(page) -> bytes:
    contents = page.get_contents()
    if contents is None:
        return b''
    return contents.get_data()


def cmd_inspect(args: argparse.Namespace) -> int:
    path = Path(args.pdf).expanduser().resolve()
    if not path.exists() or not path.is_file():
        return _error(f'PDF not found: {path}')

    try:
        reader = PdfReader(str(path))
        pages = list(reader.pages)
    except PdfReadError as exc:
        return _error(f'Unreadable PDF {path}: {exc}')

    texts = [page.extract_text() or '' for page in pages]
    metadata = reader.metadata
    _print_json(
        {
            'status': 'ok',
            'pdf_path': str(path),
            'page_count': len(pages),
            'title': metadata.title if metadata else None,
            'watermarked_pages': sum(1 for page in pages if b'PREVIEW' in _page_content(page)),
            'truncation_notice_pages': [index + 1 for index, text in enumerate(texts) if TRUNCATION_NOTICE in text],
        }
    )
    return 0


def _add_render_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--input', required=True, help='Path to a JSON payload')
    parser.add_argument('--mode', choices=[mode.value for mode in RenderMode], default=RenderMode.download.value)
    parser.add_argument('--output', required=False, help='Output PDF path (defaults to the configured output dir)')
    parser.add_argument('--max-total-pages', type=int, required=False, help='Override the total page budget')
    parser.add_argument('--max-section-pages', type=int, required=False, help='Override the per-section page budget')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='PolicySprint PDF renderer CLI')
    sub = parser.add_subparsers(dest='command', required=True)

    policy = sub.add_parser('policy', help='Render a policy PDF from a JSON payload')
    _add_render_options(policy)
    policy.set_defaults(func=cmd_policy)

    quiz = sub.add_parser('quiz', help='Render a staff quiz PDF from a JSON payload')
    _add_render_options(quiz)
    quiz.add_argument('--no-answer-key', action='store_true', help='Leave out the answer key section')
    quiz.set_defaults(func=cmd_quiz)

    parse_quiz = sub.add_parser('parse-quiz', help='Parse generated quiz text into questions')
    parse_quiz.add_argument('--input', required=True, help='Path to a plain-text quiz')
    parse_quiz.add_argument('--output', required=False, help='Optional JSON output path')
    parse_quiz.set_defaults(func=cmd_parse_quiz)

    inspect = sub.add_parser('inspect', help='Summarise a rendered PDF')
    inspect.add_argument('--pdf', required=True, help='Path to PDF file')
    inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
