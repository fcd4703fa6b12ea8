"""
Shared fixtures and PDF reading helpers for the renderer tests.
"""
from __future__ import annotations

import io
from pathlib import Path

import pytest
from pypdf import PdfReader

from policypdf.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    path = tmp_path / 'branding'
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, assets_dir: Path) -> Settings:
    return Settings(
        assets_dir=assets_dir,
        output_dir=tmp_path / 'out',
        pdf_invariant=True,
    )


def pdf_reader(content: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(content))


def page_texts(content: bytes) -> list[str]:
    return [page.extract_text() or '' for page in pdf_reader(content).pages]


def page_streams(content: bytes) -> list[bytes]:
    streams = []
    for page in pdf_reader(content).pages:
        contents = page.get_contents()
        streams.append(contents.get_data() if contents is not None else b'')
    return streams


def numbered_lines(count: int, prefix: str = 'Policy line') -> str:
    return '\n'.join(f'{prefix} {index}' for index in range(1, count + 1))
