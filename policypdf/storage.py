from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .config import get_settings


def output_root() -> Path:
    root = get_settings().output_dir
    root.mkdir(parents=True, exist_ok=True)
    return root


def output_path(filename: str, directory: Path | None = None) -> Path:
    name = Path(str(filename or '').strip()).name
    if not name:
        raise ValueError('filename is required')
    return (directory or output_root()) / name


def write_bytes_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_bytes(content)
    tmp.replace(path)


def write_json_atomic(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding='utf-8')
    tmp.replace(path)


def read_json(path: Path) -> dict[str, Any]:
    payload = json.loads(path.read_text(encoding='utf-8'))
    if not isinstance(payload, dict):
        raise ValueError(f'expected a JSON object in {path}')
    return payload


def read_text(path: Path) -> str:
    return path.read_text(encoding='utf-8')
