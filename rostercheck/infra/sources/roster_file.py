from __future__ import annotations

from pathlib import Path


def read_roster_text(path: str) -> str:
    """
    Назначение:
        Читает файл ростера как текст (UTF-8, BOM допускается).

    Ошибки:
        OSError - файл отсутствует или не читается; UnicodeDecodeError - не UTF-8.
    """
    with open(Path(path), "r", encoding="utf-8-sig", newline="") as f:
        return f.read()
