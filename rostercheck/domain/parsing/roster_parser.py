from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from rostercheck.domain.exceptions import RosterFormatError
from rostercheck.domain.models import ParseResult, RosterRecord

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r\n|\n")
HEADER_DELIMITER = ","
QUOTE_CHAR = '"'
BOM = "\ufeff"

EMAIL_COLUMN = "email"
FULL_NAME_COLUMN = "fullname"
ROLE_COLUMN = "role"
REPORTS_TO_COLUMN = "reportsto"
REQUIRED_COLUMNS: tuple[str, ...] = (EMAIL_COLUMN, FULL_NAME_COLUMN, ROLE_COLUMN, REPORTS_TO_COLUMN)


@dataclass(frozen=True)
class ColumnLayout:
    """
    Назначение:
        Позиции обязательных колонок, найденные в заголовке.
    """

    email: int
    full_name: int
    role: int
    reports_to: int

    @property
    def min_fields(self) -> int:
        return max(self.email, self.full_name, self.role, self.reports_to) + 1


def resolve_header(header_line: str) -> ColumnLayout:
    """
    Назначение:
        Находит обязательные колонки в строке заголовка (без учёта регистра и порядка).

    Поведение:
        - Заголовок делится по запятой без учёта кавычек.
        - При повторе имени берётся первое вхождение.
        - Нет хотя бы одной колонки -> RosterFormatError.
    """
    names = [cell.lower() for cell in header_line.split(HEADER_DELIMITER)]
    positions: dict[str, int] = {}
    for idx, name in enumerate(names):
        if name in REQUIRED_COLUMNS and name not in positions:
            positions[name] = idx
    missing = [name for name in REQUIRED_COLUMNS if name not in positions]
    if missing:
        raise RosterFormatError(missing_columns=missing)
    return ColumnLayout(
        email=positions[EMAIL_COLUMN],
        full_name=positions[FULL_NAME_COLUMN],
        role=positions[ROLE_COLUMN],
        reports_to=positions[REPORTS_TO_COLUMN],
    )


def split_csv_line(line: str) -> list[str]:
    """
    Назначение:
        Делит строку данных на поля с учётом кавычек.

    Алгоритм:
        - '"' переключает режим "внутри кавычек" и в поле не попадает.
        - ',' вне кавычек завершает поле.
        - Каждое поле тримится.
        - Незакрытая кавычка не ошибка: остаток строки уходит в последнее поле.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == QUOTE_CHAR:
            in_quotes = not in_quotes
        elif char == HEADER_DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def parse_roster_text(text: str) -> ParseResult:
    """
    Назначение:
        Разбирает текст ростера в последовательность RosterRecord.

    Входные данные:
        text: str
            Уже декодированный текст: строка заголовка + строки данных.

    Выходные данные:
        ParseResult
            records - принятые записи по порядку,
            skipped_lines - строки, отброшенные из-за недостатка полей.

    Ошибки:
        RosterFormatError - нет обязательных колонок в заголовке.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]
    lines = LINE_SPLIT_RE.split(text)
    layout = resolve_header(lines[0])

    records: list[RosterRecord] = []
    skipped: list[int] = []
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        values = split_csv_line(line)
        if len(values) < layout.min_fields:
            skipped.append(line_no)
            logger.debug("line %s dropped: %s fields, need %s", line_no, len(values), layout.min_fields)
            continue
        records.append(
            RosterRecord(
                email=values[layout.email],
                full_name=values[layout.full_name],
                role=values[layout.role],
                reports_to=values[layout.reports_to] or "",
                line_no=line_no,
            )
        )
    return ParseResult(records=tuple(records), skipped_lines=tuple(skipped))


def parse_roster(text: str) -> list[RosterRecord]:
    return list(parse_roster_text(text).records)


__all__ = [
    "ColumnLayout",
    "REQUIRED_COLUMNS",
    "parse_roster",
    "parse_roster_text",
    "resolve_header",
    "split_csv_line",
]
